from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from vessel_tools.core.errors import PhysicsHoldError
from vessel_tools.objects.body import CelestialBody
from vessel_tools.objects.vessel import Vessel
from vessel_tools.simulation.events import EventBus
from vessel_tools.simulation.physics import PhysicsManager


@dataclass
class Scenario:
    """
    The running simulation: bodies, vessels, clock and notification channel.
    Keep this pure: just data + lookup, no stepping logic.
    """
    name: str
    bodies: Dict[str, CelestialBody] = field(default_factory=dict)
    vessels: Dict[str, Vessel] = field(default_factory=dict)
    universal_time_s: float = 0.0
    paused: bool = False
    events: EventBus = field(default_factory=EventBus)
    physics: Optional[PhysicsManager] = field(default_factory=PhysicsManager)

    def add_body(self, body: CelestialBody) -> None:
        if body.name in self.bodies:
            raise ValueError(f"Duplicate body name: {body.name}")
        self.bodies[body.name] = body

    def add_vessel(self, vessel: Vessel) -> None:
        if vessel.vessel_id in self.vessels:
            raise ValueError(f"Duplicate vessel ID: {vessel.vessel_id}")
        self.vessels[vessel.vessel_id] = vessel

    def body_list(self) -> List[CelestialBody]:
        return list(self.bodies.values())

    def vessel_list(self) -> List[Vessel]:
        return list(self.vessels.values())

    def hold_vessel_unpack(self, duration_s: float) -> None:
        if self.physics is None:
            raise PhysicsHoldError("No physics manager attached to the scenario.")
        self.physics.hold_vessel_unpack(duration_s, self.universal_time_s)

    def physics_hold_active(self) -> bool:
        return self.physics is not None and self.physics.hold_active(self.universal_time_s)
