from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from vessel_tools.core.frames import IDENTITY, Quaternion, Vector3, ZERO, add, swizzle_xzy
from vessel_tools.objects.live_orbit import LiveOrbit
from vessel_tools.objects.part import LaunchClamp, Part


@dataclass(eq=False)
class Vessel:
    """
    A vessel in the running simulation.

    World kinematics (position/velocity/rotation of the centre of mass) can be
    set directly. Direct writes mark the kinematics dirty so the next physics
    step re-derives the orbit from them.
    """
    vessel_id: str
    name: str
    orbit: LiveOrbit
    parts: List[Part] = field(default_factory=list)

    landed: bool = False
    splashed: bool = False
    landed_at: str = ""
    on_rails: bool = False

    world_position: Vector3 = ZERO
    world_velocity: Vector3 = ZERO
    world_rotation: Quaternion = IDENTITY
    kinematics_dirty: bool = False

    def __post_init__(self):
        if not self.vessel_id.strip():
            raise ValueError("Vessel ID cannot be empty or whitespace.")
        self.orbit.owner = self
        for part in self.parts:
            part.vessel = self

    def add_part(self, part: Part) -> None:
        part.vessel = self
        self.parts.append(part)

    def remove_part(self, part: Part) -> None:
        if part in self.parts:
            self.parts.remove(part)

    def launch_clamps(self) -> List[Part]:
        return [p for p in self.parts if p.has_module(LaunchClamp)]

    def set_position(self, position: Vector3) -> None:
        self.world_position = position
        self.kinematics_dirty = True

    def set_world_velocity(self, velocity: Vector3) -> None:
        self.world_velocity = velocity
        self.kinematics_dirty = True

    def set_rotation(self, rotation: Quaternion) -> None:
        self.world_rotation = rotation

    def go_on_rails(self) -> None:
        self.on_rails = True

    def go_off_rails(self) -> None:
        self.on_rails = False

    def sync_from_orbit(self, ut_s: Optional[float] = None) -> None:
        """
        Copy the orbit's position/velocity into world kinematics.
        Re-evaluates the orbit first when ut_s is given.
        """
        if ut_s is not None:
            self.orbit.update_from_ut(ut_s)
        if self.orbit.pos is None or self.orbit.vel is None:
            raise RuntimeError(f"Orbit of {self.name} has not been evaluated.")
        body = self.orbit.body
        self.world_position = add(body.position_world, swizzle_xzy(self.orbit.pos))
        self.world_velocity = swizzle_xzy(self.orbit.vel)
        self.kinematics_dirty = False
