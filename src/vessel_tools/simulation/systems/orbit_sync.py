from __future__ import annotations

import logging
from dataclasses import dataclass

from vessel_tools.core.frames import sub, swizzle_xzy
from vessel_tools.physics.orbit import state_to_elements
from vessel_tools.services.orbit_installer import OrbitInstaller
from vessel_tools.simulation.scenario import Scenario
from vessel_tools.simulation.engine import SimulationLog

logger = logging.getLogger(__name__)


@dataclass
class OrbitSyncSystem:
    """
    Keeps each vessel's orbit and world kinematics consistent.

    Off-rails vessels whose kinematics were set directly get a new orbit
    determined from that state. Every flying vessel is then moved along its
    orbit. Vessels held on rails are released once the physics hold ends.
    """
    name: str = "orbit_sync"

    def on_step(self, t_s: float, scenario: Scenario, log: SimulationLog) -> None:
        installer = OrbitInstaller(scenario)
        hold = scenario.physics_hold_active()

        for vessel in scenario.vessel_list():
            if vessel.on_rails and not hold:
                vessel.go_off_rails()

            if vessel.landed or vessel.splashed:
                continue

            if vessel.kinematics_dirty and not vessel.on_rails:
                body = vessel.orbit.body
                r = swizzle_xzy(sub(vessel.world_position, body.position_world))
                v = swizzle_xzy(vessel.world_velocity)
                try:
                    elements = state_to_elements(r, v, body, t_s)
                except ValueError as exc:
                    logger.warning("Cannot derive an orbit for %s: %s", vessel.name, exc)
                    continue
                installer.install(vessel.orbit, elements)

            vessel.sync_from_orbit(t_s)
