"""
Vessel relocation ("teleport") procedures for debugging.

Three ways to move a vessel:
- teleport_direct:      overwrite world position/velocity/rotation
- teleport_using_orbit: determine an orbit from a state vector and install it
- set_orbit:            repair raw orbital elements and install them

Orbit-based moves go through the same sequence: destination safety gate,
quiesce, physics hold, every vessel on rails, install, kinematics refresh.
A rejected destination is logged and leaves the vessel untouched.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from vessel_tools.core.config import DebugToolsConfig
from vessel_tools.core.errors import PhysicsHoldError
from vessel_tools.core.frames import (
    Quaternion,
    ReferenceFrame,
    Vector3,
    sub,
    swizzle_xzy,
)
from vessel_tools.objects.body import CelestialBody
from vessel_tools.objects.vessel import Vessel
from vessel_tools.physics.orbit import OrbitalElements, RawOrbitalElements, elements_to_state, state_to_elements
from vessel_tools.physics.sanitizer import sanitize_elements
from vessel_tools.services.orbit_installer import OrbitInstaller
from vessel_tools.services.thrusters import GimbalControlRegistry, Thruster
from vessel_tools.simulation.scenario import Scenario

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoldResult:
    """Outcome of a physics hold request. Failure is a warning, never an abort."""
    acquired: bool
    warning: Optional[str] = None


def _vector3(value: Sequence[float], name: str) -> Vector3:
    if value is None or len(value) != 3:
        raise ValueError(f"{name} must have 3 components.")
    return (float(value[0]), float(value[1]), float(value[2]))


def _quaternion(value: Sequence[float], name: str) -> Quaternion:
    if value is None or len(value) != 4:
        raise ValueError(f"{name} must have 4 components (x, y, z, w).")
    return (float(value[0]), float(value[1]), float(value[2]), float(value[3]))


class DebugTools:
    """
    "Cheat" service for moving vessels around a running scenario.
    """

    def __init__(self, scenario: Scenario, config: Optional[DebugToolsConfig] = None):
        self.scenario = scenario
        self.config = config or DebugToolsConfig()
        self.installer = OrbitInstaller(scenario)
        self.gimbal_controls = GimbalControlRegistry()

    def close(self) -> None:
        """Release everything the service took over."""
        self.disable_all_gimbal_controls()

    # Preparation

    def quiesce(self, vessel: Vessel) -> int:
        """
        Clear ground contact so the vessel can be moved: landed/splashed flags,
        the landing-site tag, and every launch clamp.

        Returns:
            Number of launch clamps destroyed
        """
        if vessel.landed:
            vessel.landed = False
            logger.info("Set %s.landed = False", vessel.name)
        if vessel.splashed:
            vessel.splashed = False
            logger.info("Set %s.splashed = False", vessel.name)
        if vessel.landed_at != "":
            vessel.landed_at = ""
            logger.info("Set %s.landed_at = \"\"", vessel.name)

        killcount = 0
        for part in vessel.launch_clamps():
            killcount += 1
            part.die()
        if killcount != 0:
            logger.info("Removed %d launch clamps from %s", killcount, vessel.name)
        return killcount

    def check_destination(self, elements: OrbitalElements) -> bool:
        """
        Accept a destination only if it lies between the surface and the
        sphere of influence of its reference body at the current time.
        """
        body = elements.body
        try:
            r, _v = elements_to_state(elements, self.scenario.universal_time_s)
        except (ValueError, RuntimeError, ArithmeticError) as exc:
            logger.error("Destination orbit cannot be evaluated: %s", exc)
            return False

        distance = math.hypot(*r)
        if not math.isfinite(distance):
            logger.error("Destination position is not finite")
            return False
        if distance > body.soi_radius_m:
            logger.error("Destination position was above the sphere of influence")
            return False
        if distance < body.radius_m:
            logger.error("Destination position was below the surface")
            return False
        return True

    def request_physics_hold(self) -> HoldResult:
        try:
            self.scenario.hold_vessel_unpack(self.config.physics_hold_s)
        except PhysicsHoldError as exc:
            warning = f"Physics hold unavailable: {exc}"
            logger.error(warning)
            return HoldResult(acquired=False, warning=warning)
        return HoldResult(acquired=True)

    def apply_orbit(self, vessel: Vessel, elements: OrbitalElements) -> bool:
        """
        Move `vessel` onto `elements`.

        Returns:
            False if the destination was rejected (nothing changed), True otherwise
        """
        if not self.check_destination(elements):
            return False

        self.quiesce(vessel)
        self.request_physics_hold()

        vessels = self.scenario.vessel_list() or [vessel]
        if vessel not in vessels:
            vessels.append(vessel)
        # Orbits may only be edited while packed
        for v in vessels:
            v.go_on_rails()

        self.installer.install(vessel.orbit, elements)
        vessel.sync_from_orbit()
        return True

    # Procedures

    def teleport_direct(
        self,
        vessel: Vessel,
        reference_frame: ReferenceFrame,
        position: Sequence[float],
        velocity: Sequence[float],
        rotation: Sequence[float],
    ) -> None:
        """
        Move the vessel's centre of mass to `position` in `reference_frame`,
        moving at `velocity` with orientation `rotation`, by writing its world
        kinematics. The orbit follows on the next physics step.
        """
        if vessel is None:
            raise ValueError("vessel must not be None")
        if reference_frame is None:
            raise ValueError("reference_frame must not be None")
        position = _vector3(position, "position")
        velocity = _vector3(velocity, "velocity")
        rotation = _quaternion(rotation, "rotation")

        world_position = reference_frame.position_to_world(position)
        world_velocity = reference_frame.velocity_to_world(position, velocity)
        world_rotation = reference_frame.rotation_to_world(rotation)

        self.quiesce(vessel)
        vessel.set_position(world_position)
        vessel.set_world_velocity(world_velocity)
        vessel.set_rotation(world_rotation)

    def teleport_using_orbit(
        self,
        vessel: Vessel,
        reference_frame: ReferenceFrame,
        position: Sequence[float],
        velocity: Sequence[float],
        rotation: Sequence[float],
    ) -> bool:
        """
        Move the vessel's centre of mass to `position` in `reference_frame`,
        moving at `velocity` with orientation `rotation`, by replacing its
        orbit with the one that passes through that state.

        The orbit is measured around the vessel's current reference body.
        Raises ValueError for a state vector with no defined orbit (zero
        position relative to the body, purely radial or parabolic motion).
        """
        if vessel is None:
            raise ValueError("vessel must not be None")
        if reference_frame is None:
            raise ValueError("reference_frame must not be None")
        position = _vector3(position, "position")
        velocity = _vector3(velocity, "velocity")
        rotation = _quaternion(rotation, "rotation")

        world_position = reference_frame.position_to_world(position)
        world_velocity = reference_frame.velocity_to_world(position, velocity)
        world_rotation = reference_frame.rotation_to_world(rotation)

        current = vessel.orbit.elements
        body = current.body
        r = swizzle_xzy(sub(world_position, body.position_world))
        v = swizzle_xzy(world_velocity)
        elements = state_to_elements(r, v, body, self.scenario.universal_time_s)

        if not self.apply_orbit(vessel, elements):
            return False
        vessel.set_rotation(world_rotation)
        return True

    def set_orbit(
        self,
        vessel: Vessel,
        inc: float,
        e: float,
        sma: float,
        lan: float,
        w: float,
        mEp: float,
        epoch: float,
        body: CelestialBody,
    ) -> bool:
        """
        Change the vessel's orbit to the one given by the elements. Missing or
        degenerate values are repaired rather than rejected.
        """
        if vessel is None:
            raise ValueError("vessel must not be None")
        if body is None:
            raise ValueError("body must not be None")
        raw = RawOrbitalElements(
            inc_rad=float(inc),
            e=float(e),
            sma_m=float(sma),
            lan_rad=float(lan),
            argp_rad=float(w),
            M0_rad=float(mEp),
            epoch_s=float(epoch),
        )
        elements = sanitize_elements(
            raw,
            body,
            self.scenario.universal_time_s,
            angle_epsilon_rad=self.config.angle_epsilon_rad,
            sma_margin_m=self.config.sma_safety_margin_m,
        )
        return self.apply_orbit(vessel, elements)

    def set_paused(self, paused: bool) -> None:
        self.scenario.paused = bool(paused)

    def get_paused(self) -> bool:
        return self.scenario.paused

    def thrusters(self, vessel: Vessel) -> List[Thruster]:
        if vessel is None:
            raise ValueError("vessel must not be None")
        return [t for part in vessel.parts for t in Thruster.for_part(part)]

    def disable_all_gimbal_controls(self) -> None:
        count = self.gimbal_controls.disable_all()
        if count:
            logger.info("Disabled %d gimbal controls", count)
