"""
Thruster geometry and gimbal overrides.

A Thruster is one nozzle of an engine or RCS part. Positions and directions
are reported in any ReferenceFrame. Gimbal overrides are GimbalControl
adjusters tracked by a GimbalControlRegistry that the owning service
creates and tears down.
"""

from __future__ import annotations

import math
from typing import Iterator, List, Optional, Sequence

from vessel_tools.core.frames import (
    Quaternion,
    ReferenceFrame,
    Vector3,
    ZERO,
    quat_from_axis_angle,
    quat_multiply,
    scale,
)
from vessel_tools.objects.part import EngineModule, GimbalModule, Part, RcsModule, Transform


class GimbalControlRegistry:
    """Active gimbal overrides, so they can all be released at once."""

    def __init__(self):
        self._controls: List["GimbalControl"] = []

    def __len__(self) -> int:
        return len(self._controls)

    def __iter__(self) -> Iterator["GimbalControl"]:
        return iter(list(self._controls))

    def __contains__(self, control: object) -> bool:
        return any(c is control for c in self._controls)

    def register(self, control: "GimbalControl") -> None:
        if control not in self:
            self._controls.append(control)

    def unregister(self, control: "GimbalControl") -> None:
        self._controls = [c for c in self._controls if c is not control]

    def disable_all(self) -> int:
        """Disable every registered override. Returns how many were disabled."""
        controls = list(self._controls)
        for control in controls:
            control.disable()
        self._controls.clear()
        return len(controls)


class GimbalControl:
    """
    Takes over a gimbal's control input: while enabled, the gimbal actuates
    to `control` regardless of what flight control asks for.
    """

    def __init__(self, gimbal: GimbalModule, registry: GimbalControlRegistry):
        self.gimbal = gimbal
        self.registry = registry
        self.setting: Vector3 = ZERO
        self.enabled = True
        gimbal.add_adjuster(self)
        registry.register(self)

    def apply_control_adjustment(self, control: Vector3) -> Vector3:
        return self.setting

    @property
    def control(self) -> Vector3:
        return self.setting

    @control.setter
    def control(self, value: Sequence[float]) -> None:
        if len(value) != 3:
            raise ValueError("Gimbal control must have 3 components (pitch, yaw, roll).")
        self.setting = (float(value[0]), float(value[1]), float(value[2]))

    def disable(self) -> None:
        """Permanently remove the override."""
        self.gimbal.remove_adjuster(self)
        self.registry.unregister(self)
        self.enabled = False


class Thruster:
    """
    The component of an engine or RCS part that generates thrust.
    Engines may have several nozzles, one Thruster each.
    """

    def __init__(
        self,
        part: Part,
        transform_index: int,
        engine: Optional[EngineModule] = None,
        rcs: Optional[RcsModule] = None,
        gimbal: Optional[GimbalModule] = None,
    ):
        if (engine is None) == (rcs is None):
            raise ValueError("A thruster belongs to exactly one engine or RCS module.")
        self.part = part
        self.transform_index = transform_index
        self.engine = engine
        self.rcs = rcs
        self.gimbal = gimbal
        self._saved_rotation: Optional[Quaternion] = None

    @classmethod
    def for_part(cls, part: Part) -> List["Thruster"]:
        engine = part.module(EngineModule)
        if engine is not None:
            gimbal = part.module(GimbalModule)
            return [cls(part, i, engine=engine, gimbal=gimbal) for i in range(len(engine.thrust_transforms))]
        rcs = part.module(RcsModule)
        if rcs is not None:
            return [cls(part, i, rcs=rcs) for i in range(len(rcs.thruster_transforms))]
        return []

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Thruster)
            and self.part is other.part
            and self.transform_index == other.transform_index
        )

    def __hash__(self) -> int:
        return id(self.part) ^ hash(self.transform_index)

    @property
    def world_transform(self) -> Transform:
        transforms = self.engine.thrust_transforms if self.engine is not None else self.rcs.thruster_transforms
        return transforms[self.transform_index]

    @property
    def world_thrust_direction(self) -> Vector3:
        """Direction of the force, opposite to the exhaust."""
        transform = self.world_transform
        if self.rcs is not None and not self.rcs.use_z_axis:
            return scale(transform.up, -1.0)
        return scale(transform.forward, -1.0)

    @property
    def gimballed(self) -> bool:
        return self.gimbal is not None

    def _check_gimballed(self) -> None:
        if not self.gimballed:
            raise RuntimeError("The engine is not gimballed")

    @staticmethod
    def _check_frame(reference_frame: ReferenceFrame) -> None:
        if reference_frame is None:
            raise ValueError("reference_frame must not be None")

    def thrust_position(self, reference_frame: ReferenceFrame) -> Vector3:
        """Where thrust is generated, including the current gimbal swing."""
        self._check_frame(reference_frame)
        return reference_frame.position_from_world(self.world_transform.position)

    def thrust_direction(self, reference_frame: ReferenceFrame) -> Vector3:
        """Unit direction of the force, including the current gimbal swing."""
        self._check_frame(reference_frame)
        return reference_frame.direction_from_world(self.world_thrust_direction)

    def initial_thrust_position(self, reference_frame: ReferenceFrame) -> Vector3:
        """Thrust position with the gimbal in its initial (centred) rotation."""
        self._check_frame(reference_frame)
        self._stash_gimbal_rotation()
        try:
            position = self.world_transform.position
        finally:
            self._restore_gimbal_rotation()
        return reference_frame.position_from_world(position)

    def initial_thrust_direction(self, reference_frame: ReferenceFrame) -> Vector3:
        """Thrust direction with the gimbal in its initial (centred) rotation."""
        self._check_frame(reference_frame)
        self._stash_gimbal_rotation()
        try:
            direction = self.world_thrust_direction
        finally:
            self._restore_gimbal_rotation()
        return reference_frame.direction_from_world(direction)

    @property
    def thrust_reference_frame(self) -> ReferenceFrame:
        """
        Origin at the thrust position; +y along the exhaust direction,
        following any gimbal swing.
        """
        transform = self.world_transform
        rotation = transform.world_rotation
        if self.rcs is None or self.rcs.use_z_axis:
            # Bring local +y onto the transform's +z (exhaust) axis
            rotation = quat_multiply(rotation, quat_from_axis_angle((1.0, 0.0, 0.0), math.pi / 2.0))
        return ReferenceFrame(origin=transform.position, rotation=rotation)

    def gimbal_position(self, reference_frame: ReferenceFrame) -> Vector3:
        """Point the gimbal pivots around."""
        self._check_frame(reference_frame)
        self._check_gimballed()
        return reference_frame.position_from_world(self.gimbal.gimbal_transforms[self.transform_index].position)

    @property
    def gimbal_angle(self) -> Vector3:
        """Current actuation in pitch, yaw and roll."""
        self._check_gimballed()
        return self.gimbal.actuation

    def gimbal_control(self, registry: GimbalControlRegistry) -> GimbalControl:
        """Take over this thruster's gimbal."""
        self._check_gimballed()
        return GimbalControl(self.gimbal, registry)

    def _stash_gimbal_rotation(self) -> None:
        if self.gimbal is None:
            return
        transform = self.gimbal.gimbal_transforms[self.transform_index]
        self._saved_rotation = transform.local_rotation
        transform.local_rotation = self.gimbal.init_rotations[self.transform_index]

    def _restore_gimbal_rotation(self) -> None:
        if self.gimbal is None or self._saved_rotation is None:
            return
        self.gimbal.gimbal_transforms[self.transform_index].local_rotation = self._saved_rotation
        self._saved_rotation = None
