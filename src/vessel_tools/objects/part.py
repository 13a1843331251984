from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Type, TypeVar, TYPE_CHECKING

from vessel_tools.core.frames import (
    IDENTITY,
    Quaternion,
    Vector3,
    ZERO,
    quat_multiply,
    quat_rotate,
)

if TYPE_CHECKING:
    from vessel_tools.objects.vessel import Vessel

M = TypeVar("M")


@dataclass(eq=False)
class Transform:
    """
    A world-space pose. `local_rotation` is the deflection applied on top
    of `rotation` (a gimbal's current swing).
    """
    position: Vector3 = ZERO
    rotation: Quaternion = IDENTITY
    local_rotation: Quaternion = IDENTITY

    @property
    def world_rotation(self) -> Quaternion:
        return quat_multiply(self.rotation, self.local_rotation)

    @property
    def forward(self) -> Vector3:
        return quat_rotate(self.world_rotation, (0.0, 0.0, 1.0))

    @property
    def up(self) -> Vector3:
        return quat_rotate(self.world_rotation, (0.0, 1.0, 0.0))

    @property
    def right(self) -> Vector3:
        return quat_rotate(self.world_rotation, (1.0, 0.0, 0.0))


class ControlAdjuster(Protocol):
    """Rewrites the control input a gimbal receives."""

    def apply_control_adjustment(self, control: Vector3) -> Vector3:
        ...


@dataclass(eq=False)
class LaunchClamp:
    """Ground attachment. Destroyed when its vessel is relocated."""
    height_m: float = 0.0


@dataclass(eq=False)
class GimbalModule:
    """
    Thrust vectoring. `gimbal_transforms[i]` is shared with the matching
    thrust transform, so swinging it swings the nozzle.
    """
    gimbal_transforms: List[Transform] = field(default_factory=list)
    init_rotations: List[Quaternion] = field(default_factory=list)
    gimbal_range_deg: float = 5.0
    actuation: Vector3 = ZERO
    adjusters: List[ControlAdjuster] = field(default_factory=list)

    def __post_init__(self):
        if not self.init_rotations:
            self.init_rotations = [t.local_rotation for t in self.gimbal_transforms]
        if len(self.init_rotations) != len(self.gimbal_transforms):
            raise ValueError("Need one initial rotation per gimbal transform.")

    def add_adjuster(self, adjuster: ControlAdjuster) -> None:
        self.adjusters.append(adjuster)

    def remove_adjuster(self, adjuster: ControlAdjuster) -> None:
        if adjuster in self.adjusters:
            self.adjusters.remove(adjuster)

    def apply_control(self, control: Vector3) -> Vector3:
        """Run the flight control input through the adjusters into `actuation`."""
        for adjuster in self.adjusters:
            control = adjuster.apply_control_adjustment(control)
        self.actuation = control
        return control


@dataclass(eq=False)
class EngineModule:
    thrust_transforms: List[Transform] = field(default_factory=list)
    max_thrust_n: float = 0.0


@dataclass(eq=False)
class RcsModule:
    thruster_transforms: List[Transform] = field(default_factory=list)
    use_z_axis: bool = False


@dataclass(eq=False)
class Part:
    name: str
    modules: List[object] = field(default_factory=list)
    vessel: Optional["Vessel"] = None
    alive: bool = True

    def module(self, kind: Type[M]) -> Optional[M]:
        for m in self.modules:
            if isinstance(m, kind):
                return m
        return None

    def has_module(self, kind: type) -> bool:
        return self.module(kind) is not None

    def die(self) -> None:
        """Destroy the part and detach it from its vessel."""
        self.alive = False
        if self.vessel is not None:
            self.vessel.remove_part(self)
            self.vessel = None
