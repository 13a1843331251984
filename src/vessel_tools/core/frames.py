from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from vessel_tools.objects.body import CelestialBody
    from vessel_tools.objects.part import Transform

Vector3 = Tuple[float, float, float]
Quaternion = Tuple[float, float, float, float]  # (x, y, z, w)

ZERO: Vector3 = (0.0, 0.0, 0.0)
IDENTITY: Quaternion = (0.0, 0.0, 0.0, 1.0)


def dot(a: Vector3, b: Vector3) -> float:
    return a[0]*b[0] + a[1]*b[1] + a[2]*b[2]


def cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1]*b[2] - a[2]*b[1],
        a[2]*b[0] - a[0]*b[2],
        a[0]*b[1] - a[1]*b[0],
    )


def add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]+b[0], a[1]+b[1], a[2]+b[2])


def sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0]-b[0], a[1]-b[1], a[2]-b[2])


def scale(v: Vector3, s: float) -> Vector3:
    return (v[0]*s, v[1]*s, v[2]*s)


def norm(a: Vector3) -> float:
    return math.sqrt(dot(a, a))


def normalize(a: Vector3) -> Vector3:
    n = norm(a)
    if n == 0:
        raise ValueError("Cannot normalize a zero vector.")
    return scale(a, 1.0 / n)


def swizzle_xzy(v: Vector3) -> Vector3:
    """
    Swap y and z. Maps world space (y-up) to the orbit frame (z-up) and back.
    """
    return (v[0], v[2], v[1])


def rot3(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (c * x - s * y, s * x + c * y, z)


def rot1(angle_rad: float, v: Vector3) -> Vector3:
    c = math.cos(angle_rad)
    s = math.sin(angle_rad)
    x, y, z = v
    return (x, c * y - s * z, s * y + c * z)


def perifocal_to_inertial(r_pqw: Vector3, v_pqw: Vector3, lan_rad: float, inc_rad: float, argp_rad: float) -> Tuple[Vector3, Vector3]:
    """
    Convert position and velocity from the perifocal (PQW) frame to the
    body-centred inertial frame.

    Rotation sequence: R3(lan) * R1(inc) * R3(argp), applied argp first.
    """
    r = rot3(argp_rad, r_pqw)
    v = rot3(argp_rad, v_pqw)

    r = rot1(inc_rad, r)
    v = rot1(inc_rad, v)

    r = rot3(lan_rad, r)
    v = rot3(lan_rad, v)
    return r, v


def quat_multiply(a: Quaternion, b: Quaternion) -> Quaternion:
    """Hamilton product a*b (apply b, then a)."""
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return (
        aw*bx + ax*bw + ay*bz - az*by,
        aw*by - ax*bz + ay*bw + az*bx,
        aw*bz + ax*by - ay*bx + az*bw,
        aw*bw - ax*bx - ay*by - az*bz,
    )


def quat_conjugate(q: Quaternion) -> Quaternion:
    return (-q[0], -q[1], -q[2], q[3])


def quat_normalize(q: Quaternion) -> Quaternion:
    n = math.sqrt(q[0]**2 + q[1]**2 + q[2]**2 + q[3]**2)
    if n == 0:
        raise ValueError("Cannot normalize a zero quaternion.")
    return (q[0]/n, q[1]/n, q[2]/n, q[3]/n)


def quat_rotate(q: Quaternion, v: Vector3) -> Vector3:
    p = (v[0], v[1], v[2], 0.0)
    x, y, z, _w = quat_multiply(quat_multiply(q, p), quat_conjugate(q))
    return (x, y, z)


def quat_from_axis_angle(axis: Vector3, angle_rad: float) -> Quaternion:
    ux, uy, uz = normalize(axis)
    s = math.sin(angle_rad / 2.0)
    return (ux * s, uy * s, uz * s, math.cos(angle_rad / 2.0))


@dataclass(frozen=True)
class ReferenceFrame:
    """
    A frame whose origin sits at `origin` (world space), moving with
    `velocity`, spinning at `angular_velocity` (world space), with
    `rotation` taking local directions to world directions.

    `swap_yz` marks frames whose local axes are z-up (the orbit convention),
    so local vectors are swizzled before the rotation is applied.
    """
    origin: Vector3 = ZERO
    rotation: Quaternion = IDENTITY
    velocity: Vector3 = ZERO
    angular_velocity: Vector3 = ZERO
    swap_yz: bool = False

    @classmethod
    def world(cls) -> "ReferenceFrame":
        return cls()

    @classmethod
    def body_inertial(cls, body: "CelestialBody") -> "ReferenceFrame":
        """Body-centred, non-rotating frame using the orbit axis convention."""
        return cls(origin=body.position_world, swap_yz=True)

    @classmethod
    def from_transform(cls, transform: "Transform") -> "ReferenceFrame":
        return cls(origin=transform.position, rotation=transform.world_rotation)

    def _local_dir_to_world(self, v: Vector3) -> Vector3:
        if self.swap_yz:
            v = swizzle_xzy(v)
        return quat_rotate(self.rotation, v)

    def _world_dir_to_local(self, v: Vector3) -> Vector3:
        v = quat_rotate(quat_conjugate(self.rotation), v)
        if self.swap_yz:
            v = swizzle_xzy(v)
        return v

    def position_to_world(self, position: Vector3) -> Vector3:
        return add(self.origin, self._local_dir_to_world(position))

    def direction_to_world(self, direction: Vector3) -> Vector3:
        return self._local_dir_to_world(direction)

    def velocity_to_world(self, position: Vector3, velocity: Vector3) -> Vector3:
        """
        Velocity of a point moving at `velocity` through `position` (both local).
        The frame's own spin contributes omega x r at that point.
        """
        r_world = self._local_dir_to_world(position)
        v_world = self._local_dir_to_world(velocity)
        return add(add(self.velocity, v_world), cross(self.angular_velocity, r_world))

    def rotation_to_world(self, rotation: Quaternion) -> Quaternion:
        return quat_multiply(self.rotation, rotation)

    def position_from_world(self, position: Vector3) -> Vector3:
        return self._world_dir_to_local(sub(position, self.origin))

    def direction_from_world(self, direction: Vector3) -> Vector3:
        return self._world_dir_to_local(direction)

    def velocity_from_world(self, position: Vector3, velocity: Vector3) -> Vector3:
        r_world = sub(position, self.origin)
        v_rel = sub(sub(velocity, self.velocity), cross(self.angular_velocity, r_world))
        return self._world_dir_to_local(v_rel)

    def rotation_from_world(self, rotation: Quaternion) -> Quaternion:
        return quat_multiply(quat_conjugate(self.rotation), rotation)
