from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from vessel_tools.core.frames import Vector3, ZERO


@dataclass(eq=False)
class CelestialBody:
    """
    A body that orbits are measured around.
    Compared by identity: two bodies with equal numbers are still different bodies.
    """
    name: str
    mu_m3_s2: float
    radius_m: float
    soi_radius_m: float
    atmosphere_height_m: float = 0.0
    position_world: Vector3 = ZERO
    parent: Optional["CelestialBody"] = None

    def __post_init__(self):
        if not self.name.strip():
            raise ValueError("Body name cannot be empty or whitespace.")
        if not (math.isfinite(self.mu_m3_s2) and self.mu_m3_s2 > 0):
            raise ValueError(f"Gravitational parameter must be positive. Got: {self.mu_m3_s2}")
        if not (math.isfinite(self.radius_m) and self.radius_m > 0):
            raise ValueError(f"Radius must be positive. Got: {self.radius_m}")
        if self.atmosphere_height_m < 0:
            raise ValueError(f"Atmosphere height must be non-negative. Got: {self.atmosphere_height_m}")
        if not self.soi_radius_m > self.radius_m:
            raise ValueError(f"Sphere of influence must exceed the radius. Got: {self.soi_radius_m}")

    def __repr__(self) -> str:
        return f"CelestialBody({self.name!r})"
