from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from vessel_tools.core.frames import Vector3, norm
from vessel_tools.physics.orbit import OrbitalElements, elements_to_state
from vessel_tools.physics import orbit as kepler

if TYPE_CHECKING:
    from vessel_tools.objects.body import CelestialBody
    from vessel_tools.objects.vessel import Vessel


@dataclass(eq=False)
class LiveOrbit:
    """
    The persistent orbit of one vessel.

    Element fields are written only by OrbitInstaller; everything else here
    is derived from them. The object itself is never swapped out, so anything
    holding a reference keeps seeing the current orbit.
    """
    inc_rad: float
    e: float
    sma_m: float
    lan_rad: float
    argp_rad: float
    M0_rad: float
    epoch_s: float
    body: "CelestialBody"

    owner: Optional["Vessel"] = None

    # Derived caches
    mean_motion_rad_s: float = math.nan
    period_s: float = math.nan
    semi_latus_rectum_m: float = math.nan
    last_ut_s: Optional[float] = None
    pos: Optional[Vector3] = None
    vel: Optional[Vector3] = None

    @classmethod
    def from_elements(cls, elements: OrbitalElements) -> "LiveOrbit":
        orbit = cls(
            inc_rad=elements.inc_rad,
            e=elements.e,
            sma_m=elements.sma_m,
            lan_rad=elements.lan_rad,
            argp_rad=elements.argp_rad,
            M0_rad=elements.M0_rad,
            epoch_s=elements.epoch_s,
            body=elements.body,
        )
        orbit.init()
        return orbit

    @property
    def elements(self) -> OrbitalElements:
        """Immutable snapshot of the current elements."""
        return OrbitalElements(
            inc_rad=self.inc_rad,
            e=self.e,
            sma_m=self.sma_m,
            lan_rad=self.lan_rad,
            argp_rad=self.argp_rad,
            M0_rad=self.M0_rad,
            epoch_s=self.epoch_s,
            body=self.body,
        )

    def init(self) -> None:
        """Recompute shape caches after the elements change."""
        elements = self.elements
        self.mean_motion_rad_s = kepler.mean_motion_rad_s(self.sma_m, self.body.mu_m3_s2)
        self.period_s = kepler.period_s(elements)
        self.semi_latus_rectum_m = self.sma_m * (1.0 - self.e * self.e)
        self.last_ut_s = None
        self.pos = None
        self.vel = None

    def update_from_ut(self, ut_s: float) -> None:
        self.pos, self.vel = elements_to_state(self.elements, ut_s)
        self.last_ut_s = ut_s

    def relative_position_at_ut(self, ut_s: float) -> Vector3:
        r, _v = elements_to_state(self.elements, ut_s)
        return r

    def altitude_m(self, ut_s: float) -> float:
        return norm(self.relative_position_at_ut(ut_s)) - self.body.radius_m
