"""
Best-effort repair of caller-supplied orbital elements.

`sanitize_elements` never raises: any combination of NaN, zero or
sign-inconsistent inputs comes back as a flyable OrbitalElements.
Repairs, in order:

1. NaN / zero inclination      -> angle epsilon
2. NaN eccentricity            -> 0 (negative values are read as their magnitude)
3. NaN semi-major axis         -> radius + atmosphere + safety margin
4. NaN / zero LAN              -> angle epsilon
5. NaN argp / mean anomaly     -> 0
6. NaN epoch                   -> mean anomaly set to "now" (epoch also set to "now")
7. sign(e - 1) == sign(sma)    -> sma negated
8. bound orbit                 -> mean anomaly wrapped into [0, 2π)

Non-finite angles (±inf) are treated like NaN.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from vessel_tools.core.constants import ANGLE_EPSILON_RAD, SMA_SAFETY_MARGIN_M, TWO_PI
from vessel_tools.physics.orbit import OrbitalElements, RawOrbitalElements

if TYPE_CHECKING:
    from vessel_tools.objects.body import CelestialBody


def _sign(x: float) -> int:
    if x > 0:
        return 1
    if x < 0:
        return -1
    return 0


def _degenerate_angle(x: float) -> bool:
    return not math.isfinite(x) or x == 0.0


def wrap_mean_anomaly(M_rad: float) -> float:
    """Wrap into [0, 2π) by whole turns."""
    turns = math.floor(M_rad / TWO_PI)
    M = M_rad - turns * TWO_PI
    while M < 0.0:
        M += TWO_PI
    while M >= TWO_PI:
        M -= TWO_PI
    return M


def sanitize_elements(
    raw: RawOrbitalElements,
    body: "CelestialBody",
    now_s: float,
    angle_epsilon_rad: float = ANGLE_EPSILON_RAD,
    sma_margin_m: float = SMA_SAFETY_MARGIN_M,
) -> OrbitalElements:
    inc = raw.inc_rad
    e = raw.e
    sma = raw.sma_m
    lan = raw.lan_rad
    argp = raw.argp_rad
    M0 = raw.M0_rad
    epoch = raw.epoch_s

    if _degenerate_angle(inc):
        inc = angle_epsilon_rad
    if math.isnan(e):
        e = 0.0
    e = abs(e)
    if math.isnan(sma):
        sma = body.radius_m + body.atmosphere_height_m + sma_margin_m
    if _degenerate_angle(lan):
        lan = angle_epsilon_rad
    if not math.isfinite(argp):
        argp = 0.0
    if not math.isfinite(M0):
        M0 = 0.0
    if math.isnan(epoch):
        # Mean anomaly, not epoch, takes the current time
        M0 = now_s
        epoch = now_s

    if _sign(e - 1.0) == _sign(sma):
        sma = -sma

    if sma >= 0.0:
        M0 = wrap_mean_anomaly(M0)

    return OrbitalElements(
        inc_rad=inc,
        e=e,
        sma_m=sma,
        lan_rad=lan,
        argp_rad=argp,
        M0_rad=M0,
        epoch_s=epoch,
        body=body,
    )
