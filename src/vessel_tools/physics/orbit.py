# src/vessel_tools/physics/orbit.py

from __future__ import annotations

import math
from dataclasses import dataclass, replace as _dc_replace
from typing import List, Tuple, TYPE_CHECKING

from vessel_tools.core.constants import TWO_PI
from vessel_tools.core.frames import (
    Vector3,
    cross,
    dot,
    norm,
    normalize,
    perifocal_to_inertial,
    scale,
    sub,
)
from vessel_tools.physics.gravity import (
    solve_hyperbolic_keplers_equation,
    solve_keplers_equation,
    wrap_to_2pi,
)

if TYPE_CHECKING:
    from vessel_tools.objects.body import CelestialBody

# Below this eccentricity the periapsis direction is undefined
CIRCULAR_TOL = 1e-9
# Below this |n|/|h| ratio the node line is undefined
EQUATORIAL_TOL = 1e-12


@dataclass
class RawOrbitalElements:
    """
    Caller-supplied elements, unchecked. Any field may be NaN, zero or
    otherwise unusable; `sanitize_elements` turns this into OrbitalElements.
    """
    inc_rad: float
    e: float
    sma_m: float
    lan_rad: float
    argp_rad: float
    M0_rad: float
    epoch_s: float


@dataclass(frozen=True)
class OrbitalElements:
    """
    Classical Orbital Elements for an elliptic or hyperbolic two-body orbit.

    Units:
        inc_rad: inclination in radians
        e: eccentricity (>= 0)
        sma_m: semi-major axis in metres, negative for hyperbolic orbits
        lan_rad: longitude of the ascending node in radians
        argp_rad: argument of periapsis in radians
        M0_rad: mean anomaly at epoch in radians
        epoch_s: universal time of M0_rad in seconds
        body: the body the orbit is measured around
    """
    inc_rad: float
    e: float
    sma_m: float
    lan_rad: float
    argp_rad: float
    M0_rad: float
    epoch_s: float
    body: "CelestialBody"

    def __post_init__(self):
        if math.isnan(self.e) or self.e < 0.0:
            raise ValueError(f"Eccentricity must be non-negative. Got: {self.e}")
        if self.e < 1.0 and self.sma_m < 0.0:
            raise ValueError(f"Elliptic orbit (e={self.e}) needs a positive semi-major axis. Got: {self.sma_m}")
        if self.e > 1.0 and self.sma_m > 0.0:
            raise ValueError(f"Hyperbolic orbit (e={self.e}) needs a negative semi-major axis. Got: {self.sma_m}")
        if self.body is None:
            raise ValueError("Orbit needs a reference body.")

    @property
    def is_bound(self) -> bool:
        return self.e < 1.0

    def replace(self, **changes) -> "OrbitalElements":
        return _dc_replace(self, **changes)


def mean_motion_rad_s(sma_m: float, mu_m3_s2: float) -> float:
    """n = sqrt(mu / |a|^3), without cubing a."""
    a = abs(sma_m)
    return math.sqrt(mu_m3_s2 / a) / a


def period_s(elements: OrbitalElements) -> float:
    if not elements.is_bound:
        return math.inf
    return TWO_PI / mean_motion_rad_s(elements.sma_m, elements.body.mu_m3_s2)


def mean_anomaly_at(elements: OrbitalElements, ut_s: float) -> float:
    n = mean_motion_rad_s(elements.sma_m, elements.body.mu_m3_s2)
    M = elements.M0_rad + n * (ut_s - elements.epoch_s)
    if elements.is_bound:
        return wrap_to_2pi(M)
    return M


def elements_to_state(elements: OrbitalElements, ut_s: float) -> Tuple[Vector3, Vector3]:
    """
    Position and velocity at universal time ut_s, relative to the body
    centre in the orbit frame (z along the body's north pole).

    Returns:
        r (m), v (m/s)
    """
    e = elements.e
    a = elements.sma_m
    mu = elements.body.mu_m3_s2

    if a == 0.0 or not math.isfinite(a):
        raise ValueError(f"Cannot evaluate an orbit with semi-major axis {a}.")
    if e == 1.0:
        raise ValueError("Parabolic orbits (e == 1) are not supported.")

    M = mean_anomaly_at(elements, ut_s)

    if e < 1.0:
        E = solve_keplers_equation(M, e)
        sin_v = (math.sqrt(1.0 - e * e) * math.sin(E)) / (1.0 - e * math.cos(E))
        cos_v = (math.cos(E) - e) / (1.0 - e * math.cos(E))
        nu = math.atan2(sin_v, cos_v)
        r_m = a * (1.0 - e * math.cos(E))
    else:
        F = solve_hyperbolic_keplers_equation(M, e)
        nu = 2.0 * math.atan(math.sqrt((e + 1.0) / (e - 1.0)) * math.tanh(F / 2.0))
        r_m = a * (1.0 - e * math.cosh(F))

    # Semi-latus rectum, positive for both families
    p = a * (1.0 - e * e)
    h = math.sqrt(mu * p)

    r_pqw: Vector3 = (r_m * math.cos(nu), r_m * math.sin(nu), 0.0)
    v_pqw: Vector3 = (
        -mu / h * math.sin(nu),
        mu / h * (e + math.cos(nu)),
        0.0,
    )

    return perifocal_to_inertial(r_pqw, v_pqw, elements.lan_rad, elements.inc_rad, elements.argp_rad)


def state_to_elements(r: Vector3, v: Vector3, body: "CelestialBody", ut_s: float) -> OrbitalElements:
    """
    Two-body orbit determination from a state vector.

    r and v are relative to the body centre, in the orbit frame. The result
    has epoch ut_s, so M0_rad is the mean anomaly at ut_s.

    Degenerate geometry:
        equatorial -> lan = 0, node line along +x
        circular   -> argp = 0, periapsis on the node line
    """
    if not all(math.isfinite(c) for c in r + v):
        raise ValueError("State vector must be finite.")
    mu = body.mu_m3_s2
    r_mag = norm(r)
    if r_mag == 0.0:
        raise ValueError("Position vector must be non-zero.")
    v_sq = dot(v, v)

    h_vec = cross(r, v)
    h_mag = norm(h_vec)
    if h_mag == 0.0:
        raise ValueError("State vector has no angular momentum (radial trajectory).")
    if not math.isfinite(h_mag):
        raise ValueError("Angular momentum of the state vector is not finite.")

    energy = v_sq / 2.0 - mu / r_mag
    if not math.isfinite(energy):
        raise ValueError(f"Orbital energy of the state vector is not finite (|v|^2 = {v_sq}).")
    if energy == 0.0:
        raise ValueError("Parabolic state vectors are not supported.")
    a = -mu / (2.0 * energy)

    e_vec = scale(sub(scale(r, v_sq - mu / r_mag), scale(v, dot(r, v))), 1.0 / mu)
    e = norm(e_vec)
    if not math.isfinite(e):
        raise ValueError("Eccentricity of the state vector is not finite.")
    # Keep (e, a) on the branch the energy says
    if a > 0.0 and e >= 1.0:
        e = math.nextafter(1.0, 0.0)
    elif a < 0.0 and e <= 1.0:
        e = math.nextafter(1.0, 2.0)

    h_hat = scale(h_vec, 1.0 / h_mag)
    inc = math.acos(max(-1.0, min(1.0, h_hat[2])))

    n_vec = (-h_vec[1], h_vec[0], 0.0)
    n_mag = norm(n_vec)
    if n_mag < EQUATORIAL_TOL * h_mag:
        lan = 0.0
        node_hat: Vector3 = (1.0, 0.0, 0.0)
    else:
        lan = wrap_to_2pi(math.atan2(n_vec[1], n_vec[0]))
        node_hat = scale(n_vec, 1.0 / n_mag)

    if e < CIRCULAR_TOL:
        argp = 0.0
        peri_hat = node_hat
    else:
        peri_hat = normalize(e_vec)
        argp = wrap_to_2pi(math.atan2(dot(cross(node_hat, peri_hat), h_hat), dot(node_hat, peri_hat)))

    nu = math.atan2(dot(cross(peri_hat, r), h_hat), dot(peri_hat, r))

    if e < 1.0:
        E = 2.0 * math.atan2(math.sqrt(1.0 - e) * math.sin(nu / 2.0), math.sqrt(1.0 + e) * math.cos(nu / 2.0))
        M = wrap_to_2pi(E - e * math.sin(E))
    else:
        x = math.sqrt((e - 1.0) / (e + 1.0)) * math.tan(nu / 2.0)
        x = max(-1.0 + 1e-15, min(1.0 - 1e-15, x))
        F = 2.0 * math.atanh(x)
        M = e * math.sinh(F) - F

    return OrbitalElements(
        inc_rad=inc,
        e=e,
        sma_m=a,
        lan_rad=lan,
        argp_rad=argp,
        M0_rad=M,
        epoch_s=ut_s,
        body=body,
    )


def propagate(elements: OrbitalElements, times_s: List[float]) -> List[Tuple[float, Vector3, Vector3]]:
    """
    Evaluate an orbit at a list of universal times.
    Returns list of (t, r, v).
    """
    out: List[Tuple[float, Vector3, Vector3]] = []
    for t in times_s:
        r, v = elements_to_state(elements, t)
        out.append((t, r, v))
    return out
