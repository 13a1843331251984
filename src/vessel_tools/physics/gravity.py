# Two-body anomaly solvers

from __future__ import annotations

import math

from vessel_tools.core.constants import TWO_PI


def wrap_to_2pi(angle_rad: float) -> float:
    """Wrap angle to [0, 2π)."""
    wrapped = angle_rad % TWO_PI
    # -tiny % 2π rounds up to exactly 2π
    if wrapped >= TWO_PI:
        return 0.0
    return wrapped


def solve_keplers_equation(M_rad: float, e: float, tol: float = 1e-12, max_iter: int = 50) -> float:
    """
    Solve Kepler's equation for elliptic orbits:
        M = E - e sin(E)
    using Newton-Raphson.

    Args:
        M_rad: Mean anomaly (rad)
        e: eccentricity (0 <= e < 1)
        tol: convergence tolerance
        max_iter: iteration cap

    Returns:
        E_rad: Eccentric anomaly (rad), in [0, 2π)
    """
    if not (0.0 <= e < 1.0):
        raise ValueError("Elliptic Kepler solver requires 0 <= e < 1.")

    M = wrap_to_2pi(M_rad)

    if e < 0.8:
        E = M
    else:
        E = math.pi

    for _ in range(max_iter):
        f = E - e * math.sin(E) - M
        fp = 1.0 - e * math.cos(E)
        dE = -f / fp
        E += dE
        if abs(dE) < tol:
            return wrap_to_2pi(E)

    raise RuntimeError("Kepler solver did not converge within max_iter.")


def solve_hyperbolic_keplers_equation(M_rad: float, e: float, tol: float = 1e-12, max_iter: int = 100) -> float:
    """
    Solve the hyperbolic Kepler equation:
        M = e sinh(F) - F
    using Newton-Raphson. M is not wrapped; it grows without bound.

    Returns:
        F: Hyperbolic anomaly
    """
    if e <= 1.0:
        raise ValueError("Hyperbolic Kepler solver requires e > 1.")

    # asinh(M/e) is a good start for both small and large |M|
    F = math.asinh(M_rad / e)

    for _ in range(max_iter):
        f = e * math.sinh(F) - F - M_rad
        fp = e * math.cosh(F) - 1.0
        dF = -f / fp
        F += dF
        if abs(dF) < tol * max(1.0, abs(F)):
            return F

    raise RuntimeError("Hyperbolic Kepler solver did not converge within max_iter.")
