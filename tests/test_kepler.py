import math
import pytest

from vessel_tools.physics.gravity import (
    solve_hyperbolic_keplers_equation,
    solve_keplers_equation,
    wrap_to_2pi,
)


def test_kepler_zero_eccentricity():
    # If e=0, E=M exactly
    for M in [0.0, 0.5, 1.0, 2.0, 5.0]:
        E = solve_keplers_equation(M, 0.0)
        assert math.isclose((E - (M % (2*math.pi))) % (2*math.pi), 0.0, abs_tol=1e-12)


def test_kepler_converges_typical():
    E = solve_keplers_equation(M_rad=1.0, e=0.4)
    res = E - 0.4 * math.sin(E) - (1.0 % (2*math.pi))
    assert abs(res) < 1e-10


def test_kepler_rejects_hyperbolic_eccentricity():
    with pytest.raises(ValueError, match="requires 0 <= e < 1"):
        solve_keplers_equation(1.0, 1.5)


def test_hyperbolic_kepler_residual():
    for M in [-20.0, -1.0, 0.0, 0.3, 5.0, 200.0]:
        F = solve_hyperbolic_keplers_equation(M, 1.8)
        assert abs(1.8 * math.sinh(F) - F - M) < 1e-8 * max(1.0, abs(M))


def test_hyperbolic_kepler_rejects_elliptic():
    with pytest.raises(ValueError, match="requires e > 1"):
        solve_hyperbolic_keplers_equation(1.0, 0.5)


def test_wrap_to_2pi_range():
    for angle in [-1e-20, -7.0, 0.0, 2 * math.pi, 13.0]:
        wrapped = wrap_to_2pi(angle)
        assert 0.0 <= wrapped < 2 * math.pi
