import math
import pytest

from vessel_tools.objects.body import CelestialBody
from vessel_tools.objects.live_orbit import LiveOrbit
from vessel_tools.objects.part import GimbalModule, LaunchClamp, Part, Transform
from vessel_tools.objects.vessel import Vessel


def test_body_validates_name():
    with pytest.raises(ValueError, match="Body name cannot be empty"):
        CelestialBody("  ", mu_m3_s2=1e12, radius_m=1000.0, soi_radius_m=1e6)


def test_body_validates_mu():
    with pytest.raises(ValueError, match="Gravitational parameter must be positive"):
        CelestialBody("X", mu_m3_s2=0.0, radius_m=1000.0, soi_radius_m=1e6)

    with pytest.raises(ValueError, match="Gravitational parameter must be positive"):
        CelestialBody("X", mu_m3_s2=math.nan, radius_m=1000.0, soi_radius_m=1e6)


def test_body_validates_radius():
    with pytest.raises(ValueError, match="Radius must be positive"):
        CelestialBody("X", mu_m3_s2=1e12, radius_m=-1.0, soi_radius_m=1e6)


def test_body_validates_atmosphere():
    with pytest.raises(ValueError, match="Atmosphere height must be non-negative"):
        CelestialBody("X", mu_m3_s2=1e12, radius_m=1000.0, soi_radius_m=1e6, atmosphere_height_m=-5.0)


def test_body_soi_must_exceed_radius():
    with pytest.raises(ValueError, match="Sphere of influence must exceed the radius"):
        CelestialBody("X", mu_m3_s2=1e12, radius_m=1000.0, soi_radius_m=1000.0)


def test_bodies_compare_by_identity(kerbin):
    twin = CelestialBody(
        name=kerbin.name,
        mu_m3_s2=kerbin.mu_m3_s2,
        radius_m=kerbin.radius_m,
        soi_radius_m=kerbin.soi_radius_m,
        atmosphere_height_m=kerbin.atmosphere_height_m,
    )
    assert twin != kerbin
    assert repr(kerbin) == "CelestialBody('Kerbin')"


def test_vessel_validates_id(parking_elements):
    with pytest.raises(ValueError, match="Vessel ID cannot be empty"):
        Vessel("", "Test", orbit=LiveOrbit.from_elements(parking_elements))

    with pytest.raises(ValueError, match="Vessel ID cannot be empty"):
        Vessel("   ", "Test", orbit=LiveOrbit.from_elements(parking_elements))


def test_vessel_owns_orbit_and_parts(vessel):
    assert vessel.orbit.owner is vessel
    assert all(p.vessel is vessel for p in vessel.parts)


def test_vessel_lists_launch_clamps(vessel):
    assert [p.name for p in vessel.launch_clamps()] == ["clamp-a", "clamp-b"]


def test_part_die_detaches_from_vessel(vessel):
    clamp = vessel.launch_clamps()[0]
    clamp.die()
    assert not clamp.alive
    assert clamp.vessel is None
    assert clamp not in vessel.parts


def test_part_module_lookup():
    clamp = LaunchClamp()
    part = Part("clamp", [clamp])
    assert part.module(LaunchClamp) is clamp
    assert part.module(GimbalModule) is None
    assert not part.has_module(GimbalModule)


def test_direct_writes_mark_kinematics_dirty(vessel):
    assert not vessel.kinematics_dirty
    vessel.set_rotation((0.0, 0.0, 0.0, 1.0))
    assert not vessel.kinematics_dirty
    vessel.set_position((1.0, 2.0, 3.0))
    assert vessel.kinematics_dirty


def test_sync_requires_evaluated_orbit(parking_elements):
    orbit = LiveOrbit.from_elements(parking_elements)
    v = Vessel("V-9", "Fresh", orbit=orbit)
    with pytest.raises(RuntimeError, match="has not been evaluated"):
        v.sync_from_orbit()


def test_gimbal_needs_one_initial_rotation_per_transform():
    with pytest.raises(ValueError, match="Need one initial rotation per gimbal transform"):
        GimbalModule(gimbal_transforms=[Transform(), Transform()], init_rotations=[(0.0, 0.0, 0.0, 1.0)])
