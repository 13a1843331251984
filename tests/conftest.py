import pytest

from vessel_tools.objects.body import CelestialBody
from vessel_tools.objects.live_orbit import LiveOrbit
from vessel_tools.objects.part import LaunchClamp, Part
from vessel_tools.objects.vessel import Vessel
from vessel_tools.physics.orbit import OrbitalElements
from vessel_tools.simulation.scenario import Scenario

KERBIN_MU = 3.5316e12
KERBIN_R = 600000.0
KERBIN_SOI = 84000000.0


@pytest.fixture
def kerbin():
    return CelestialBody(
        name="Kerbin",
        mu_m3_s2=KERBIN_MU,
        radius_m=KERBIN_R,
        soi_radius_m=KERBIN_SOI,
        atmosphere_height_m=70000.0,
    )


@pytest.fixture
def mun(kerbin):
    return CelestialBody(
        name="Mun",
        mu_m3_s2=6.5138398e10,
        radius_m=200000.0,
        soi_radius_m=2429559.1,
        position_world=(12000000.0, 0.0, 0.0),
        parent=kerbin,
    )


@pytest.fixture
def scenario(kerbin, mun):
    s = Scenario(name="Test")
    s.add_body(kerbin)
    s.add_body(mun)
    return s


@pytest.fixture
def parking_elements(kerbin):
    return OrbitalElements(
        inc_rad=0.1,
        e=0.01,
        sma_m=750000.0,
        lan_rad=0.5,
        argp_rad=1.0,
        M0_rad=0.0,
        epoch_s=0.0,
        body=kerbin,
    )


@pytest.fixture
def vessel(scenario, parking_elements):
    v = Vessel(
        vessel_id="V-001",
        name="TestCraft",
        orbit=LiveOrbit.from_elements(parking_elements),
        parts=[Part("pod"), Part("clamp-a", [LaunchClamp()]), Part("clamp-b", [LaunchClamp()])],
    )
    v.sync_from_orbit(scenario.universal_time_s)
    scenario.add_vessel(v)
    return v
