import math

from vessel_tools.physics.orbit import OrbitalElements
from vessel_tools.services.orbit_installer import OrbitInstaller
from vessel_tools.simulation.events import VESSEL_SOI_CHANGED


def collect_soi_changes(scenario):
    changes = []
    scenario.events.subscribe(VESSEL_SOI_CHANGED, changes.append)
    return changes


def test_install_copies_elements_in_place(scenario, vessel, kerbin):
    record = vessel.orbit
    new = OrbitalElements(0.2, 0.05, 900000.0, 1.0, 2.0, 3.0, 0.0, kerbin)

    changed = OrbitInstaller(scenario).install(record, new)

    assert changed is False
    assert vessel.orbit is record
    assert record.elements == new


def test_install_rebuilds_caches_at_current_time(scenario, vessel, kerbin):
    scenario.universal_time_s = 500.0
    new = OrbitalElements(0.2, 0.0, 900000.0, 1.0, 0.0, 0.0, 500.0, kerbin)

    OrbitInstaller(scenario).install(vessel.orbit, new)

    record = vessel.orbit
    assert record.last_ut_s == 500.0
    assert math.isclose(record.mean_motion_rad_s, math.sqrt(kerbin.mu_m3_s2 / 900000.0**3))
    assert math.isclose(math.sqrt(sum(c * c for c in record.pos)), 900000.0)


def test_body_change_reported_once(scenario, vessel, mun):
    changes = collect_soi_changes(scenario)
    installer = OrbitInstaller(scenario)
    around_mun = OrbitalElements(0.1, 0.0, 400000.0, 0.1, 0.0, 0.0, 0.0, mun)

    assert installer.install(vessel.orbit, around_mun) is True
    assert len(changes) == 1
    assert changes[0].vessel is vessel
    assert changes[0].from_body.name == "Kerbin"
    assert changes[0].to_body is mun

    # Same body again: no transition, no notification
    assert installer.install(vessel.orbit, around_mun) is False
    assert len(changes) == 1


def test_no_notification_when_body_unchanged(scenario, vessel, kerbin):
    changes = collect_soi_changes(scenario)
    OrbitInstaller(scenario).install(vessel.orbit, vessel.orbit.elements.replace(M0_rad=1.0))
    assert changes == []


def test_install_logs_new_orbit(scenario, vessel, kerbin, caplog):
    new = OrbitalElements(0.2, 0.0, 900000.0, 1.0, 0.0, 0.0, 0.0, kerbin)
    with caplog.at_level("INFO"):
        OrbitInstaller(scenario).install(vessel.orbit, new)
    assert "Orbit changed to: inc=0.2" in caplog.text
    assert "refbody=Kerbin" in caplog.text
