"""
Tests for the relocation procedures.
"""
import math
import pytest

from vessel_tools.core.config import DebugToolsConfig
from vessel_tools.core.frames import ReferenceFrame, quat_from_axis_angle
from vessel_tools.objects.live_orbit import LiveOrbit
from vessel_tools.objects.vessel import Vessel
from vessel_tools.services.teleport import DebugTools, HoldResult
from vessel_tools.simulation.events import VESSEL_SOI_CHANGED

MU = 3.5316e12
R = 600000.0
SOI = 84000000.0
NO_ROTATION = (0.0, 0.0, 0.0, 1.0)


@pytest.fixture
def tools(scenario):
    return DebugTools(scenario)


@pytest.fixture
def grounded(vessel):
    vessel.landed = True
    vessel.splashed = True
    vessel.landed_at = "LaunchPad"
    return vessel


def circular_state(radius):
    return (radius, 0.0, 0.0), (0.0, math.sqrt(MU / radius), 0.0)


class TestQuiesce:
    def test_clears_flags_and_clamps(self, tools, grounded):
        removed = tools.quiesce(grounded)
        assert removed == 2
        assert not grounded.landed
        assert not grounded.splashed
        assert grounded.landed_at == ""
        assert [p.name for p in grounded.parts] == ["pod"]

    def test_logs_clamp_count(self, tools, grounded, caplog):
        with caplog.at_level("INFO"):
            tools.quiesce(grounded)
        assert "Removed 2 launch clamps from TestCraft" in caplog.text

    def test_nothing_to_do(self, tools, vessel):
        tools.quiesce(vessel)
        assert tools.quiesce(vessel) == 0


class TestSetOrbit:
    def test_round_trip_circular(self, tools, vessel, kerbin):
        applied = tools.set_orbit(vessel, 0.01, 0.0, 700000.0, 0.01, 0.0, 0.0, 0.0, kerbin)

        assert applied is True
        orbit = vessel.orbit
        assert orbit.inc_rad == pytest.approx(0.01)
        assert orbit.e == pytest.approx(0.0)
        assert orbit.sma_m == pytest.approx(700000.0)
        assert orbit.lan_rad == pytest.approx(0.01)
        assert orbit.argp_rad == pytest.approx(0.0)
        assert orbit.M0_rad == pytest.approx(0.0)

    def test_repairs_garbage_instead_of_failing(self, tools, vessel, kerbin):
        applied = tools.set_orbit(vessel, math.nan, math.nan, math.nan, 0.0, math.nan, -1.0, 0.0, kerbin)
        assert applied is True
        assert vessel.orbit.inc_rad == 1e-4
        assert vessel.orbit.lan_rad == 1e-4
        assert vessel.orbit.sma_m == 680000.0
        assert 0.0 <= vessel.orbit.M0_rad < 2 * math.pi

    def test_config_epsilon_used(self, scenario, vessel, kerbin):
        tools = DebugTools(scenario, DebugToolsConfig(angle_epsilon_rad=1e-3))
        tools.set_orbit(vessel, 0.0, 0.0, 700000.0, 0.0, 0.0, 0.0, 0.0, kerbin)
        assert vessel.orbit.inc_rad == 1e-3

    def test_quiesces_grounded_vessel(self, tools, grounded, kerbin):
        tools.set_orbit(grounded, 0.1, 0.0, 700000.0, 0.1, 0.0, 0.0, 0.0, kerbin)
        assert not grounded.landed
        assert not grounded.splashed
        assert len(grounded.launch_clamps()) == 0

    def test_moves_vessel_kinematics(self, tools, vessel, kerbin):
        tools.set_orbit(vessel, 0.01, 0.0, 700000.0, 0.01, 0.0, 0.0, 0.0, kerbin)
        distance = math.sqrt(sum(c * c for c in vessel.world_position))
        assert distance == pytest.approx(700000.0)
        assert not vessel.kinematics_dirty

    def test_requests_hold_and_packs_every_vessel(self, scenario, tools, vessel, kerbin, parking_elements):
        other = Vessel("V-002", "Other", LiveOrbit.from_elements(parking_elements))
        scenario.add_vessel(other)
        scenario.universal_time_s = 100.0

        tools.set_orbit(vessel, 0.1, 0.0, 700000.0, 0.1, 0.0, 0.0, 100.0, kerbin)

        assert scenario.physics.hold_until_s == 160.0
        assert vessel.on_rails
        assert other.on_rails

    def test_idempotent(self, tools, vessel, kerbin):
        args = (0.2, 0.1, 900000.0, 0.3, 0.4, 0.5, 0.0, kerbin)
        tools.set_orbit(vessel, *args)
        first = vessel.orbit.elements
        tools.set_orbit(vessel, *args)
        assert vessel.orbit.elements == first

    def test_moving_to_another_body_notifies_once(self, scenario, tools, vessel, mun):
        changes = []
        scenario.events.subscribe(VESSEL_SOI_CHANGED, changes.append)

        tools.set_orbit(vessel, 0.1, 0.0, 400000.0, 0.1, 0.0, 0.0, 0.0, mun)
        tools.set_orbit(vessel, 0.1, 0.0, 400000.0, 0.1, 0.0, 0.0, 0.0, mun)

        assert len(changes) == 1
        assert vessel.orbit.body is mun
        dx = [a - b for a, b in zip(vessel.world_position, mun.position_world)]
        assert math.sqrt(sum(c * c for c in dx)) == pytest.approx(400000.0)

    def test_rejects_none_arguments(self, tools, vessel, kerbin):
        with pytest.raises(ValueError, match="vessel must not be None"):
            tools.set_orbit(None, 0.1, 0.0, 700000.0, 0.1, 0.0, 0.0, 0.0, kerbin)
        with pytest.raises(ValueError, match="body must not be None"):
            tools.set_orbit(vessel, 0.1, 0.0, 700000.0, 0.1, 0.0, 0.0, 0.0, None)


class TestSafetyGate:
    def test_above_sphere_of_influence_rejected(self, tools, grounded, kerbin, caplog):
        before = grounded.orbit.elements
        with caplog.at_level("ERROR"):
            applied = tools.set_orbit(grounded, 0.1, 0.0, 2 * SOI, 0.1, 0.0, 0.0, 0.0, kerbin)

        assert applied is False
        assert grounded.orbit.elements == before
        # No mutation at all, not even the quiesce step
        assert grounded.landed
        assert len(grounded.launch_clamps()) == 2
        assert "above the sphere of influence" in caplog.text

    @pytest.mark.parametrize("sma", [1e103, 1e200, -1e200])
    def test_huge_semi_major_axis_rejected(self, tools, grounded, kerbin, caplog, sma):
        before = grounded.orbit.elements
        with caplog.at_level("ERROR"):
            applied = tools.set_orbit(grounded, 0.1, 0.0, sma, 0.1, 0.0, 0.0, 0.0, kerbin)

        assert applied is False
        assert grounded.orbit.elements == before
        assert grounded.landed
        assert "above the sphere of influence" in caplog.text

    def test_below_surface_rejected(self, tools, vessel, kerbin, caplog):
        before = vessel.orbit.elements
        with caplog.at_level("ERROR"):
            applied = tools.set_orbit(vessel, 0.1, 0.0, 0.5 * R, 0.1, 0.0, 0.0, 0.0, kerbin)
        assert applied is False
        assert vessel.orbit.elements == before
        assert "below the surface" in caplog.text

    def test_unevaluable_orbit_rejected(self, tools, vessel, kerbin):
        before = vessel.orbit.elements
        # e == 1 survives repair but has no position
        assert tools.set_orbit(vessel, 0.1, 1.0, 700000.0, 0.1, 0.0, 0.0, 0.0, kerbin) is False
        assert vessel.orbit.elements == before

    def test_state_vector_outside_soi_rejected(self, tools, vessel, kerbin):
        before = vessel.orbit.elements
        frame = ReferenceFrame.body_inertial(kerbin)
        applied = tools.teleport_using_orbit(vessel, frame, (2 * SOI, 0.0, 0.0), (0.0, 10.0, 0.0), NO_ROTATION)
        assert applied is False
        assert vessel.orbit.elements == before


class TestPhysicsHold:
    def test_hold_acquired(self, tools):
        assert tools.request_physics_hold() == HoldResult(acquired=True)

    def test_missing_physics_is_soft_failure(self, scenario, tools, vessel, kerbin, caplog):
        scenario.physics = None
        result = tools.request_physics_hold()
        assert result.acquired is False
        assert "Physics hold unavailable" in result.warning

        with caplog.at_level("ERROR"):
            applied = tools.set_orbit(vessel, 0.1, 0.0, 700000.0, 0.1, 0.0, 0.0, 0.0, kerbin)
        assert applied is True
        assert vessel.orbit.sma_m == 700000.0
        assert "Physics hold unavailable" in caplog.text


class TestTeleportDirect:
    def test_lands_at_requested_position(self, tools, grounded, kerbin):
        frame = ReferenceFrame.body_inertial(kerbin)
        position = (0.0, 0.0, R + 10000.0)
        rotation = quat_from_axis_angle((0.0, 1.0, 0.0), 0.5)

        tools.teleport_direct(grounded, frame, position, (0.0, 0.0, 0.0), rotation)

        assert grounded.world_position == pytest.approx(frame.position_to_world(position))
        assert frame.position_from_world(grounded.world_position) == pytest.approx(position)
        assert grounded.world_rotation == pytest.approx(rotation)
        assert not grounded.landed
        assert grounded.kinematics_dirty

    def test_velocity_includes_frame_rotation(self, tools, vessel):
        frame = ReferenceFrame(angular_velocity=(0.0, 0.0, 0.01))
        tools.teleport_direct(vessel, frame, (1000.0, 0.0, 0.0), (0.0, 0.0, 0.0), NO_ROTATION)
        assert vessel.world_velocity == pytest.approx((0.0, 10.0, 0.0))

    def test_orbit_left_for_physics_step(self, tools, vessel, kerbin):
        before = vessel.orbit.elements
        tools.teleport_direct(vessel, ReferenceFrame.world(), (0.0, 800000.0, 0.0), (2000.0, 0.0, 0.0), NO_ROTATION)
        assert vessel.orbit.elements == before

    def test_rejects_missing_frame(self, tools, grounded):
        with pytest.raises(ValueError, match="reference_frame must not be None"):
            tools.teleport_direct(grounded, None, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0), NO_ROTATION)
        assert grounded.landed

    def test_rejects_malformed_rotation(self, tools, vessel):
        with pytest.raises(ValueError, match="4 components"):
            tools.teleport_direct(vessel, ReferenceFrame.world(), (0.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0))


class TestTeleportUsingOrbit:
    def test_circular_state_gives_circular_orbit(self, tools, vessel, kerbin):
        frame = ReferenceFrame.body_inertial(kerbin)
        r, v = circular_state(800000.0)
        rotation = quat_from_axis_angle((1.0, 0.0, 0.0), 0.25)

        applied = tools.teleport_using_orbit(vessel, frame, r, v, rotation)

        assert applied is True
        assert vessel.orbit.e < 1e-6
        assert vessel.orbit.sma_m == pytest.approx(800000.0, rel=1e-9)
        assert vessel.world_position == pytest.approx(frame.position_to_world(r), abs=1e-2)
        assert vessel.world_rotation == pytest.approx(rotation)

    def test_keeps_record_identity(self, tools, vessel, kerbin):
        record = vessel.orbit
        r, v = circular_state(900000.0)
        tools.teleport_using_orbit(vessel, ReferenceFrame.body_inertial(kerbin), r, v, NO_ROTATION)
        assert vessel.orbit is record
        assert record.epoch_s == 0.0

    def test_spinning_frame_velocity(self, tools, vessel, kerbin):
        radius = 800000.0
        spin = math.sqrt(MU / radius) / radius
        frame = ReferenceFrame(origin=kerbin.position_world, swap_yz=True, angular_velocity=(0.0, spin, 0.0))

        tools.teleport_using_orbit(vessel, frame, (radius, 0.0, 0.0), (0.0, 0.0, 0.0), NO_ROTATION)

        assert vessel.orbit.e < 1e-6
        assert vessel.orbit.sma_m == pytest.approx(radius, rel=1e-9)

    def test_radial_state_rejected(self, tools, vessel, kerbin):
        with pytest.raises(ValueError, match="angular momentum"):
            tools.teleport_using_orbit(
                vessel, ReferenceFrame.body_inertial(kerbin), (800000.0, 0.0, 0.0), (0.0, 0.0, 0.0), NO_ROTATION
            )

    def test_overflowing_velocity_rejected(self, tools, grounded, kerbin):
        before = grounded.orbit.elements
        with pytest.raises(ValueError, match="not finite"):
            tools.teleport_using_orbit(
                grounded, ReferenceFrame.body_inertial(kerbin), (700000.0, 0.0, 0.0), (0.0, 1e200, 0.0), NO_ROTATION
            )
        assert grounded.orbit.elements == before
        assert grounded.landed

    def test_rejects_missing_vessel(self, tools, kerbin):
        with pytest.raises(ValueError, match="vessel must not be None"):
            tools.teleport_using_orbit(None, ReferenceFrame.world(), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), NO_ROTATION)


def test_pause_passthrough(scenario, tools):
    assert tools.get_paused() is False
    tools.set_paused(True)
    assert scenario.paused is True
    assert tools.get_paused() is True
