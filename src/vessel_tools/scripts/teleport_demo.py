import logging
import math

from vessel_tools.core.config import DebugToolsConfig, configure_logging
from vessel_tools.core.constants import (
    KERBIN_ATMOSPHERE_M,
    KERBIN_MU_M3_S2,
    KERBIN_RADIUS_M,
    KERBIN_SOI_M,
)
from vessel_tools.core.frames import ReferenceFrame
from vessel_tools.objects.body import CelestialBody
from vessel_tools.objects.live_orbit import LiveOrbit
from vessel_tools.objects.part import LaunchClamp, Part
from vessel_tools.objects.vessel import Vessel
from vessel_tools.physics.orbit import OrbitalElements
from vessel_tools.services.teleport import DebugTools
from vessel_tools.simulation.engine import Engine
from vessel_tools.visualization.export_log import export_log_to_json
from vessel_tools.simulation.scenario import Scenario
from vessel_tools.simulation.systems.orbit_sync import OrbitSyncSystem
from vessel_tools.simulation.systems.state_recorder import StateRecorderSystem
from vessel_tools.visualization.plotly_viewer import render_tracks

config = DebugToolsConfig(log_level="INFO")
configure_logging(config)
logger = logging.getLogger("teleport_demo")

kerbin = CelestialBody(
    name="Kerbin",
    mu_m3_s2=KERBIN_MU_M3_S2,
    radius_m=KERBIN_RADIUS_M,
    soi_radius_m=KERBIN_SOI_M,
    atmosphere_height_m=KERBIN_ATMOSPHERE_M,
)

scenario = Scenario(name="Teleport Demo")
scenario.add_body(kerbin)

# A vessel sitting on the pad, held by two clamps
pad_orbit = LiveOrbit.from_elements(OrbitalElements(
    inc_rad=0.0001, e=0.0, sma_m=KERBIN_RADIUS_M + 100.0,
    lan_rad=0.0001, argp_rad=0.0, M0_rad=0.0, epoch_s=0.0, body=kerbin,
))
vessel = Vessel(
    vessel_id="V-001",
    name="Demo Rocket",
    orbit=pad_orbit,
    parts=[Part("pod"), Part("clamp-1", [LaunchClamp()]), Part("clamp-2", [LaunchClamp()])],
    landed=True,
    landed_at="LaunchPad",
)
scenario.add_vessel(vessel)

tools = DebugTools(scenario, config)
frame = ReferenceFrame.body_inertial(kerbin)

# 1) Raw elements with a NaN or two: repaired, then installed
tools.set_orbit(vessel, 0.0, math.nan, 700000.0, 0.0, 0.0, 7.0, 0.0, kerbin)

# 2) Circular 800 km orbit from a state vector
r = 800000.0
v = math.sqrt(KERBIN_MU_M3_S2 / r)
tools.teleport_using_orbit(vessel, frame, (r, 0.0, 0.0), (0.0, v, 0.0), (0.0, 0.0, 0.0, 1.0))

# 3) A destination outside the sphere of influence is refused
tools.set_orbit(vessel, 0.1, 0.0, 2.0 * KERBIN_SOI_M, 0.1, 0.0, 0.0, 0.0, kerbin)

engine = Engine(dt_s=30.0, systems=[OrbitSyncSystem(), StateRecorderSystem()])
log = engine.run(scenario, t_start_s=0.0, t_end_s=3600.0)

logger.info("Orbit after demo: sma=%.1f m e=%.2e", vessel.orbit.sma_m, vessel.orbit.e)
logger.info("Recorded positions: %s", {k: len(s) for k, s in log.vessel_positions_m.items()})
logger.info("Exported %s", export_log_to_json(log))
logger.info("Wrote %s", render_tracks(log, scenario.body_list()))
