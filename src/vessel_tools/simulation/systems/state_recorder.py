from __future__ import annotations

from dataclasses import dataclass

from vessel_tools.simulation.scenario import Scenario
from vessel_tools.simulation.engine import SimulationLog


@dataclass
class StateRecorderSystem:
    name: str = "state_recorder"

    def on_step(self, t_s: float, scenario: Scenario, log: SimulationLog) -> None:
        for vessel in scenario.vessel_list():
            log.record_position(vessel.vessel_id, t_s, vessel.world_position)
