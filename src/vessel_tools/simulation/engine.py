from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Tuple

from vessel_tools.core.frames import Vector3
from vessel_tools.simulation.events import VESSEL_SOI_CHANGED, SoiChange
from vessel_tools.simulation.scenario import Scenario


class System(Protocol):
    """
    Plugin interface for simulation systems.
    Each system runs per tick and can write to the log.
    """
    name: str

    def on_step(self, t_s: float, scenario: Scenario, log: "SimulationLog") -> None:
        ...


@dataclass
class SimulationLog:
    """
    Stores outputs from a simulation run.
    Keep it simple and serializable.
    """
    # Positions: vessel_id -> list of (t, r_world)
    vessel_positions_m: Dict[str, List[Tuple[float, Vector3]]] = field(default_factory=dict)

    # SOI transitions and other notable events
    events: List[Dict[str, Any]] = field(default_factory=list)

    def record_position(self, vessel_id: str, t_s: float, r_world: Vector3) -> None:
        self.vessel_positions_m.setdefault(vessel_id, []).append((t_s, r_world))

    def record_soi_change(self, t_s: float, change: SoiChange) -> None:
        self.events.append({
            "t": t_s,
            "type": VESSEL_SOI_CHANGED,
            "vessel": change.vessel.vessel_id,
            "from": change.from_body.name,
            "to": change.to_body.name,
        })


@dataclass
class Engine:
    """
    Fixed-step simulation engine.
    Deterministic replay: given same scenario + dt + start/end => same output.
    A paused scenario does not advance.
    """
    dt_s: float
    systems: List[System] = field(default_factory=list)

    def step(self, scenario: Scenario, t_s: float, log: SimulationLog) -> bool:
        """Run every system once at t_s. Returns False if the scenario is paused."""
        if scenario.paused:
            return False
        scenario.universal_time_s = t_s
        for sys in self.systems:
            sys.on_step(t_s, scenario, log)
        return True

    def run(self, scenario: Scenario, t_start_s: float, t_end_s: float) -> SimulationLog:
        if self.dt_s <= 0:
            raise ValueError("dt_s must be positive.")
        if t_end_s < t_start_s:
            raise ValueError("t_end_s must be >= t_start_s.")

        log = SimulationLog()

        def on_soi_change(change: SoiChange) -> None:
            log.record_soi_change(scenario.universal_time_s, change)

        scenario.events.subscribe(VESSEL_SOI_CHANGED, on_soi_change)
        try:
            t = t_start_s
            # Inclusive end if it lands exactly; otherwise last tick < end
            while t <= t_end_s + 1e-9:
                if not self.step(scenario, t, log):
                    break
                t += self.dt_s
        finally:
            scenario.events.unsubscribe(VESSEL_SOI_CHANGED, on_soi_change)

        return log
