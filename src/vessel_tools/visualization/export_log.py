from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from vessel_tools.simulation.engine import SimulationLog


def log_to_dict(log: SimulationLog) -> Dict[str, Any]:
    """
    {
      "vessel_positions_m": {"V-001": [{"t": 0.0, "r": [x, y, z]}, ...], ...},
      "events": [{"t": ..., "type": "vessel_soi_changed", "vessel": ..., "from": ..., "to": ...}, ...]
    }
    """
    data: Dict[str, Any] = {"vessel_positions_m": {}, "events": list(log.events)}
    for vessel_id, samples in log.vessel_positions_m.items():
        data["vessel_positions_m"][vessel_id] = [{"t": t, "r": [r[0], r[1], r[2]]} for (t, r) in samples]
    return data


def export_log_to_json(log: SimulationLog, out_path: str = "out/simlog.json") -> str:
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(log_to_dict(log), f)
    return out_path
