"""
Service configuration.

Tunables for orbit repair and relocation, loadable from a JSON file.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

from vessel_tools.core.constants import (
    ANGLE_EPSILON_RAD,
    PHYSICS_HOLD_S,
    SMA_SAFETY_MARGIN_M,
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class DebugToolsConfig:
    """
    Attributes:
        angle_epsilon_rad: Replacement for a zero/NaN inclination or LAN (rad)
        sma_safety_margin_m: Added above radius + atmosphere for a NaN semi-major axis (m)
        physics_hold_s: Length of the physics hold requested before an orbit change (s)
        log_level: Level name passed to logging.basicConfig
    """
    angle_epsilon_rad: float = ANGLE_EPSILON_RAD
    sma_safety_margin_m: float = SMA_SAFETY_MARGIN_M
    physics_hold_s: float = PHYSICS_HOLD_S
    log_level: str = "INFO"

    def __post_init__(self):
        if not math.isfinite(self.angle_epsilon_rad) or self.angle_epsilon_rad <= 0:
            raise ValueError(f"angle_epsilon_rad must be positive. Got: {self.angle_epsilon_rad}")
        if not math.isfinite(self.sma_safety_margin_m) or self.sma_safety_margin_m < 0:
            raise ValueError(f"sma_safety_margin_m must be non-negative. Got: {self.sma_safety_margin_m}")
        if not math.isfinite(self.physics_hold_s) or self.physics_hold_s <= 0:
            raise ValueError(f"physics_hold_s must be positive. Got: {self.physics_hold_s}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")


def config_from_dict(data: Dict[str, Any]) -> DebugToolsConfig:
    known = {f.name for f in fields(DebugToolsConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {sorted(unknown)}")
    return DebugToolsConfig(**data)


def load_config(path: Union[str, Path]) -> DebugToolsConfig:
    """
    Load a config from a JSON object. Missing keys keep their defaults.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")
    return config_from_dict(data)


def configure_logging(config: DebugToolsConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
