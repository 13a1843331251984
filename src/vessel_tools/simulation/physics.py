from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class PhysicsManager:
    """
    Fine-grained physics scheduler. A hold keeps vessels packed on rails
    until it expires; the Engine checks it every tick.
    """
    hold_until_s: Optional[float] = None

    def hold_vessel_unpack(self, duration_s: float, now_s: float) -> None:
        if duration_s <= 0:
            raise ValueError(f"Hold duration must be positive. Got: {duration_s}")
        until = now_s + duration_s
        if self.hold_until_s is None or until > self.hold_until_s:
            self.hold_until_s = until

    def hold_active(self, now_s: float) -> bool:
        return self.hold_until_s is not None and now_s < self.hold_until_s
