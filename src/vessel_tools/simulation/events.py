from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from vessel_tools.objects.body import CelestialBody
    from vessel_tools.objects.vessel import Vessel

VESSEL_SOI_CHANGED = "vessel_soi_changed"

Handler = Callable[[Any], None]


@dataclass(frozen=True)
class SoiChange:
    vessel: "Vessel"
    from_body: "CelestialBody"
    to_body: "CelestialBody"


@dataclass
class EventBus:
    """
    Simulation-wide notification channel. Owned by the Scenario.
    Handlers run synchronously, in subscription order.
    """
    handlers: Dict[str, List[Handler]] = field(default_factory=dict)

    def subscribe(self, event: str, handler: Handler) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        subscribed = self.handlers.get(event, [])
        if handler in subscribed:
            subscribed.remove(handler)

    def fire(self, event: str, payload: Any) -> None:
        for handler in list(self.handlers.get(event, [])):
            handler(payload)
