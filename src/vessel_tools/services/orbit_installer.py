"""
Splices an element set into a vessel's live orbit.

This is the only writer of LiveOrbit element fields. The record is updated
in place: its identity never changes, only its values.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vessel_tools.objects.live_orbit import LiveOrbit
from vessel_tools.physics.orbit import OrbitalElements
from vessel_tools.simulation.events import VESSEL_SOI_CHANGED, SoiChange

if TYPE_CHECKING:
    from vessel_tools.simulation.scenario import Scenario

logger = logging.getLogger(__name__)


class OrbitInstaller:
    def __init__(self, scenario: "Scenario"):
        self.scenario = scenario

    def install(self, orbit: LiveOrbit, elements: OrbitalElements) -> bool:
        """
        Overwrite `orbit` with `elements`, rebuild its caches and evaluate it
        at the current universal time.

        Returns:
            True if the reference body changed. A VESSEL_SOI_CHANGED event is
            fired once in that case, and never otherwise.
        """
        old_body = orbit.body

        orbit.inc_rad = elements.inc_rad
        orbit.e = elements.e
        orbit.sma_m = elements.sma_m
        orbit.lan_rad = elements.lan_rad
        orbit.argp_rad = elements.argp_rad
        orbit.M0_rad = elements.M0_rad
        orbit.epoch_s = elements.epoch_s
        orbit.body = elements.body
        orbit.init()
        orbit.update_from_ut(self.scenario.universal_time_s)

        logger.info(
            "Orbit changed to: inc=%s ecc=%s sma=%s lan=%s argpe=%s mep=%s epoch=%s refbody=%s",
            orbit.inc_rad, orbit.e, orbit.sma_m, orbit.lan_rad,
            orbit.argp_rad, orbit.M0_rad, orbit.epoch_s, orbit.body.name,
        )

        body_changed = orbit.body is not old_body
        if body_changed and orbit.owner is not None:
            self.scenario.events.fire(VESSEL_SOI_CHANGED, SoiChange(orbit.owner, old_body, orbit.body))
        return body_changed
