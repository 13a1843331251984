from __future__ import annotations

import math

TWO_PI: float = 2.0 * math.pi

# Substitute for an inclination or LAN of exactly zero (node line undefined)
ANGLE_EPSILON_RAD: float = 1e-4

# Height above radius + atmosphere used when a semi-major axis is missing
SMA_SAFETY_MARGIN_M: float = 10000.0

# Duration of the physics hold requested around an orbit relocation
PHYSICS_HOLD_S: float = 60.0

# Reference planet (Kerbin)
KERBIN_MU_M3_S2: float = 3.5316e12
KERBIN_RADIUS_M: float = 600000.0
KERBIN_ATMOSPHERE_M: float = 70000.0
KERBIN_SOI_M: float = 84159286.0
