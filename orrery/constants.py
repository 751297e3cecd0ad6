#!/usr/bin/env python3
"""
Shared constants for the orrery (astronomical units unless stated otherwise).

Distances are in astronomical units [AU], masses in solar masses [Msun] and
time in days. Keeping constants in one place helps ensure values are consistent
across the physics core, the controller and the viewport.
"""

# Physical constants
G = 0.00029591220828559104  # AU^3 Msun^-1 day^-2 (Gaussian constant squared)
AU_IN_METERS = 1.495978707e11  # m
SECONDS_PER_DAY = 86400.0
M_PER_S_TO_AU_PER_DAY = SECONDS_PER_DAY / AU_IN_METERS
GEO_RADIUS_AU = 42164.0e3 / AU_IN_METERS  # geostationary radius, ~2.818e-4 AU

# Physics controls
DEFAULT_SOFTENING2 = 1e-12  # AU^2; added to r^2 before the inverse cube, eps well under GEO radius
H_MAX = 0.05  # days; largest substep the integrators will take
MAX_DT = 0.25  # days per tick the controller will honour
MAX_TIME_SCALE = 100.0  # multiplier ceiling on dt
DEFAULT_DT = 0.25
DEFAULT_TIME_SCALE = 1.0

# Maneuvers
DEFAULT_THRUST_ACCEL = 2e-5  # AU/day^2
DEFAULT_BURN_MPS = 500.0  # m/s

# Trails
DEFAULT_TRAIL_LENGTH = 2000  # samples per body when none is configured
MAX_TRAIL_LENGTH = 20000

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (2, 4, 9)
GRID_COLOR = (40, 45, 60)
SELECTION_COLOR = (255, 255, 0)
PAYLOAD_COLOR = (255, 45, 85)
HUD_COLOR = (200, 200, 200)

# Camera zoom bounds (AU per pixel)
DEFAULT_AU_PER_PIXEL = 0.08
MIN_AU_PER_PIXEL = 1e-6
MAX_AU_PER_PIXEL = 5.0

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
