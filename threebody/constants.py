#!/usr/bin/env python3
"""
Shared constants for the Three-Body Simulator.

Units are abstract simulation units: G is tuned for visual stability at the
scales used by the default scenario, not for physical accuracy.
"""
import math

# Physics controls
G = 9.8  # gravitational constant (simulation units)
DT = 0.1  # simulation time advanced per step
MIN_DISTANCE_SQ = 1.0  # pairs closer than this contribute no force
TRAIL_CAPACITY = 800  # positions kept per body trail

# Scenario defaults
BODY_COUNT = 3
DEFAULT_MASS = 300.0
DEFAULT_SPEED_MULTIPLIER = 12.0
MIN_RANDOM_SPEED = 0.5
RANDOM_OFFSET_SPAN = 20.0
ANCHOR_POSITIONS = (
    (-50.0, 0.0, 0.0),
    (50.0, 0.0, 0.0),
    (0.0, 50.0, 0.0),
)
BODY_COLORS = (
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
)

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (51, 51, 51)
HUD_TEXT_COLOR = (200, 200, 200)
TARGET_FPS = 60

# Orbit camera
CAMERA_DISTANCE = 300.0
CAMERA_FOV_DEG = 75.0
CAMERA_NEAR = 0.1
CAMERA_FAR = 10000.0
CAMERA_DAMPING = 0.25
MIN_CAMERA_DISTANCE = 10.0
MAX_CAMERA_DISTANCE = 5000.0
MAX_PITCH = math.pi / 2 - 1e-3

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
