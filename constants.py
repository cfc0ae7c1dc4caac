# constants.py

"""
Application Constants

This module defines static configuration values for the fireworks show.
These are the tunable constants of the simulation and are not expected to
change between runs. Run-level settings (seed, message, logging) live in
config.json instead.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable. One tick is one frame.
"""

# Screen dimensions
WIDTH = 1280  # Pixels
HEIGHT = 720  # Pixels

# Framerate
FPS = 60  # Frames (ticks) per second

# Colors (RGB)
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
ROCKET_COLOR = (255, 220, 160)

# Window Title
TITLE = "Fireworks"

# --- Physics ---
GRAVITY = 0.06  # Pixels / tick^2, applied to fragments
WIND = 0.0  # Horizontal drift term, scaled per entity type
FRAGMENT_FRICTION_X = 0.995
FRAGMENT_FRICTION_Y = 0.998
FRAGMENT_BOTTOM_MARGIN = 200  # Pixels below the canvas before a fragment dies

# --- Rockets ---
ROCKET_GRAVITY_SCALE = 0.02  # Rockets feel only a fraction of gravity
ROCKET_TRAIL_LENGTH = 20  # Samples
ROCKET_WOBBLE_FREQUENCY = 0.08  # Radians per tick of age
ROCKET_WOBBLE_AMPLITUDE = 0.3  # Pixels
ROCKET_APEX_VY = -1.0  # Explode once vertical velocity decays past this
ROCKET_TOP_MARGIN = 50  # Pixels above the canvas before a rocket is offscreen
ROCKET_SIDE_MARGIN = 100  # Pixels left/right of the canvas

# --- Explosions (ranges are [low, high)) ---
BURST_COUNT_RANGE = (80, 280)
BURST_SPEED_RANGE = (1.8, 6.5)
BURST_LIFE_RANGE = (40, 110)
BURST_VERTICAL_SCALE = 0.9

MESSAGE_BURST_COUNT = 3000
MESSAGE_BURST_SPEED_RANGE = (0.6, 3.6)
MESSAGE_BURST_LIFE = 240

# --- Mass explosion (message dispersal) ---
SMALL_BURST_COUNT_RANGE = (5, 10)
SMALL_BURST_SPEED_RANGE = (2, 6)
SMALL_BURST_LIFE_RANGE = (60, 100)
SMALL_BURST_SIZE_RANGE = (2, 3)
SMALL_BURST_COLOR_JITTER = 30

LARGE_BURST_COUNT_RANGE = (50, 100)
LARGE_BURST_SPEED_RANGE = (3, 10)
LARGE_BURST_LIFE_RANGE = (80, 150)
LARGE_BURST_SIZE_RANGE = (3, 5)

SCATTER_BURST_COUNT = 10

# Pastel-biased colors have every channel in this range (inclusive).
PASTEL_CHANNEL_RANGE = (150, 255)

# --- Message cadence ---
COUNTDOWN_RANGE = (4, 8)  # Explosions between messages, [low, high)
HOLD_TICKS = 180  # ~3 seconds at 60 FPS
MESSAGE_SOURCE_JITTER = 50  # Pixels around the anchor when no fragment is free

# --- Message particles ---
MESSAGE_ARRIVAL_DISTANCE = 2.0  # Pixels
MESSAGE_DELAY_RANGE = (0, 60)  # Ticks
MESSAGE_MIN_SPEED = 0.5
MESSAGE_MAX_SPEED = 8.0
MESSAGE_SPEED_DISTANCE = 100.0  # Distance at which the max speed is reached
MESSAGE_FADE_RATE = 8  # Alpha units per tick after arrival

# --- Glyph sampling ---
GLYPH_STRIDE = 8  # Pixels between samples on both axes
GLYPH_ALPHA_THRESHOLD = 128  # Samples must be strictly above this
FONT_SCALE = 0.2  # Font size as a fraction of min(width, height)

# --- Spawning ---
POOL_SIZE = 300
INITIAL_SPAWN_INTERVAL = 40  # Ticks
SPAWN_INTERVAL_RANGE = (28, 60)  # Ticks, [low, high)
POINTER_ROCKET_RANGE = (1, 3)  # Rockets per click, [low, high)
POINTER_SPREAD = 60  # Pixels
POINTER_EDGE_MARGIN = 30  # Pixels

# Visual Effects
SKY_ALPHA = 14  # Alpha of the black fill each frame. Lower = longer trails.
TRAIL_EFFECT_COLOR = (0, 0, 0, SKY_ALPHA)

# Bloom effect settings
BLOOM_RADIUS = 20  # The radius of the glow effect in pixels. Larger is more diffuse.
BLOOM_INTENSITY = 30  # The brightness of the glow (0-255).
