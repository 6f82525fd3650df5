# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They cover the
rendering framework (window defaults, colours) and the geometry used to
rasterise the particle sprite, as opposed to the particle tuning values
that live in the `particles` section of config.json.
"""

# Window settings
# Set to True to run in borderless fullscreen mode.
# Set to False to run in a resizable window of DEFAULT_WINDOW_SIZE.
FULLSCREEN = False
DEFAULT_WINDOW_SIZE = (1024, 768)
WINDOW_TITLE = "Pinkboard"
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)

# --- Sprite generation ---
# Fill colour of the heart sprite (#ea80b0).
SPRITE_COLOR = (234, 128, 176)
# The heart curve spans roughly 350 units; the sprite maps this extent
# onto its pixel size.
HEART_SPRITE_EXTENT = 350.0
# Angular step used when tracing the heart outline.
HEART_TRACE_STEP = 0.01

# --- Logging ---
# Frames between progress log lines in the animation loop.
LOG_THROTTLE_FRAMES = 600
