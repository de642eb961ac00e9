"""
Module: config
Description: Central constants for the board engine and the pygame host: board presets,
window geometry, colours, frame rate, snake animation tuning and logging.
Inputs: None
Outputs: None
External Sources: None
"""

import logging

# Board presets: (height, width, mines)
PRESETS = {
    "beginner": (9, 9, 10),
    "intermediate": (16, 16, 40),
    "expert": (16, 30, 99),
}
DEFAULT_PRESET = "beginner"

# Keys 1-3 on the keyboard pick these presets, in order
PRESET_ORDER = ["beginner", "intermediate", "expert"]

# Frame loop
FPS = 60

# Snake animation played after a win
SNAKE_FRAME_SKIP = 8  # one snake step every N frames
SNAKE_LENGTH = 6  # tiles remembered by the trail
SNAKE_STRAIGHT_WEIGHT = 3  # weight of the current heading vs. a one-step turn

# Window geometry
CELL_SIZE = 24
BOARD_MARGIN_LEFT = 20
BOARD_MARGIN_TOP = 80
BOARD_MARGIN_RIGHT = 20
BOARD_MARGIN_BOTTOM = 20
MIN_WINDOW_WIDTH = 320

# Colors
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (200, 50, 50)
GOLD = (212, 175, 55)
CLOSED_BG = (148, 163, 184)
OPEN_BG = (203, 213, 225)
GRID_LINE = (71, 85, 105)
NUMBER_COLORS = {
    1: (37, 99, 235),
    2: (22, 163, 74),
    3: (220, 38, 38),
    4: (126, 34, 206),
    5: (146, 64, 14),
    6: (13, 148, 136),
    7: (0, 0, 0),
    8: (100, 116, 139),
}

# Logging
LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
