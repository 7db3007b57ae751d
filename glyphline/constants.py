# this_file: glyphline/constants.py
"""
Rendering defaults shared across the pipeline and the CLI.
"""

# Default font size (points); 72 dpi, so one point is one pixel
DEFAULT_POINT_SIZE = 12.0

# Default padding around the text (pixels)
DEFAULT_PADDING = 0

# Default palette (RGBA)
DEFAULT_FOREGROUND = (0, 0, 0, 255)
DEFAULT_BACKGROUND = (0, 0, 0, 0)

# Font backend used when none is requested
DEFAULT_BACKEND = "auto"

# Sub-pixel precision of layout arithmetic (26.6 fixed point)
FIXED_SHIFT = 6
FIXED_ONE = 1 << FIXED_SHIFT
