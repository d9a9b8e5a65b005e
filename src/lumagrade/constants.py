"""Shared numeric constants for the grading chain and LUT codec."""

from __future__ import annotations

# Floors applied to divisions (band widths, spline dx, feather, weight sums)
EPSILON = 1e-6
CURVE_EPSILON = 0.001

# Gamma-2.2 transfer approximation used at every space transition
GAMMA = 2.2

# Rec. 709 luminance weights
LUMA_R = 0.2126
LUMA_G = 0.7152
LUMA_B = 0.0722

# Contrast pivot (scene-linear mid grey)
MID_GREY = 0.18

# Dehaze reference color in linear light
HAZE_COLOR = (0.8, 0.8, 0.9)

# Halation ring
HALATION_TAPS = 8
HALATION_THRESHOLD = 0.5
HALATION_TINT = (1.0, 0.4, 0.1)

# Color mixer band centers (degrees) in band order
MIXER_BAND_NAMES = ("red", "orange", "yellow", "green", "aqua", "blue", "purple", "magenta")
MIXER_BAND_CENTERS = (0.0, 30.0, 60.0, 120.0, 180.0, 240.0, 270.0, 300.0)
MIXER_BAND_WIDTH = 0.1
MIXER_WIDE_BAND_WIDTH = 0.15
MIXER_WIDE_BANDS = ("green", "aqua", "blue")

# Calibration primaries, hue in [0, 1)
CALIBRATION_HUES = (0.0, 1.0 / 3.0, 2.0 / 3.0)
CALIBRATION_WIDTH = 0.33

# Point color qualifiers
MAX_POINT_COLORS = 8

# 3-way wheel luma thresholds
WHEEL_SHADOW_THRESHOLD = 0.33
WHEEL_HIGHLIGHT_THRESHOLD = 0.66

# Grain hash constants
HASH_DOT = (12.9898, 78.233)
HASH_SCALE = 43758.5453123

# AgX log2 encoding window
AGX_MIN_EV = -12.47393
AGX_RANGE_EV = 16.5

# .cube LUT sizes
DEFAULT_LUT_SIZE = 33
MIN_LUT_SIZE = 2
MAX_LUT_SIZE = 129
DEFAULT_LUT_TITLE = "LumaGrade_Export"
UNTITLED_LUT = "Untitled LUT"

# Raster/bake agreement tolerance
PARITY_TOLERANCE = 1e-5
