"""
Consolidated constants for lenticular.

This module defines the enums and numeric constants used by the planner,
the compositor and the TIFF codec.
"""

from enum import Enum


class ScaleAlgorithm(Enum):
    NEAREST = "nearest"
    BILINEAR = "bilinear"
    LANCZOS3 = "lanczos3"


class SizingStrategy(Enum):
    STRIPE_RATIO = "stripe_ratio"  # max/sum of stripe widths, anisotropic DPI
    LINE_COUNT = "line_count"      # legacy uniform lenticular line count


# Unit conversion
CM_PER_INCH = 2.54

# Pixel layout
CMYK8_CHANNELS = 4
CMYK8_COLOR_TYPE = "SEPARATED:uint8x4"

# TIFF resolution tags
RESOLUTION_UNIT_INCH = 2
RESOLUTION_DENOMINATOR = 10000

# Defaults
DEFAULT_STRIPE_WIDTH = 1
DEFAULT_SCALE_ALGORITHM: ScaleAlgorithm = ScaleAlgorithm.BILINEAR
DEFAULT_SIZING_STRATEGY: SizingStrategy = SizingStrategy.STRIPE_RATIO
AUTO_WIDTH_MAX_ITERATIONS = 10000
