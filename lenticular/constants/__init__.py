"""Constants and enums shared across lenticular."""

from lenticular.constants.constants import (
    AUTO_WIDTH_MAX_ITERATIONS,
    CM_PER_INCH,
    CMYK8_CHANNELS,
    CMYK8_COLOR_TYPE,
    DEFAULT_SCALE_ALGORITHM,
    DEFAULT_SIZING_STRATEGY,
    DEFAULT_STRIPE_WIDTH,
    RESOLUTION_DENOMINATOR,
    RESOLUTION_UNIT_INCH,
    ScaleAlgorithm,
    SizingStrategy,
)

__all__ = [
    "ScaleAlgorithm",
    "SizingStrategy",
    "CM_PER_INCH",
    "CMYK8_CHANNELS",
    "CMYK8_COLOR_TYPE",
    "RESOLUTION_DENOMINATOR",
    "RESOLUTION_UNIT_INCH",
    "AUTO_WIDTH_MAX_ITERATIONS",
    "DEFAULT_SCALE_ALGORITHM",
    "DEFAULT_SIZING_STRATEGY",
    "DEFAULT_STRIPE_WIDTH",
]
