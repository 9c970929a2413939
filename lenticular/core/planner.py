"""
Output planning: composite pixel dimensions and DPI from print parameters.

Two sizing strategies are available:

- STRIPE_RATIO: the finest lenticule (the widest stripe set) fixes the
  vertical DPI, and the sum of all stripe widths stretches the horizontal
  DPI. The intermediate raster is anisotropic whenever the summed stripe
  width differs from the widest one; see lenticular.core.normalizer.
- LINE_COUNT: legacy formula driven by the number of lenticular lines across
  the print. Stripe widths are scaled so one lenticule (one stripe of every
  image) spans dpi / lpi pixels at uniform DPI. It is not interchangeable
  with STRIPE_RATIO for non-uniform widths.
"""
from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from lenticular.constants import SizingStrategy
from lenticular.core.config import PrintConfig
from lenticular.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

Rational = Tuple[int, int]


@dataclass(frozen=True)
class SourceGeometry:
    """
    Geometry and color layout of one decoded source image.

    Resolution fields are only populated for the baseline (first) image.
    """
    color_type: str
    width: int
    height: int
    resolution_unit: Optional[int] = None
    x_resolution: Optional[Rational] = None
    y_resolution: Optional[Rational] = None

    def matches(self, other: SourceGeometry) -> bool:
        """True when color type and pixel dimensions are identical."""
        return (
            self.color_type == other.color_type
            and self.width == other.width
            and self.height == other.height
        )

    def describe(self) -> str:
        return f"{self.color_type} {self.width}x{self.height}"


@dataclass(frozen=True)
class OutputInfo:
    """Planned composite dimensions and (possibly anisotropic) DPI."""
    width: int
    height: int
    dpi_h: float
    dpi_w: float
    source: SourceGeometry
    stripe_widths: Optional[Tuple[int, ...]] = None
    """Per-image column layout the composite is planned for; None leaves it to the caller."""


def validate_stripe_widths(stripe_widths: Sequence[int]) -> Tuple[int, ...]:
    """
    Check stripe widths and return them as a tuple.

    Raises:
        InvalidInputError: If the sequence is empty or any width is not a
            positive integer
    """
    if stripe_widths is None or len(stripe_widths) == 0:
        raise InvalidInputError("At least one stripe width is required")
    for index, width in enumerate(stripe_widths):
        if isinstance(width, bool) or not isinstance(width, numbers.Integral) or width <= 0:
            raise InvalidInputError(f"Stripe width of image {index} must be a positive integer, got {width!r}")
    return tuple(int(width) for width in stripe_widths)


def plan(baseline: Optional[SourceGeometry], stripe_widths: Sequence[int], params: PrintConfig) -> OutputInfo:
    """
    Compute composite dimensions and DPI for one run.

    Args:
        baseline: Geometry of the first input image
        stripe_widths: Pixel width of each image's repeating stripe, in input order
        params: Global print parameters

    Returns:
        OutputInfo for the configured sizing strategy

    Raises:
        InvalidInputError: If the baseline is missing or widths are invalid
    """
    if baseline is None:
        raise InvalidInputError("Baseline geometry is not available")
    if baseline.width <= 0 or baseline.height <= 0:
        raise InvalidInputError(f"Baseline image has no pixels: {baseline.describe()}")
    widths = validate_stripe_widths(stripe_widths)

    if params.sizing_strategy is SizingStrategy.LINE_COUNT:
        info = _plan_line_count(baseline, widths, params)
    else:
        info = _plan_stripe_ratio(baseline, widths, params)

    logger.debug(
        f"Planned output ({params.sizing_strategy.value}): {info.width}x{info.height} px, "
        f"DPI_H={info.dpi_h:.2f}, DPI_W={info.dpi_w:.2f} for stripe widths {list(info.stripe_widths)}"
    )
    return info


def _plan_stripe_ratio(baseline: SourceGeometry, widths: Tuple[int, ...], params: PrintConfig) -> OutputInfo:
    max_width = max(widths)
    total_width = sum(widths)
    stretch = total_width / max_width

    dpi_h = params.lpi * max_width
    dpi_w = dpi_h * stretch
    scale = dpi_h * params.physical_width_in / baseline.width

    return OutputInfo(
        width=math.floor(baseline.width * scale * stretch),
        height=math.floor(baseline.height * scale),
        dpi_h=dpi_h,
        dpi_w=dpi_w,
        source=baseline,
        stripe_widths=widths,
    )


def _plan_line_count(baseline: SourceGeometry, widths: Tuple[int, ...], params: PrintConfig) -> OutputInfo:
    physical_width_in = params.physical_width_in
    line_count = math.ceil(physical_width_in * params.lpi)
    total_width = sum(widths)

    # One lenticule holds one stripe of every image. Widths are scaled by a
    # whole multiple until the composite is at least as wide as the baseline.
    multiple = math.ceil(baseline.width / (line_count * total_width))
    layout = tuple(width * multiple for width in widths)
    stripe_px = multiple * total_width

    width = stripe_px * line_count
    height = math.ceil(baseline.height * (width / baseline.width))
    dpi = width / physical_width_in
    logger.debug(f"Line count layout: {line_count} lenticules of {stripe_px} px, stripe widths {list(layout)}")

    return OutputInfo(width=width, height=height, dpi_h=dpi, dpi_w=dpi, source=baseline, stripe_widths=layout)
