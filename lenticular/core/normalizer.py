"""
Square-pixel restoration for anisotropic composites.

The planner produces a raster whose horizontal and vertical DPI may differ.
Before encoding, the lower-resolution axis is stretched so both axes share
the higher DPI.
"""

import logging
import math

from lenticular.constants import ScaleAlgorithm
from lenticular.core.exceptions import InvalidInputError
from lenticular.core.pixel_matrix import DpiInfo, PixelMatrix
from lenticular.processing.resample import resample

logger = logging.getLogger(__name__)


def normalize_resolution(composite: PixelMatrix, resampler=resample) -> PixelMatrix:
    """
    Resample a composite so it represents square pixels at a single DPI.

    Args:
        composite: Composite carrying DPI metadata
        resampler: Resample capability (bilinear filtering is always used)

    Returns:
        The same matrix when DPI is already uniform, otherwise a new matrix
        with dpi_h == dpi_w

    Raises:
        InvalidInputError: If the composite has no DPI metadata
        ResampleError: If resampling fails
    """
    info = composite.dpi
    if info is None:
        raise InvalidInputError("Composite has no DPI information; cannot restore resolution")
    if info.is_uniform:
        return composite

    ratio = info.dpi_h / info.dpi_w
    if ratio > 1.0:
        target_width = math.floor(composite.width * ratio)
        target_height = composite.height
        dpi = info.dpi_h
    else:
        target_width = composite.width
        target_height = math.floor(composite.height / ratio)
        dpi = info.dpi_w

    logger.debug(
        f"Restore resolution: source DPI {info.dpi_w:.2f}x{info.dpi_h:.2f}, "
        f"target {target_width}x{target_height} px at {dpi:.2f} DPI"
    )
    resized = resampler(composite.data, target_width, target_height, ScaleAlgorithm.BILINEAR)
    return PixelMatrix(resized, DpiInfo(dpi_h=dpi, dpi_w=dpi))
