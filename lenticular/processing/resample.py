"""
CMYK8 resampling backed by Pillow.

Buffers are NumPy arrays of shape (H, W, 4) and dtype uint8. They are wrapped
in a Pillow image of mode "CMYK" so every channel is filtered independently
(no alpha premultiplication).
"""
from __future__ import annotations

import logging
from typing import Dict

import numpy as np
from PIL import Image

from lenticular.constants import CMYK8_CHANNELS, ScaleAlgorithm
from lenticular.core.exceptions import ResampleError

logger = logging.getLogger(__name__)

_PIL_FILTERS: Dict[ScaleAlgorithm, Image.Resampling] = {
    ScaleAlgorithm.NEAREST: Image.Resampling.NEAREST,
    ScaleAlgorithm.BILINEAR: Image.Resampling.BILINEAR,
    ScaleAlgorithm.LANCZOS3: Image.Resampling.LANCZOS,  # Pillow's LANCZOS has support 3
}


def pil_filter(algorithm: ScaleAlgorithm) -> Image.Resampling:
    try:
        return _PIL_FILTERS[algorithm]
    except KeyError:
        raise ResampleError(f"Unsupported scale algorithm: {algorithm!r}") from None


def _validate_buffer(pixels: np.ndarray) -> None:
    if not isinstance(pixels, np.ndarray):
        raise ResampleError(f"Pixel buffer must be a NumPy array, got {type(pixels)}")
    if pixels.ndim != 3 or pixels.shape[2] != CMYK8_CHANNELS:
        raise ResampleError(f"Pixel buffer must have shape (H, W, {CMYK8_CHANNELS}), got {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ResampleError(f"Pixel buffer must be uint8, got {pixels.dtype}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ResampleError(f"Cannot resample an empty buffer of shape {pixels.shape}")


def resample(pixels: np.ndarray, width: int, height: int, algorithm: ScaleAlgorithm) -> np.ndarray:
    """
    Resize a CMYK8 buffer to width x height.

    Args:
        pixels: Source buffer of shape (H, W, 4), uint8
        width: Target width in pixels
        height: Target height in pixels
        algorithm: Resampling filter

    Returns:
        New buffer of shape (height, width, 4), uint8

    Raises:
        ResampleError: On zero-sized targets or malformed buffers
    """
    _validate_buffer(pixels)
    if width <= 0 or height <= 0:
        raise ResampleError(
            f"Target size must be non-zero, got {width}x{height} (source {pixels.shape[1]}x{pixels.shape[0]})"
        )

    src_height, src_width = pixels.shape[:2]
    if (src_width, src_height) == (width, height):
        return pixels.copy()

    resample_filter = pil_filter(algorithm)
    image = Image.frombytes("CMYK", (src_width, src_height), np.ascontiguousarray(pixels).tobytes())
    try:
        resized = image.resize((width, height), resample=resample_filter)
    except (ValueError, MemoryError) as e:
        raise ResampleError(f"Failed to resample {src_width}x{src_height} to {width}x{height}: {e}") from e

    logger.debug(f"Resampled {src_width}x{src_height} -> {width}x{height} ({algorithm.value})")
    return np.asarray(resized, dtype=np.uint8).reshape(height, width, CMYK8_CHANNELS).copy()
