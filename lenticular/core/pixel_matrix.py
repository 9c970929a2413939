"""
Dense CMYK8 pixel container used while assembling the composite.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from lenticular.constants import CMYK8_CHANNELS
from lenticular.core.exceptions import InvalidInputError


@dataclass(frozen=True)
class DpiInfo:
    """Horizontal (dpi_w) and vertical (dpi_h) resolution of a raster."""
    dpi_h: float
    dpi_w: float

    @property
    def is_uniform(self) -> bool:
        return self.dpi_h == self.dpi_w


class PixelMatrix:
    """
    Row-major height x width grid of 4-channel 8-bit pixels.

    The backing array has shape (height, width, 4) and dtype uint8. DPI
    metadata is optional and is attached once composition finishes.
    """

    def __init__(self, data: np.ndarray, dpi: Optional[DpiInfo] = None):
        if not isinstance(data, np.ndarray):
            raise InvalidInputError(f"Pixel data must be a NumPy array, got {type(data)}")
        if data.ndim != 3 or data.shape[2] != CMYK8_CHANNELS:
            raise InvalidInputError(f"Pixel data must have shape (H, W, {CMYK8_CHANNELS}), got {data.shape}")
        if data.dtype != np.uint8:
            raise InvalidInputError(f"Pixel data must be uint8, got {data.dtype}")
        self._data = data
        self._dpi = dpi

    @classmethod
    def zeros(cls, width: int, height: int) -> PixelMatrix:
        return cls(np.zeros((height, width, CMYK8_CHANNELS), dtype=np.uint8))

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def dpi(self) -> Optional[DpiInfo]:
        return self._dpi

    def set_dpi(self, dpi: DpiInfo) -> None:
        self._dpi = dpi

    def write_columns(self, dest_columns: np.ndarray, source: np.ndarray, source_columns: np.ndarray) -> None:
        """Copy whole columns of `source` into this matrix at `dest_columns`."""
        self._data[:, dest_columns, :] = source[:, source_columns, :]

    def __repr__(self) -> str:
        return f"PixelMatrix({self.width}x{self.height}, dpi={self._dpi})"
