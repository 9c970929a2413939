"""
Composite assembly: resample each source to its stripe share and interleave
its columns into a shared CMYK8 raster.

Images are processed strictly in input order. If two images map to the same
composite column the later image wins.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from lenticular.constants import CMYK8_CHANNELS, CMYK8_COLOR_TYPE, ScaleAlgorithm
from lenticular.core.column_mapping import map_columns_array, split_in_range
from lenticular.core.exceptions import InvalidInputError
from lenticular.core.pixel_matrix import DpiInfo, PixelMatrix
from lenticular.core.planner import OutputInfo, SourceGeometry, validate_stripe_widths
from lenticular.io import tiff
from lenticular.processing.resample import resample

logger = logging.getLogger(__name__)

Resampler = Callable[[np.ndarray, int, int, ScaleAlgorithm], np.ndarray]


class ImageSource(Protocol):
    """A decodable source image."""

    def geometry(self) -> SourceGeometry:
        ...

    def read_pixels(self) -> np.ndarray:
        ...


class TiffImageSource:
    """Source image stored as a TIFF file, byte string or binary stream."""

    def __init__(self, source: tiff.TiffSource, read_resolution: bool = False):
        self.source = source
        self.read_resolution = read_resolution
        self._geometry: Optional[SourceGeometry] = None

    def geometry(self) -> SourceGeometry:
        if self._geometry is None:
            self._geometry = tiff.read_geometry(self.source, read_resolution=self.read_resolution)
        return self._geometry

    def read_pixels(self) -> np.ndarray:
        return tiff.read_pixels(self.source)

    def __repr__(self) -> str:
        return f"TiffImageSource({tiff.describe_source(self.source)})"


class ArrayImageSource:
    """Source image already decoded to a (H, W, 4) uint8 array."""

    def __init__(self, pixels: np.ndarray, geometry: Optional[SourceGeometry] = None):
        self.pixels = pixels
        if geometry is None:
            geometry = SourceGeometry(
                color_type=_array_color_type(pixels),
                width=int(pixels.shape[1]) if pixels.ndim >= 2 else 0,
                height=int(pixels.shape[0]) if pixels.ndim >= 1 else 0,
            )
        self._geometry = geometry

    def geometry(self) -> SourceGeometry:
        return self._geometry

    def read_pixels(self) -> np.ndarray:
        if _array_color_type(self.pixels) != CMYK8_COLOR_TYPE:
            raise InvalidInputError(
                f"Unsupported pixel layout: expected {CMYK8_COLOR_TYPE}, "
                f"got dtype {self.pixels.dtype} with shape {self.pixels.shape}"
            )
        return self.pixels

    def __repr__(self) -> str:
        return f"ArrayImageSource({self._geometry.describe()})"


def _array_color_type(pixels: np.ndarray) -> str:
    samples = pixels.shape[2] if pixels.ndim == 3 else 1
    return f"SEPARATED:{pixels.dtype.name}x{samples}"


@dataclass(frozen=True)
class ImageReport:
    """Per-image outcome of one composition."""
    index: int
    local_width: int
    local_height: int
    written_columns: int
    dropped_columns: int


class Compositor:
    """
    Owns the composite being assembled for one OutputInfo.

    Args:
        output_info: Planned composite geometry
        scale_algorithm: Filter used to fit each source to its stripe share
        resampler: Resample capability, replaceable for testing
    """

    def __init__(
        self,
        output_info: OutputInfo,
        scale_algorithm: ScaleAlgorithm = ScaleAlgorithm.BILINEAR,
        resampler: Resampler = resample,
    ):
        self.output_info = output_info
        self.scale_algorithm = scale_algorithm
        self.resampler = resampler
        self.reports: List[ImageReport] = []

    @property
    def dropped_columns(self) -> int:
        return sum(report.dropped_columns for report in self.reports)

    def local_size(self, stripe_width: int, total_width: int) -> Tuple[int, int]:
        """Size each image is resampled to before interleaving."""
        local_width = math.floor(stripe_width / total_width * self.output_info.width)
        return local_width, self.output_info.height

    def validate_sources(self, sources: Sequence[ImageSource]) -> None:
        """
        Check every source against the baseline geometry before any pixel is written.

        Raises:
            InvalidInputError: On the first mismatching source
        """
        baseline = self.output_info.source
        for index, source in enumerate(sources):
            geometry = source.geometry()
            logger.debug(f"Image {index:02d} source geometry: {geometry}")
            if not baseline.matches(geometry):
                raise InvalidInputError(
                    f"Image {index} does not match the baseline image: "
                    f"expected {baseline.describe()}, got {geometry.describe()}"
                )

    def compose(self, images: Sequence[Tuple[ImageSource, int]]) -> PixelMatrix:
        """
        Interleave all images into a new composite.

        Args:
            images: (source, stripe_width) pairs in input order

        Returns:
            Composite PixelMatrix carrying the planned (possibly anisotropic) DPI

        Raises:
            InvalidInputError: Empty input, invalid widths, widths that differ
                from the planned layout, geometry mismatch
                or unsupported pixel layout
            CodecError: If a source cannot be decoded
            ResampleError: If a source cannot be resampled to its local size
        """
        if not images:
            raise InvalidInputError("At least one input image is required")

        sources = [source for source, _ in images]
        stripe_widths = validate_stripe_widths([width for _, width in images])
        planned = self.output_info.stripe_widths
        if planned is not None and stripe_widths != planned:
            raise InvalidInputError(
                f"Stripe widths {list(stripe_widths)} do not match the planned layout {list(planned)}"
            )
        total_width = sum(stripe_widths)
        self.validate_sources(sources)

        composite = PixelMatrix.zeros(self.output_info.width, self.output_info.height)
        logger.debug(f"Output image: {composite.width}x{composite.height}")
        self.reports = []

        for index, (source, stripe_width) in enumerate(zip(sources, stripe_widths)):
            self.reports.append(
                self._place_image(composite, index, source, stripe_width, stripe_widths, total_width)
            )

        composite.set_dpi(DpiInfo(dpi_h=self.output_info.dpi_h, dpi_w=self.output_info.dpi_w))
        if self.dropped_columns:
            logger.warning(f"Dropped {self.dropped_columns} out-of-range column(s) at the composite edge")
        return composite

    def _place_image(
        self,
        composite: PixelMatrix,
        index: int,
        source: ImageSource,
        stripe_width: int,
        stripe_widths: Tuple[int, ...],
        total_width: int,
    ) -> ImageReport:
        local_width, local_height = self.local_size(stripe_width, total_width)
        logger.debug(
            f"Image {index:02d}: width ratio {stripe_width / total_width:.2f}, "
            f"resized to {local_width}x{local_height}"
        )

        pixels = source.read_pixels()
        if pixels.ndim != 3 or pixels.shape[2] != CMYK8_CHANNELS or pixels.dtype != np.uint8:
            raise InvalidInputError(
                f"Image {index} decoded to unsupported layout: dtype {pixels.dtype}, shape {pixels.shape}"
            )
        resized = self.resampler(pixels, local_width, local_height, self.scale_algorithm)

        dest_columns = map_columns_array(local_width, stripe_widths, index)
        local_columns, kept_dest, dropped = split_in_range(dest_columns, composite.width)
        if dropped:
            logger.debug(f"Image {index:02d}: skipping {dropped} out-of-range column(s)")
        composite.write_columns(kept_dest, resized, local_columns)

        return ImageReport(
            index=index,
            local_width=local_width,
            local_height=local_height,
            written_columns=int(local_columns.size),
            dropped_columns=dropped,
        )


def compose(
    images: Sequence[Tuple[ImageSource, int]],
    output_info: OutputInfo,
    scale_algorithm: ScaleAlgorithm = ScaleAlgorithm.BILINEAR,
) -> PixelMatrix:
    """Functional wrapper around Compositor.compose."""
    return Compositor(output_info, scale_algorithm).compose(images)
