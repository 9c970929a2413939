"""
TIFF decode/encode for CMYK8 rasters, backed by tifffile.

Sources may be filesystem paths, raw bytes or seekable binary streams.
Only the first page of a file is used.
"""
from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from os import PathLike
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union

import numpy as np
import tifffile

from lenticular.constants import CMYK8_CHANNELS, CMYK8_COLOR_TYPE, RESOLUTION_DENOMINATOR
from lenticular.core.exceptions import CodecError, InvalidInputError
from lenticular.core.pixel_matrix import PixelMatrix
from lenticular.core.planner import SourceGeometry
from lenticular.io.atomic import atomic_write

logger = logging.getLogger(__name__)

TiffSource = Union[str, PathLike, bytes, bytearray, BinaryIO]

_DECODE_ERRORS = (tifffile.TiffFileError, ValueError, OSError, KeyError)


@contextmanager
def _open_tiff(source: TiffSource) -> Iterator[tifffile.TiffFile]:
    """Open a TIFF from a path, bytes or stream, wrapping codec failures."""
    if isinstance(source, (bytes, bytearray)):
        handle = io.BytesIO(bytes(source))
    elif isinstance(source, (str, PathLike)):
        handle = Path(source)
    else:
        source.seek(0)
        handle = source

    try:
        tif = tifffile.TiffFile(handle)
    except _DECODE_ERRORS as e:
        raise CodecError(f"Cannot open TIFF {describe_source(source)}: {e}") from e
    try:
        if len(tif.pages) == 0:
            raise CodecError(f"TIFF {describe_source(source)} contains no pages")
        yield tif
    finally:
        tif.close()


def describe_source(source: TiffSource) -> str:
    if isinstance(source, (str, PathLike)):
        return str(source)
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return getattr(source, "name", repr(source))


def color_type_of(page: tifffile.TiffPage) -> str:
    """Color type identifier, e.g. 'SEPARATED:uint8x4' for CMYK8."""
    photometric = getattr(page.photometric, "name", str(page.photometric))
    dtype = page.dtype.name if page.dtype is not None else "unknown"
    return f"{photometric}:{dtype}x{page.samplesperpixel}"


def _rational_tag(page: tifffile.TiffPage, name: str) -> Optional[Tuple[int, int]]:
    tag = page.tags.get(name)
    if tag is None:
        return None
    value = tag.value
    if isinstance(value, tuple) and len(value) == 2:
        return int(value[0]), int(value[1])
    return None


def read_geometry(source: TiffSource, read_resolution: bool = False) -> SourceGeometry:
    """
    Read color type and dimensions from the first page without decoding pixels.

    Args:
        source: Path, bytes or seekable binary stream
        read_resolution: Also read ResolutionUnit and X/YResolution tags

    Raises:
        CodecError: If the TIFF cannot be parsed
    """
    with _open_tiff(source) as tif:
        page = tif.pages[0]
        resolution_unit = x_resolution = y_resolution = None
        if read_resolution:
            unit_tag = page.tags.get("ResolutionUnit")
            resolution_unit = int(unit_tag.value) if unit_tag is not None else None
            x_resolution = _rational_tag(page, "XResolution")
            y_resolution = _rational_tag(page, "YResolution")

        return SourceGeometry(
            color_type=color_type_of(page),
            width=int(page.imagewidth),
            height=int(page.imagelength),
            resolution_unit=resolution_unit,
            x_resolution=x_resolution,
            y_resolution=y_resolution,
        )


def read_pixels(source: TiffSource) -> np.ndarray:
    """
    Decode the first page as a (H, W, 4) uint8 CMYK array.

    Raises:
        CodecError: If the TIFF cannot be decoded
        InvalidInputError: If the page is not 8-bit, 4-sample separated (CMYK)
    """
    with _open_tiff(source) as tif:
        page = tif.pages[0]
        color_type = color_type_of(page)
        if color_type != CMYK8_COLOR_TYPE:
            raise InvalidInputError(
                f"Unsupported pixel layout in {describe_source(source)}: expected {CMYK8_COLOR_TYPE}, got {color_type}"
            )
        try:
            data = page.asarray()
        except _DECODE_ERRORS as e:
            raise CodecError(f"Cannot decode TIFF {describe_source(source)}: {e}") from e

    if page.planarconfig == tifffile.PLANARCONFIG.SEPARATE:
        data = np.moveaxis(data, 0, -1)
    expected_shape = (int(page.imagelength), int(page.imagewidth), CMYK8_CHANNELS)
    if data.shape != expected_shape:
        raise InvalidInputError(
            f"Decoded array of {describe_source(source)} has shape {data.shape}, expected {expected_shape}"
        )
    return np.ascontiguousarray(data, dtype=np.uint8)


def resolution_rational(dpi: float) -> Tuple[int, int]:
    """DPI as a rational with four decimal places of precision."""
    return int(dpi * RESOLUTION_DENOMINATOR), RESOLUTION_DENOMINATOR


def write_tiff(
    destination: Union[str, PathLike, BinaryIO],
    matrix: PixelMatrix,
    software: str,
    compression: Optional[str] = None,
) -> None:
    """
    Encode a composite as a CMYK TIFF tagged with its DPI.

    Path destinations are written atomically; streams are written in place.

    Args:
        destination: Output path or writable, seekable binary stream
        matrix: Composite with DPI metadata
        software: Value for the Software tag
        compression: tifffile compression name, or None for uncompressed

    Raises:
        InvalidInputError: If the matrix carries no DPI metadata
        CodecError: If encoding or writing fails
    """
    dpi = matrix.dpi
    if dpi is None:
        raise InvalidInputError("Composite has no DPI information; cannot write resolution tags")

    x_resolution = resolution_rational(dpi.dpi_w)
    y_resolution = resolution_rational(dpi.dpi_h)
    logger.debug(
        f"Writing TIFF {matrix.width}x{matrix.height}: XResolution={x_resolution}, "
        f"YResolution={y_resolution}, compression={compression}"
    )

    def _encode(handle) -> None:
        tifffile.imwrite(
            handle,
            matrix.data,
            photometric="separated",
            planarconfig="contig",
            resolution=(x_resolution, y_resolution),
            resolutionunit="INCH",
            software=software,
            compression=compression,
            metadata=None,
        )

    try:
        if isinstance(destination, (str, PathLike)):
            atomic_write(destination, _encode)
        else:
            _encode(destination)
    except (ValueError, TypeError, OSError, RuntimeError) as e:
        raise CodecError(f"Cannot write TIFF to {describe_source(destination)}: {e}") from e
