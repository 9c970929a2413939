"""
End-to-end composition run.

plan (optionally with automatic stripe-width search) -> compose -> normalize,
and for render_to_file, encode. Any failure aborts the run before anything
is written.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from os import PathLike
from typing import List, Sequence, Tuple, Union

from lenticular.core.auto_width import search_stripe_widths
from lenticular.core.compositor import Compositor, ImageReport, ImageSource, TiffImageSource
from lenticular.core.config import LenticularConfig
from lenticular.core.exceptions import InvalidInputError
from lenticular.core.normalizer import normalize_resolution
from lenticular.core.pixel_matrix import PixelMatrix
from lenticular.core.planner import OutputInfo, plan, validate_stripe_widths
from lenticular.io.tiff import TiffSource, write_tiff

logger = logging.getLogger(__name__)

SourceLike = Union[ImageSource, TiffSource]


@dataclass(frozen=True)
class RunResult:
    """Everything a composition run produced."""
    stripe_widths: Tuple[int, ...]
    output_info: OutputInfo
    composite: PixelMatrix
    reports: Tuple[ImageReport, ...]

    @property
    def dropped_columns(self) -> int:
        return sum(report.dropped_columns for report in self.reports)


def as_image_sources(sources: Sequence[SourceLike]) -> List[ImageSource]:
    """Wrap paths, bytes and streams as TIFF sources; the first one reads resolution tags."""
    wrapped = []
    for index, source in enumerate(sources):
        if hasattr(source, "geometry") and hasattr(source, "read_pixels"):
            wrapped.append(source)
        else:
            wrapped.append(TiffImageSource(source, read_resolution=(index == 0)))
    return wrapped


def plan_run(
    sources: Sequence[ImageSource],
    stripe_widths: Sequence[int],
    config: LenticularConfig,
) -> Tuple[Tuple[int, ...], OutputInfo]:
    """
    Plan the composite, widening stripes when auto width is enabled and the
    first plan is shorter than the source.

    Returns the planned per-image column layout with its OutputInfo.
    """
    if not sources:
        raise InvalidInputError("At least one input image is required")
    widths = validate_stripe_widths(stripe_widths)
    if len(widths) != len(sources):
        raise InvalidInputError(
            f"Number of stripe widths ({len(widths)}) does not match number of images ({len(sources)})"
        )

    baseline = sources[0].geometry()
    logger.debug(f"Baseline geometry: {baseline}")

    output_info = plan(baseline, widths, config.print)
    if config.auto_width.enabled and output_info.height < baseline.height:
        logger.info(
            f"Planned height {output_info.height} px is below source height {baseline.height} px; "
            f"searching for wider stripes"
        )
        result = search_stripe_widths(baseline, widths, config.print, config.auto_width.max_iterations)
        output_info = result.output_info
        logger.info(f"Auto stripe widths (px): {list(result.stripe_widths)} after {result.iterations} attempt(s)")

    logger.info(
        f"Output: {output_info.width}x{output_info.height} px, "
        f"DPI_H={output_info.dpi_h:.2f}, DPI_W={output_info.dpi_w:.2f}"
    )
    return output_info.stripe_widths, output_info


def run(
    sources: Sequence[SourceLike],
    stripe_widths: Sequence[int],
    config: LenticularConfig,
) -> RunResult:
    """
    Compose the lenticular image in memory.

    Args:
        sources: Input images in interleaving order (paths, bytes, streams or ImageSource objects)
        stripe_widths: Stripe width per image, in pixels
        config: Run configuration

    Returns:
        RunResult with the final (normalized unless disabled) composite
    """
    image_sources = as_image_sources(sources)
    widths, output_info = plan_run(image_sources, stripe_widths, config)

    compositor = Compositor(output_info, config.print.scale_algorithm)
    composite = compositor.compose(list(zip(image_sources, widths)))
    if config.output.normalize_resolution:
        composite = normalize_resolution(composite)

    return RunResult(
        stripe_widths=widths,
        output_info=output_info,
        composite=composite,
        reports=tuple(compositor.reports),
    )


def render_to_file(
    sources: Sequence[SourceLike],
    stripe_widths: Sequence[int],
    config: LenticularConfig,
    output_path: Union[str, PathLike],
) -> RunResult:
    """Run the composition and write the result as a CMYK TIFF."""
    start = time.perf_counter()
    result = run(sources, stripe_widths, config)
    write_tiff(output_path, result.composite, config.output.software, config.output.compression)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Wrote {result.composite.width}x{result.composite.height} composite to {output_path} "
        f"in {elapsed_ms:.0f} ms"
    )
    return result
