"""
Automatic stripe-width search.

Widens every stripe by its reduced ratio (width / gcd of all widths) until
the planned composite is at least as tall as the baseline source, so no
image has to be upsampled vertically. The relative stripe ratios between
images are preserved at every step.
"""

import logging
import math
from dataclasses import dataclass
from functools import reduce
from typing import Sequence, Tuple

from lenticular.constants import AUTO_WIDTH_MAX_ITERATIONS
from lenticular.core.config import PrintConfig
from lenticular.core.exceptions import SearchExhaustedError
from lenticular.core.planner import OutputInfo, SourceGeometry, plan, validate_stripe_widths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    stripe_widths: Tuple[int, ...]
    output_info: OutputInfo
    iterations: int


def reduced_steps(stripe_widths: Sequence[int]) -> Tuple[int, ...]:
    """Per-image increment: each width divided by the gcd of all widths."""
    divisor = reduce(math.gcd, stripe_widths)
    return tuple(width // divisor for width in stripe_widths)


def search_stripe_widths(
    baseline: SourceGeometry,
    stripe_widths: Sequence[int],
    params: PrintConfig,
    max_iterations: int = AUTO_WIDTH_MAX_ITERATIONS,
) -> SearchResult:
    """
    Find the smallest ratio-preserving widening of `stripe_widths` whose
    composite height reaches the baseline height.

    The input sequence is never modified; each iteration plans a fresh tuple.

    Args:
        baseline: Geometry of the first input image
        stripe_widths: Initial per-image stripe widths
        params: Global print parameters
        max_iterations: Number of plans evaluated before giving up

    Returns:
        SearchResult with the accepted widths and their OutputInfo

    Raises:
        InvalidInputError: If the widths or baseline are invalid
        SearchExhaustedError: If no acceptable widths are found within max_iterations
    """
    widths = validate_stripe_widths(stripe_widths)
    steps = reduced_steps(widths)

    for iteration in range(1, max_iterations + 1):
        output_info = plan(baseline, widths, params)
        logger.debug(
            f"Auto width attempt {iteration}: widths={list(widths)} -> "
            f"{output_info.width}x{output_info.height} (source height {baseline.height})"
        )
        if output_info.height >= baseline.height:
            return SearchResult(stripe_widths=widths, output_info=output_info, iterations=iteration)
        widths = tuple(width + step for width, step in zip(widths, steps))

    raise SearchExhaustedError(
        f"No stripe widths reached source height {baseline.height} after {max_iterations} attempts "
        f"(starting from {list(stripe_widths)}, last tried {list(widths)})",
        last_widths=widths,
        iterations=max_iterations,
    )
