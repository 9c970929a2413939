"""
Column placement of one resampled source image inside the composite.

Image i occupies a run of stripe_widths[i] columns, repeated every
sum(stripe_widths) columns, starting at the summed width of the images
before it.
"""

from typing import List, Sequence

import numpy as np

from lenticular.core.exceptions import InvalidInputError


def map_columns(local_width: int, stripe_widths: Sequence[int], image_index: int) -> List[int]:
    """
    Destination composite column for each local column of one image.

    Args:
        local_width: Number of columns in the resampled image
        stripe_widths: Stripe width of every image, in input order
        image_index: Index of the image being placed

    Returns:
        List of length local_width; entry k is the composite column of local column k

    Raises:
        InvalidInputError: If image_index is out of range or a width is not positive

    Example:
        >>> map_columns(12, [3, 3, 2], 0)
        [0, 1, 2, 8, 9, 10, 16, 17, 18, 24, 25, 26]
    """
    return map_columns_array(local_width, stripe_widths, image_index).tolist()


def map_columns_array(local_width: int, stripe_widths: Sequence[int], image_index: int) -> np.ndarray:
    """Vectorised form of map_columns returning an int64 array."""
    if not 0 <= image_index < len(stripe_widths):
        raise InvalidInputError(f"Image index {image_index} out of range for {len(stripe_widths)} stripe widths")
    if local_width < 0:
        raise InvalidInputError(f"Local width must be >= 0, got {local_width}")
    if any(width <= 0 for width in stripe_widths):
        raise InvalidInputError(f"Stripe widths must be positive, got {list(stripe_widths)}")

    own_width = int(stripe_widths[image_index])
    total_width = int(sum(stripe_widths))
    offset = int(sum(stripe_widths[:image_index]))

    local = np.arange(local_width, dtype=np.int64)
    group, within_group = np.divmod(local, own_width)
    return within_group + group * total_width + offset


def split_in_range(dest_columns: np.ndarray, composite_width: int):
    """
    Split a column mapping at the composite edge.

    Returns:
        (kept_local_columns, kept_dest_columns, dropped_count)
    """
    in_range = dest_columns < composite_width
    local_columns = np.nonzero(in_range)[0]
    return local_columns, dest_columns[in_range], int(dest_columns.size - local_columns.size)
