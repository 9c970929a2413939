"""
lenticular: interleaves CMYK source images into a lenticular print composite.

The public entry points are re-exported here. Importing the package does not
touch the filesystem.
"""

import logging

__version__ = "0.1.0"


# Set up basic logging configuration if none exists
def _ensure_basic_logging():
    """Ensure basic logging is configured if no configuration exists."""
    root_logger = logging.getLogger()

    # Only configure if no handlers exist and level is too high
    if not root_logger.handlers and root_logger.level > logging.INFO:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

_ensure_basic_logging()

from lenticular.core.config import (  # noqa: E402
    AutoWidthConfig,
    LenticularConfig,
    OutputConfig,
    PrintConfig,
    load_config,
)
from lenticular.core.exceptions import (  # noqa: E402
    CodecError,
    InvalidInputError,
    LenticularError,
    ResampleError,
    SearchExhaustedError,
)
from lenticular.core.pipeline import RunResult, render_to_file, run  # noqa: E402

__all__ = [
    # Core functions
    "run",
    "render_to_file",
    "load_config",

    # Key types
    "RunResult",
    "PrintConfig",
    "AutoWidthConfig",
    "OutputConfig",
    "LenticularConfig",

    # Errors
    "LenticularError",
    "InvalidInputError",
    "CodecError",
    "ResampleError",
    "SearchExhaustedError",
]
