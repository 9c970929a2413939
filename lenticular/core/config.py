"""
Configuration dataclasses for lenticular.

This module defines the configuration objects consumed by the planner, the
stripe-width search and the TIFF writer. Configuration is immutable and is
provided as Python objects, optionally loaded from a YAML file.
"""

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from lenticular import __version__
from lenticular.constants import (
    AUTO_WIDTH_MAX_ITERATIONS,
    CM_PER_INCH,
    DEFAULT_SCALE_ALGORITHM,
    DEFAULT_SIZING_STRATEGY,
    ScaleAlgorithm,
    SizingStrategy,
)
from lenticular.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrintConfig:
    """Global print parameters shared by every input image."""
    lpi: float
    """Lenticular lines per inch of the target lens sheet."""

    physical_width_cm: float
    """Physical width of the printed composite, in centimetres."""

    scale_algorithm: ScaleAlgorithm = DEFAULT_SCALE_ALGORITHM
    """Resampling filter used when fitting each source to its stripe share."""

    sizing_strategy: SizingStrategy = DEFAULT_SIZING_STRATEGY
    """Formula used to size the composite."""

    def __post_init__(self):
        if not _is_positive_number(self.lpi):
            raise InvalidInputError(f"lpi must be > 0, got {self.lpi!r}")
        if not _is_positive_number(self.physical_width_cm):
            raise InvalidInputError(f"physical width must be > 0 cm, got {self.physical_width_cm!r}")
        if not isinstance(self.scale_algorithm, ScaleAlgorithm):
            raise InvalidInputError(f"scale_algorithm must be a ScaleAlgorithm, got {self.scale_algorithm!r}")
        if not isinstance(self.sizing_strategy, SizingStrategy):
            raise InvalidInputError(f"sizing_strategy must be a SizingStrategy, got {self.sizing_strategy!r}")

    @property
    def physical_width_in(self) -> float:
        """
        Print width in inches, using the exact 2.54 cm inch.

        The legacy command-line tool multiplied by 0.3937 instead. That factor
        is slightly short of 1 / 2.54 and floors whole-inch prints one pixel
        low (a 2.54 cm, 10 LPI, two-image print comes out 19x9 instead of
        20x10), so it is not used here.
        """
        return self.physical_width_cm / CM_PER_INCH


@dataclass(frozen=True)
class AutoWidthConfig:
    """Configuration for the automatic stripe-width search."""
    enabled: bool = True
    """Widen stripes until the composite is at least as tall as the source."""

    max_iterations: int = AUTO_WIDTH_MAX_ITERATIONS
    """Safety bound on search steps before failing."""

    def __post_init__(self):
        if not isinstance(self.max_iterations, int) or self.max_iterations < 1:
            raise InvalidInputError(f"max_iterations must be a positive integer, got {self.max_iterations!r}")


@dataclass(frozen=True)
class OutputConfig:
    """Configuration for the written composite."""
    software: str = f"lenticular {__version__}"
    """Value of the TIFF Software tag."""

    compression: Optional[str] = None
    """TIFF compression name passed to tifffile (None writes uncompressed)."""

    normalize_resolution: bool = True
    """Resample the composite to square pixels before writing."""


@dataclass(frozen=True)
class LenticularConfig:
    """Root configuration object for a composition run."""
    print: PrintConfig
    auto_width: AutoWidthConfig = field(default_factory=AutoWidthConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value > 0


def _coerce_enum(enum_cls, value, name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError as e:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidInputError(f"Invalid {name} {value!r}; expected one of: {choices}") from e


def _build_section(cls, data: Dict[str, Any], section: str, **overrides):
    """Construct a config dataclass, rejecting keys the dataclass does not know."""
    if not isinstance(data, dict):
        raise InvalidInputError(f"Config section '{section}' must be a mapping, got {type(data).__name__}")

    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise InvalidInputError(f"Unknown keys in config section '{section}': {sorted(unknown)}")

    try:
        return cls(**{**data, **overrides})
    except TypeError as e:
        raise InvalidInputError(f"Invalid config section '{section}': {e}") from e


def config_from_dict(data: Dict[str, Any]) -> LenticularConfig:
    """
    Build a LenticularConfig from a plain mapping.

    Args:
        data: Mapping with optional 'print', 'auto_width' and 'output' sections.

    Returns:
        Validated LenticularConfig

    Raises:
        InvalidInputError: For unknown sections or keys, missing print fields,
            or values that fail validation
    """
    if not isinstance(data, dict):
        raise InvalidInputError(f"Config root must be a mapping, got {type(data).__name__}")

    unknown_sections = set(data) - {"print", "auto_width", "output"}
    if unknown_sections:
        raise InvalidInputError(f"Unknown config sections: {sorted(unknown_sections)}")

    print_data = dict(data.get("print") or {})
    overrides = {}
    if "scale_algorithm" in print_data:
        overrides["scale_algorithm"] = _coerce_enum(ScaleAlgorithm, print_data["scale_algorithm"], "scale_algorithm")
    if "sizing_strategy" in print_data:
        overrides["sizing_strategy"] = _coerce_enum(SizingStrategy, print_data["sizing_strategy"], "sizing_strategy")

    return LenticularConfig(
        print=_build_section(PrintConfig, print_data, "print", **overrides),
        auto_width=_build_section(AutoWidthConfig, data.get("auto_width") or {}, "auto_width"),
        output=_build_section(OutputConfig, data.get("output") or {}, "output"),
    )


def load_config_data(config_file: Union[str, Path]) -> Dict[str, Any]:
    """Read the raw mapping from a YAML config file."""
    config_file = Path(config_file)
    logger.info(f"Loading configuration from {config_file}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            loaded_data = yaml.safe_load(f)
    except OSError as e:
        raise InvalidInputError(f"Cannot read config file {config_file}: {e}") from e
    except yaml.YAMLError as e:
        raise InvalidInputError(f"Error parsing YAML from {config_file}: {e}") from e

    if loaded_data is None:
        logger.warning(f"Config file {config_file} is empty")
        return {}
    if not isinstance(loaded_data, dict):
        raise InvalidInputError(f"Config file {config_file} does not contain a mapping")
    return loaded_data


def load_config(config_file: Union[str, Path]) -> LenticularConfig:
    """Load and validate a LenticularConfig from a YAML file."""
    return config_from_dict(load_config_data(config_file))
