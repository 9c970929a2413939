"""
lenticular command-line entry point.

Interleaves CMYK TIFF inputs into one lenticular composite:

    python -m lenticular -i 01.tif -i 02.tif -w 7 --lpi 91.6 --output-width 10.6 -o out.tif
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from lenticular import __version__
from lenticular.constants import DEFAULT_STRIPE_WIDTH, ScaleAlgorithm, SizingStrategy
from lenticular.core.config import LenticularConfig, config_from_dict, load_config_data
from lenticular.core.exceptions import InvalidInputError, LenticularError
from lenticular.core.pipeline import render_to_file

logger = logging.getLogger("lenticular.main")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the lenticular CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.debug, args.log_file)

    stripe_widths = _resolve_stripe_widths(parser, args.input, args.lenticular_width)
    try:
        config = _build_config(args)
    except InvalidInputError as e:
        parser.error(str(e))

    _log_parameters(args, stripe_widths, config)
    try:
        result = render_to_file(args.input, stripe_widths, config, args.output)
    except LenticularError as e:
        logger.error(f"Composition failed: {e}")
        logger.debug("Failure details", exc_info=True)
        return 1

    if result.stripe_widths != tuple(stripe_widths):
        logger.info(f"Final stripe widths (px): {list(result.stripe_widths)}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lenticular",
        description="Interleave CMYK TIFF images into a lenticular print composite",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-i", "--input", action="append", default=[], required=True,
                        help="Input TIFF; repeat for each image, in interleaving order")
    parser.add_argument("-w", "--lenticular-width", action="append", type=int, default=[],
                        help="Stripe width in pixels per input. Given once, it applies to every input "
                             f"(default: {DEFAULT_STRIPE_WIDTH})")
    parser.add_argument("--no-auto-assign-width", action="store_true",
                        help="Use the stripe widths as given instead of widening them until the output "
                             "is at least as tall as the source")
    parser.add_argument("--scale-algorithm", choices=[a.value for a in ScaleAlgorithm], default=None,
                        help="Resampling filter (default: bilinear)")
    parser.add_argument("--sizing-strategy", choices=[s.value for s in SizingStrategy], default=None,
                        help="Composite sizing formula (default: stripe_ratio)")
    parser.add_argument("--lpi", type=float, default=None,
                        help="Lens sheet density in lenticular lines per inch")
    parser.add_argument("--output-width", type=float, default=None,
                        help="Physical width of the print in centimetres")
    parser.add_argument("--no-normalize", action="store_true",
                        help="Write the anisotropic composite without restoring square pixels")
    parser.add_argument("--compression", default=None,
                        help="TIFF compression, e.g. zlib or lzw (default: none)")
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML file with print/auto_width/output sections; flags override it")
    parser.add_argument("-o", "--output", required=True, help="Output TIFF path")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    return parser


def _setup_logging(debug_mode: bool, log_file: Optional[Path]) -> None:
    """Setup logging configuration."""
    log_level = logging.DEBUG if debug_mode else logging.INFO
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    if not root_logger.hasHandlers():
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(min(root_logger.level or logging.WARNING, log_level))
    logging.getLogger("lenticular").setLevel(log_level)
    logger.debug(f"lenticular {__version__} starting with log level: {logging.getLevelName(log_level)}")


def _resolve_stripe_widths(parser: argparse.ArgumentParser, inputs: List[str], widths: List[int]) -> List[int]:
    """Broadcast a single width to every input and validate the rest."""
    if not inputs:
        parser.error("at least one --input is required")
    if not widths:
        widths = [DEFAULT_STRIPE_WIDTH]
    if len(widths) > 1 and len(widths) != len(inputs):
        parser.error(
            f"number of --lenticular-width values ({len(widths)}) does not match number of inputs ({len(inputs)})"
        )
    if any(w <= 0 for w in widths):
        parser.error("--lenticular-width values must be greater than 0")
    if len(widths) == 1:
        widths = widths * len(inputs)
    return widths


def _build_config(args: argparse.Namespace) -> LenticularConfig:
    """Merge the optional YAML config with command-line overrides."""
    data: Dict[str, Any] = load_config_data(args.config) if args.config else {}
    sections = {name: dict(data.get(name) or {}) for name in ("print", "auto_width", "output")}
    unknown = set(data) - set(sections)
    if unknown:
        raise InvalidInputError(f"Unknown config sections: {sorted(unknown)}")

    overrides = {
        "print": {
            "lpi": args.lpi,
            "physical_width_cm": args.output_width,
            "scale_algorithm": args.scale_algorithm,
            "sizing_strategy": args.sizing_strategy,
        },
        "auto_width": {"enabled": False if args.no_auto_assign_width else None},
        "output": {
            "compression": args.compression,
            "normalize_resolution": False if args.no_normalize else None,
        },
    }
    for section, values in overrides.items():
        sections[section].update({k: v for k, v in values.items() if v is not None})

    missing = [flag for key, flag in (("lpi", "--lpi"), ("physical_width_cm", "--output-width"))
               if key not in sections["print"]]
    if missing:
        raise InvalidInputError(f"missing required value(s): {', '.join(missing)} (flag or config file)")

    return config_from_dict(sections)


def _log_parameters(args: argparse.Namespace, stripe_widths: List[int], config: LenticularConfig) -> None:
    logger.info(f"Input files: {args.input}")
    logger.info(f"Stripe widths (px): {stripe_widths}")
    logger.info(f"Auto-assign stripe width: {config.auto_width.enabled}")
    logger.info(f"LPI: {config.print.lpi}")
    logger.info(f"Output width (cm): {config.print.physical_width_cm}")
    logger.info(f"Scale algorithm: {config.print.scale_algorithm.value}")
    logger.info(f"Sizing strategy: {config.print.sizing_strategy.value}")
    logger.info(f"Output file: {args.output}")


if __name__ == "__main__":
    sys.exit(main())
