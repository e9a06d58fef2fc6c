"""Base CLI functionality shared by the extraction commands"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from station_timeseries.constants import (
    COLLISION_POLICIES,
    DEFAULT_COLLISION_POLICY,
    DEFAULT_END_DATE,
    DEFAULT_INTERVAL_COUNT,
    DEFAULT_INTERVAL_SIZE,
    DEFAULT_INTERVAL_UNIT,
    DEFAULT_ORIGIN_DATE,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_SCALE_METERS,
    INTERVAL_UNITS,
    OUTPUT_FORMAT_CSV,
    OUTPUT_FORMAT_PARQUET,
    STATION_ID_FIELD,
    TEMPERATURE_BAND,
)


def create_base_parser(description: str) -> argparse.ArgumentParser:
    """Create base argument parser with the observation window options"""
    parser = argparse.ArgumentParser(description=description)

    parser.add_argument(
        "--origin",
        default=DEFAULT_ORIGIN_DATE,
        help=f"First interval start date (default: {DEFAULT_ORIGIN_DATE})",
    )
    parser.add_argument(
        "--end",
        default=DEFAULT_END_DATE,
        help=f"Archive end date, exclusive (default: {DEFAULT_END_DATE})",
    )
    parser.add_argument(
        "--interval-count",
        type=int,
        default=DEFAULT_INTERVAL_COUNT,
        help=f"Number of intervals (default: {DEFAULT_INTERVAL_COUNT})",
    )
    parser.add_argument(
        "--interval-size",
        type=int,
        default=DEFAULT_INTERVAL_SIZE,
        help=f"Interval width in units (default: {DEFAULT_INTERVAL_SIZE})",
    )
    parser.add_argument(
        "--interval-unit",
        choices=INTERVAL_UNITS,
        default=DEFAULT_INTERVAL_UNIT,
        help=f"Interval unit (default: {DEFAULT_INTERVAL_UNIT})",
    )
    parser.add_argument(
        "--scale",
        type=float,
        default=DEFAULT_SCALE_METERS,
        help=f"Sampling scale in metres (default: {DEFAULT_SCALE_METERS})",
    )
    parser.add_argument(
        "--collision-policy",
        choices=COLLISION_POLICIES,
        default=DEFAULT_COLLISION_POLICY,
        help=f"How to resolve two samples with the same station and date (default: {DEFAULT_COLLISION_POLICY})",
    )
    parser.add_argument(
        "--band",
        default=TEMPERATURE_BAND,
        help=f"Band to extract (default: {TEMPERATURE_BAND})",
    )
    parser.add_argument(
        "--id-field",
        default=STATION_ID_FIELD,
        help=f"Station id field (default: {STATION_ID_FIELD})",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        help="Base data directory (default: ./data)",
    )
    parser.add_argument(
        "--output-format",
        choices=[OUTPUT_FORMAT_CSV, OUTPUT_FORMAT_PARQUET],
        default=DEFAULT_OUTPUT_FORMAT,
        help=f"Output file format (default: {DEFAULT_OUTPUT_FORMAT})",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def setup_logging(debug: bool):
    """Setup logging configuration"""
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def base_config_kwargs(args: argparse.Namespace) -> dict:
    """Config kwargs for the options added by create_base_parser"""
    return {
        "origin": args.origin,
        "end": args.end,
        "interval_count": args.interval_count,
        "interval_size": args.interval_size,
        "interval_unit": args.interval_unit,
        "scale": args.scale,
        "collision_policy": args.collision_policy,
        "band": args.band,
        "id_field": args.id_field,
        "data_dir": args.data_dir,
        "output_format": args.output_format,
        "debug": args.debug,
    }


def run_processor_cli(
    description: str,
    config_class: Any,
    processor_class: Any,
    add_custom_args_func: Optional[Any] = None,
    parse_custom_args_func: Optional[Any] = None,
    success_message: str = "Processing completed successfully!",
    argv: Optional[list] = None,
):
    """Run a processor CLI with flexible functionality

    Args:
        description: CLI description
        config_class: Configuration class to instantiate
        processor_class: Processor class to instantiate
        add_custom_args_func: Function to add custom arguments to parser
        parse_custom_args_func: Function to parse custom arguments and return config kwargs
        success_message: Message to display on successful completion
        argv: Arguments to parse instead of sys.argv
    """
    parser = create_base_parser(description)

    # Add custom arguments if function provided
    if add_custom_args_func:
        add_custom_args_func(parser)

    args = parser.parse_args(argv)

    setup_logging(args.debug)
    logger = logging.getLogger(__name__)

    try:
        config_kwargs = base_config_kwargs(args)

        # Parse custom arguments if function provided
        if parse_custom_args_func:
            config_kwargs.update(parse_custom_args_func(args))

        config = config_class(**config_kwargs)

        # Create and run processor
        processor = processor_class(config)
        outputs = processor.process_with_validation()

        logger.info(success_message)
        logger.info(f"Generated {len(outputs)} outputs:")
        for output in outputs:
            logger.info(f"  {output}")

    except Exception as e:
        logger.error(f"Processing failed: {e}")
        if args.debug:
            import traceback

            traceback.print_exc()
        sys.exit(1)
