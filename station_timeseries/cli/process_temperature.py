#!/usr/bin/env python3
"""CLI for extracting station temperature series from local NetCDF files"""

from pathlib import Path

from station_timeseries.cli.base_cli import run_processor_cli
from station_timeseries.processing.temperature.config import TemperatureConfig
from station_timeseries.processing.temperature.processor import TemperatureProcessor


def add_temperature_arguments(parser):
    """Add local processing arguments"""
    parser.add_argument(
        "--input",
        nargs="+",
        required=True,
        help="NetCDF files or glob patterns with the hourly temperature stack",
    )
    parser.add_argument(
        "--stations",
        type=Path,
        required=True,
        help="Vector file with station points (GeoJSON, GeoPackage, Shapefile)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Output directory (default: <data-dir>/final)",
    )


def parse_temperature_arguments(args):
    """Parse local processing arguments and return config kwargs"""
    return {
        "input_paths": args.input,
        "stations_path": args.stations,
        "output_dir": args.output_dir,
    }


def main(argv=None):
    run_processor_cli(
        description="Extract daily station temperature series from local NetCDF files",
        config_class=TemperatureConfig,
        processor_class=TemperatureProcessor,
        add_custom_args_func=add_temperature_arguments,
        parse_custom_args_func=parse_temperature_arguments,
        success_message="Temperature processing completed successfully!",
        argv=argv,
    )


if __name__ == "__main__":
    main()
