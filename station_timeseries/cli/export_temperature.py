#!/usr/bin/env python3
"""CLI for exporting station temperature series with Google Earth Engine"""

from pathlib import Path

from station_timeseries.cli.base_cli import run_processor_cli
from station_timeseries.constants import DEFAULT_DRIVE_FOLDER
from station_timeseries.earth_engine.config import ExportConfig
from station_timeseries.earth_engine.exporter import TemperatureSeriesExporter


def add_export_arguments(parser):
    """Add Earth Engine export arguments"""
    stations = parser.add_mutually_exclusive_group(required=True)
    stations.add_argument(
        "--stations-asset",
        help="Earth Engine FeatureCollection asset id with station points",
    )
    stations.add_argument(
        "--stations",
        type=Path,
        help="Local vector file with station points, uploaded inline",
    )
    parser.add_argument(
        "--folder",
        default=DEFAULT_DRIVE_FOLDER,
        help=f"Google Drive folder for the export (default: {DEFAULT_DRIVE_FOLDER})",
    )
    parser.add_argument(
        "--project",
        help="Google Cloud project used to initialize Earth Engine",
    )


def parse_export_arguments(args):
    """Parse export arguments and return config kwargs"""
    return {
        "stations_asset": args.stations_asset,
        "stations_path": args.stations,
        "drive_folder": args.folder,
        "project": args.project,
    }


def main(argv=None):
    run_processor_cli(
        description="Export daily station temperature series from ERA5-Land via Google Earth Engine",
        config_class=ExportConfig,
        processor_class=TemperatureSeriesExporter,
        add_custom_args_func=add_export_arguments,
        parse_custom_args_func=parse_export_arguments,
        success_message="Export task started successfully!",
        argv=argv,
    )


if __name__ == "__main__":
    main()
