#!/usr/bin/env python3
"""Main CLI entry point for station-timeseries

This allows running CLI commands via:
    python -m station_timeseries.cli process_temperature --help
    python -m station_timeseries.cli export_temperature --help
"""

import sys


def main():
    """Main CLI dispatcher"""
    if len(sys.argv) < 2:
        print("Usage: python -m station_timeseries.cli <command> [args...]")
        print("\nAvailable commands:")
        print(
            "  process_temperature  Extract station temperature series from local NetCDF files"
        )
        print(
            "  export_temperature   Export station temperature series via Google Earth Engine"
        )
        print("\nFor help on a specific command:")
        print("  python -m station_timeseries.cli <command> --help")
        sys.exit(1)

    command = sys.argv[1]
    argv = sys.argv[2:]

    if command == "process_temperature":
        from station_timeseries.cli.process_temperature import main as process_main

        process_main(argv)
    elif command == "export_temperature":
        from station_timeseries.cli.export_temperature import main as export_main

        export_main(argv)
    else:
        print(f"Unknown command: {command}")
        print("Available commands: process_temperature, export_temperature")
        sys.exit(1)


if __name__ == "__main__":
    main()
