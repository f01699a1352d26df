"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from weather_aggregator import __version__
from weather_aggregator.aggregation import JsonLinesSubscriber
from weather_aggregator.catalog import import_cities, list_cities, list_countries
from weather_aggregator.config import get_settings
from weather_aggregator.errors import AggregatorError
from weather_aggregator.flows.baseline import warm_baselines
from weather_aggregator.runtime import Services


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="weather-aggregator",
        description="Stream aggregated multi-provider weather with next-hour predictions",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("info", help="Show application info")

    import_parser = subparsers.add_parser("import-cities", help="Load a world-cities CSV")
    import_parser.add_argument("csv", type=Path, help="Path to the CSV file")

    subparsers.add_parser("countries", help="List catalog countries")

    cities_parser = subparsers.add_parser("cities", help="List the cities of a country")
    cities_parser.add_argument("country", help="Country name as it appears in the catalog")

    stream_parser = subparsers.add_parser("stream", help="Stream ticks for a city as JSON lines")
    stream_parser.add_argument("location_id", help="Catalog id of the city")
    stream_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between ticks (default: tick_interval_seconds from settings)",
    )
    stream_parser.add_argument(
        "--max-ticks",
        type=int,
        default=None,
        help="Stop after this many ticks (default: run until interrupted)",
    )

    warm_parser = subparsers.add_parser("warm-baselines", help="Build missing baselines")
    warm_parser.add_argument("--country", default=None, help="Only cities of this country")
    warm_parser.add_argument("--limit", type=int, default=None, help="At most this many cities")

    return parser


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Data directory: {settings.data_dir}")
    print(f"Tick interval: {settings.tick_interval_seconds}s")
    print(f"Historical depth: {settings.historical_depth} years")
    print(f"OpenWeatherMap key: {'set' if settings.openweathermap_api_key else 'missing'}")
    return 0


def cmd_import_cities(args: argparse.Namespace) -> int:
    """Handle the 'import-cities' command."""
    if not args.csv.exists():
        print(f"No such file: {args.csv}", file=sys.stderr)
        return 1

    services = Services.from_settings(get_settings())
    count = import_cities(args.csv, services.locations)
    print(f"Imported {count} cities.")
    return 0


def cmd_countries(_args: argparse.Namespace) -> int:
    """Handle the 'countries' command."""
    services = Services.from_settings(get_settings())
    for country in list_countries(services.locations):
        print(country)
    return 0


def cmd_cities(args: argparse.Namespace) -> int:
    """Handle the 'cities' command."""
    services = Services.from_settings(get_settings())
    cities = list_cities(services.locations, args.country)
    if not cities:
        print(f"No cities found for {args.country!r}.", file=sys.stderr)
        return 1
    for entry in cities:
        print(f"{entry['id']}\t{entry['city']}\t{entry['lat']:.4f}\t{entry['lng']:.4f}")
    return 0


def cmd_stream(args: argparse.Namespace) -> int:
    """Handle the 'stream' command: ticks go to stdout, logs to stderr."""
    services = Services.from_settings(get_settings())
    try:
        location = services.locations.get(args.location_id)
    except ValueError:
        location = None
    if location is None:
        print(f"Unknown location: {args.location_id}", file=sys.stderr)
        return 1

    options: dict[str, float] = {}
    if args.interval is not None:
        options["interval"] = args.interval
    loop = services.loop_for(location, JsonLinesSubscriber(sys.stdout), **options)

    try:
        loop.run(max_ticks=args.max_ticks)
    except KeyboardInterrupt:
        print("\nStream stopped.", file=sys.stderr)
    except AggregatorError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def cmd_warm_baselines(args: argparse.Namespace) -> int:
    """Handle the 'warm-baselines' command."""
    result = warm_baselines(country=args.country, limit=args.limit)
    print(f"Built {result['built']}, cached {result['cached']}, failed {result['failed']}.")
    return 0


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr so stdout stays machine-readable."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging(args.debug or get_settings().debug)

    commands = {
        "info": cmd_info,
        "import-cities": cmd_import_cities,
        "countries": cmd_countries,
        "cities": cmd_cities,
        "stream": cmd_stream,
        "warm-baselines": cmd_warm_baselines,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
