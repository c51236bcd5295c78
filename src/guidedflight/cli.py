"""
Headless scenario runner.

Usage:
    guidedflight --list                      # List preset scenarios
    guidedflight --preset vertical_test      # Run a preset
    guidedflight --scenario my.flight --csv out.csv --throttle 0.8
"""

import argparse
import logging
import sys

from guidedflight import __version__
from guidedflight.core.scenario import (
    SCENARIO_PRESETS,
    constant_control,
    get_preset,
    load_scenario,
    simulate,
)
from guidedflight.core.types import FlightConfigurationError
from guidedflight.utils.export import export_flight_csv, export_summary_txt


def list_presets() -> None:
    print("Available scenarios:")
    for name, config in SCENARIO_PRESETS.items():
        print(f"  {name:18s} dt={config.dt:g}s  duration={config.duration:g}s  "
              f"elevation={config.elevation_deg:g}°")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Guided projectile 6-DOF flight simulation",
        prog="guidedflight"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", default="vertical_test",
                        help="Preset scenario name (default: vertical_test)")
    source.add_argument("--scenario", metavar="FILE",
                        help="Scenario JSON file")
    parser.add_argument("--list", action="store_true", help="List preset scenarios")
    parser.add_argument("--throttle", type=float, default=1.0, help="Constant throttle [0, 1]")
    parser.add_argument("--gimbal-x", type=float, default=0.0, help="Constant gimbal X [-1, 1]")
    parser.add_argument("--gimbal-y", type=float, default=0.0, help="Constant gimbal Y [-1, 1]")
    parser.add_argument("--roll", type=float, default=0.0, help="Constant roll input [-1, 1]")
    parser.add_argument("--csv", metavar="OUT", help="Write the trajectory to CSV")
    parser.add_argument("--summary", metavar="OUT", help="Write a text summary report")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"guidedflight {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.list:
        list_presets()
        return 0

    try:
        if args.scenario:
            config = load_scenario(args.scenario)
        else:
            config = get_preset(args.preset)
    except KeyError:
        print(f"Unknown preset '{args.preset}'. Use --list to see available scenarios.")
        return 2
    except (OSError, FlightConfigurationError) as e:
        print(f"Could not load scenario: {e}")
        return 2

    schedule = constant_control(args.throttle, args.gimbal_x, args.gimbal_y, args.roll)
    try:
        record = simulate(config, schedule)
    except FlightConfigurationError as e:
        print(f"Invalid scenario: {e}")
        return 2

    print(f"Scenario:    {config.name}")
    print(f"Flight time: {record.flight_time:.2f} s")
    print(f"Apogee:      {record.apogee:.2f} m")
    print(f"Max speed:   {record.max_speed:.2f} m/s")
    final = record.position[-1]
    print(f"Final pos:   ({final[0]:.2f}, {final[1]:.2f}, {final[2]:.2f}) m")
    if not record.success:
        print(f"Aborted:     {record.abort_reason}")

    if args.csv and not export_flight_csv(record, args.csv):
        return 1
    if args.summary and not export_summary_txt(record, config, args.summary):
        return 1

    return 0 if record.success else 1


if __name__ == "__main__":
    sys.exit(main())
