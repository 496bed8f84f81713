import argparse
import sys

from skysched import __version__
from skysched.cli import commands


def _common_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--config", help="Path to config TOML (default ~/.config/skysched/config.toml)")
    parser.add_argument("--json", action="store_true", help="Output result as JSON")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["debug", "info", "warn", "error"],
        help="Enable logging at this level",
    )
    return parser


def _location_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--lat", dest="latitude_deg", type=float, help="Observer latitude (deg, north +)")
    parser.add_argument("--lon", dest="longitude_deg", type=float, help="Observer longitude (deg, east +)")
    parser.add_argument("--elevation", dest="elevation_m", type=float, help="Observer elevation (m)")
    parser.add_argument("--utc-offset", dest="utc_offset_h", type=float, help="Local time offset from UTC (h)")
    return parser


def _add_target_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--ra", required=True, help="Right ascension (decimal hours or HH:MM:SS)")
    parser.add_argument("--dec", required=True, help="Declination (decimal degrees or +DD:MM:SS)")


def _add_min_altitude(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--min-alt", dest="min_altitude", type=float, help="Minimum altitude (deg)")


def build_parser() -> argparse.ArgumentParser:
    common = _common_parser()
    site = _location_parser()
    parser = argparse.ArgumentParser(prog="skysched")
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    subparsers = parser.add_subparsers(dest="command")

    p = subparsers.add_parser("twilight", parents=[common, site], help="Sun rise/set and twilight times")
    p.add_argument("--date", help="Date (YYYY-MM-DD, default today UTC)")
    p.add_argument("--end-date", dest="end_date", help="Last date of a range (inclusive)")
    p.set_defaults(func=commands.run_twilight)

    p = subparsers.add_parser("moon", parents=[common, site], help="Moon phase and position")
    p.add_argument("--at", help="Instant (RFC 3339, default now)")
    p.set_defaults(func=commands.run_moon)

    p = subparsers.add_parser("sun", parents=[common, site], help="Sun position")
    p.add_argument("--at", help="Instant (RFC 3339, default now)")
    p.set_defaults(func=commands.run_sun)

    p = subparsers.add_parser("visibility", parents=[common, site], help="Visibility window for a target")
    _add_target_args(p)
    _add_min_altitude(p)
    p.add_argument("--date", help="Date (YYYY-MM-DD, default today UTC)")
    p.add_argument("--end-date", dest="end_date", help="Last date of a range (inclusive)")
    p.set_defaults(func=commands.run_visibility)

    p = subparsers.add_parser("quality", parents=[common, site], help="Observation quality score")
    _add_target_args(p)
    p.add_argument("--at", help="Instant (RFC 3339, default now)")
    p.set_defaults(func=commands.run_quality)

    p = subparsers.add_parser("optimal", parents=[common, site], help="Best time to image a target tonight")
    _add_target_args(p)
    _add_min_altitude(p)
    p.add_argument("--date", help="Date (YYYY-MM-DD, default today UTC)")
    p.set_defaults(func=commands.run_optimal)

    p = subparsers.add_parser("batch", parents=[common, site], help="Positions of every target in a sequence")
    p.add_argument("--sequence", required=True, help="Sequence JSON file")
    p.add_argument("--at", help="Instant (RFC 3339, default now)")
    _add_min_altitude(p)
    p.set_defaults(func=commands.run_batch)

    p = subparsers.add_parser("optimize", parents=[common, site], help="Reorder sequence targets")
    p.add_argument("--sequence", required=True, help="Sequence JSON file")
    p.add_argument("--date", help="Date (YYYY-MM-DD, default today UTC)")
    p.add_argument("--strategy", default="combined", help="Ordering strategy (see 'strategies')")
    p.add_argument("--output", help="Write the reordered sequence to this JSON file")
    _add_min_altitude(p)
    p.set_defaults(func=commands.run_optimize)

    p = subparsers.add_parser("conflicts", parents=[common, site], help="Detect scheduling conflicts")
    p.add_argument("--sequence", required=True, help="Sequence JSON file")
    p.add_argument("--date", help="Date (YYYY-MM-DD, default today UTC)")
    _add_min_altitude(p)
    p.set_defaults(func=commands.run_conflicts)

    p = subparsers.add_parser("etas", parents=[common, site], help="Start/end estimates per target")
    p.add_argument("--sequence", required=True, help="Sequence JSON file")
    p.add_argument("--start", help="Sequence start (RFC 3339, default now)")
    p.set_defaults(func=commands.run_etas)

    p = subparsers.add_parser("schedule", parents=[common, site], help="Best slot for each target")
    p.add_argument("--sequence", required=True, help="Sequence JSON file")
    p.add_argument("--date", help="Date (YYYY-MM-DD, default today UTC)")
    _add_min_altitude(p)
    p.set_defaults(func=commands.run_schedule)

    p = subparsers.add_parser("validate", parents=[common, site], help="Check a sequence against a date")
    p.add_argument("--sequence", required=True, help="Sequence JSON file")
    p.add_argument("--date", help="Date (YYYY-MM-DD, default today UTC)")
    _add_min_altitude(p)
    p.set_defaults(func=commands.run_validate)

    p = subparsers.add_parser("best-date", parents=[common, site], help="Best night in a date range")
    p.add_argument("--sequence", required=True, help="Sequence JSON file")
    p.add_argument("--start-date", dest="start_date", required=True, help="First date (YYYY-MM-DD)")
    p.add_argument("--end-date", dest="end_date", required=True, help="Last date (YYYY-MM-DD)")
    _add_min_altitude(p)
    p.set_defaults(func=commands.run_best_date)

    p = subparsers.add_parser("session", parents=[common, site], help="Estimate total session time")
    p.add_argument("--sequence", required=True, help="Sequence JSON file")
    p.add_argument("--date", help="Date (YYYY-MM-DD, default today UTC)")
    p.add_argument("--no-slew", dest="no_slew", action="store_true", help="Leave slew time out")
    p.set_defaults(func=commands.run_session)

    p = subparsers.add_parser("strategies", parents=[common], help="List ordering strategies")
    p.set_defaults(func=commands.run_strategies)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"skysched {__version__}")
        return 0

    if getattr(args, "func", None) is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
