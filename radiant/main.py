"""
Radiant command-line entry point for the meteor shower observation log.

Usage:
    radiant stats                         # Aggregate stats for your log
    radiant list --shower perseids        # Logged sessions, newest first
    radiant log --shower perseids --date 2025-08-12 --start 22:00 --end 01:30 \\
                --meteors 42 --rating 5
    radiant delete obs_1723420800000_k3j9x0a2b
    radiant showers --upcoming 30         # Catalog queries
    radiant conditions geminids --lat 47.6 --lon -122.3 --date 2025-12-14
    radiant reminders                     # Reminder plan for the scheduler
    radiant favorite add geminids
    radiant engagement                    # Usage counters
"""

import argparse
import json
import logging
import sys
from datetime import date, time
from pathlib import Path

from PyQt6.QtCore import QCoreApplication

from radiant import astronomy
from radiant.catalog import ShowerCatalog
from radiant.database.db import Database, StorageError
from radiant.models.observation import (
    InvalidObservationError,
    MeteorCounts,
    SkyConditions,
)
from radiant.models.shower import UserLocation
from radiant.services.engagement import EngagementTracker
from radiant.services.observation_service import ObservationService
from radiant.services.reminders import plan_reminders
from radiant.utils.config import Config
from radiant.utils.constants import WEATHER_TYPES

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else Config().get("log_level", "INFO")
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def _print_json(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


# =============================================================================
# Observation log
# =============================================================================

def cmd_stats(args, service: ObservationService, catalog: ShowerCatalog):
    stats = service.get_stats()
    if args.json:
        _print_json(stats.to_dict())
        return 0

    favorite = catalog.by_id(stats.favorite_shower)
    print(f"  Observations:    {stats.total_observations}")
    print(f"  Meteors:         {stats.total_meteors}")
    print(f"  Hours observed:  {stats.total_hours:.1f}")
    print(f"  Average rating:  {stats.average_rating:.1f}")
    print(f"  Longest session: {stats.longest_session:.1f} h")
    print(f"  Favorite shower: "
          f"{favorite.name if favorite else stats.favorite_shower or '-'}")
    print(f"  Streak:          {stats.current_streak} "
          f"(longest {stats.longest_streak})")
    for month, count in stats.monthly_stats.items():
        print(f"    {month:<16} {count}")
    return 0


def cmd_list(args, service: ObservationService, catalog: ShowerCatalog):
    if args.shower:
        observations = service.get_observations_by_shower(args.shower)
    elif args.date_from or args.date_to:
        observations = service.get_observations_by_date_range(
            args.date_from or date.min, args.date_to or date.max
        )
    else:
        observations = service.get_observations()
    observations.sort(key=lambda o: o.date, reverse=True)

    if args.json:
        _print_json([o.to_dict() for o in observations])
        return 0
    for obs in observations:
        print(f"  {obs.date}  {obs.shower_name or obs.shower_id:<14} "
              f"{obs.meteors_count:>4} meteors  {obs.duration_hours:4.1f} h  "
              f"{'*' * obs.rating:<5}  {obs.id}")
    if not observations:
        print("  No observations yet.")
    return 0


def cmd_log(args, service: ObservationService, catalog: ShowerCatalog):
    shower = catalog.by_id(args.shower)
    observation = service.new_observation(
        args.shower,
        shower_name=shower.name if shower else args.shower,
        date=args.date,
        start_time=args.start,
        end_time=args.end,
        conditions=SkyConditions(
            sky_clarity=args.clarity,
            light_pollution=args.pollution,
            weather=args.weather,
        ),
        observations=MeteorCounts(
            meteors_count=args.meteors,
            fireballs=args.fireballs,
            colors_seen=args.colors or [],
        ),
        rating=args.rating,
        notes=args.notes,
    )
    saved = service.save_observation(observation)
    print(f"Saved {saved.id}")
    return 0


def cmd_delete(args, service: ObservationService, catalog: ShowerCatalog):
    service.delete_observation(args.id)
    print(f"Deleted {args.id}")
    return 0


# =============================================================================
# Catalog and forecasts
# =============================================================================

def cmd_showers(args, service: ObservationService, catalog: ShowerCatalog):
    if args.active:
        showers = catalog.active_on(args.active)
    elif args.upcoming is not None:
        showers = catalog.upcoming(date.today(), days=args.upcoming)
    elif args.search:
        showers = catalog.search(args.search)
    elif args.major:
        showers = catalog.major()
    else:
        showers = catalog.all()

    for shower in showers:
        print(f"  {shower.id:<12} {shower.name:<12} peak {shower.peak.day}  "
              f"ZHR {shower.zhr:>3}  {shower.hemisphere.value}")
    if not showers:
        print("  No matching showers.")
    return 0


def _resolve_location(args) -> UserLocation:
    if args.lat is not None and args.lon is not None:
        return UserLocation(latitude=args.lat, longitude=args.lon)
    location = Config().get_user_location()
    if location is None:
        raise SystemExit("No location given and none saved (use --lat/--lon).")
    return location


def cmd_conditions(args, service: ObservationService, catalog: ShowerCatalog):
    shower = catalog.by_id(args.shower)
    if shower is None:
        print(f"Unknown shower: {args.shower}", file=sys.stderr)
        return 1

    location = _resolve_location(args)
    EngagementTracker(service.db).record_shower_viewed(shower.id)
    when = args.date or shower.peak.day
    if not astronomy.is_visible(shower, location):
        print(f"{shower.name} is not visible from latitude {location.latitude}.")
        return 0

    conditions = astronomy.viewing_conditions(shower, location, when)
    if args.json:
        _print_json(conditions.to_dict())
        return 0
    start, end = conditions.optimal_viewing_hours
    print(f"  {shower.name} on {when}")
    print(f"  Visibility:      {conditions.visibility:.2f}")
    print(f"  Moon:            {astronomy.moon_phase_name(when)} "
          f"({conditions.moon_illumination}%)")
    print(f"  Light pollution: {conditions.light_pollution_impact}")
    print(f"  Best hours:      {start} - {end}")
    print(f"  {astronomy.viewing_recommendation(conditions, shower)}")
    return 0


def cmd_reminders(args, service: ObservationService, catalog: ShowerCatalog):
    settings = Config().get_notification_settings()
    reminders = plan_reminders(catalog, settings)
    if args.json:
        _print_json([r.to_dict() for r in reminders])
        return 0
    for r in reminders:
        print(f"  {r.fire_at:%Y-%m-%d %H:%M}  {r.kind:<17} {r.title}")
    if not reminders:
        print("  No reminders to schedule.")
    return 0


def cmd_favorite(args, service: ObservationService, catalog: ShowerCatalog):
    db = service.db
    if args.action == "add":
        if catalog.by_id(args.shower) is None:
            print(f"Unknown shower: {args.shower}", file=sys.stderr)
            return 1
        db.add_favorite(args.shower)
    elif args.action == "remove":
        db.remove_favorite(args.shower)

    for shower in catalog.by_ids(db.get_favorites()):
        print(f"  {shower.name:<12} peak {shower.peak.day}")
    return 0


def cmd_engagement(args, service: ObservationService, catalog: ShowerCatalog):
    engagement = EngagementTracker(service.db).get()
    if args.json:
        _print_json(engagement.to_dict())
        return 0
    print(f"  App opens:         {engagement.app_opens}")
    print(f"  Showers viewed:    {', '.join(engagement.showers_viewed) or '-'}")
    print(f"  Notification taps: {engagement.notification_interactions}")
    return 0


def cmd_location(args, service: ObservationService, catalog: ShowerCatalog):
    location = UserLocation(latitude=args.lat, longitude=args.lon,
                            timezone=args.tz, city=args.city)
    Config().set_user_location(location)
    print(f"Location saved: {location.latitude}, {location.longitude} ({location.timezone})")
    return 0


# =============================================================================
# Argument parsing
# =============================================================================

def _clock(text: str) -> time:
    return time.fromisoformat(text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Radiant meteor shower observation log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="SQLite database path (default: ~/.radiant/radiant.db)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("stats", help="Show observation statistics")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_stats)

    p = sub.add_parser("list", help="List logged observations")
    p.add_argument("--shower", type=str)
    p.add_argument("--from", dest="date_from", type=date.fromisoformat)
    p.add_argument("--to", dest="date_to", type=date.fromisoformat)
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("log", help="Log an observation session")
    p.add_argument("--shower", required=True)
    p.add_argument("--date", type=date.fromisoformat, default=date.today())
    p.add_argument("--start", type=_clock, required=True, help="HH:MM")
    p.add_argument("--end", type=_clock, required=True, help="HH:MM")
    p.add_argument("--meteors", type=int, default=0)
    p.add_argument("--fireballs", type=int, default=0)
    p.add_argument("--colors", nargs="*")
    p.add_argument("--rating", type=int, default=3)
    p.add_argument("--clarity", type=int, default=3, help="Sky clarity 1-5")
    p.add_argument("--pollution", type=int, default=3,
                   help="Light pollution 1 (heavy) - 5 (none)")
    p.add_argument("--weather", choices=WEATHER_TYPES, default="clear")
    p.add_argument("--notes", default="")
    p.set_defaults(func=cmd_log)

    p = sub.add_parser("delete", help="Delete an observation by id")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("showers", help="Query the shower catalog")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--active", type=date.fromisoformat, metavar="DATE")
    group.add_argument("--upcoming", type=int, metavar="DAYS")
    group.add_argument("--search", type=str)
    group.add_argument("--major", action="store_true")
    p.set_defaults(func=cmd_showers)

    p = sub.add_parser("conditions", help="Viewing conditions for a shower")
    p.add_argument("shower")
    p.add_argument("--lat", type=float)
    p.add_argument("--lon", type=float)
    p.add_argument("--date", type=date.fromisoformat)
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_conditions)

    p = sub.add_parser("reminders", help="Show the reminder plan")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_reminders)

    p = sub.add_parser("favorite", help="Manage favorite showers")
    p.add_argument("action", choices=["add", "remove", "list"])
    p.add_argument("shower", nargs="?")
    p.set_defaults(func=cmd_favorite)

    p = sub.add_parser("engagement", help="Show usage counters")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_engagement)

    p = sub.add_parser("location", help="Save your observing location")
    p.add_argument("--lat", type=float, required=True)
    p.add_argument("--lon", type=float, required=True)
    p.add_argument("--tz", default="UTC")
    p.add_argument("--city")
    p.set_defaults(func=cmd_location)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "favorite" and args.action != "list" and not args.shower:
        parser.error("favorite add/remove needs a shower id")

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    catalog = ShowerCatalog.default()

    try:
        db = Database(args.db)
    except StorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    service = ObservationService(db)
    EngagementTracker(db).record_app_open()
    try:
        return args.func(args, service, catalog)
    except InvalidObservationError as e:
        print(f"Invalid observation: {e}", file=sys.stderr)
        return 2
    except StorageError as e:
        print(f"Storage error: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
