#!/usr/bin/env python3
"""
Workout Streams CLI.

Reads a JSON activity export and prints workouts, joined workout details
and splits as JSON.

Usage:
    workout-streams --export export.json workouts --kind running --limit 5
    workout-streams --export export.json detail w1
    workout-streams --export export.json splits w1 --unit mi
    workout-streams --export export.json paces w1
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import ValidationError

from .config import get_settings
from .exceptions import WorkoutStreamsError
from .integrations.base import NO_LIMIT
from .integrations.export import load_export
from .metrics.splits import DISTANCE_TOLERANCE_M, SplitUnit
from .models import ActivityKind, parse_timestamp
from .observability import LoggingObserver, configure_logging
from .services.workout_service import WorkoutService

logger = logging.getLogger(__name__)


def parse_cli_timestamp(value: str) -> datetime:
    """Parse a date or timestamp argument; naive values are taken as UTC."""
    try:
        parsed = parse_timestamp(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


async def cmd_workouts(args, service: WorkoutService) -> None:
    """List workouts of one activity kind, newest first."""
    kind = ActivityKind(args.kind)
    if args.since or args.until:
        start = args.since or datetime.min.replace(tzinfo=timezone.utc)
        end = args.until or datetime.max.replace(tzinfo=timezone.utc)
        workouts = await service.get_workouts_between(kind, start, end)
        if args.limit != NO_LIMIT:
            workouts = workouts[:args.limit]
    else:
        workouts = await service.get_workouts(kind, limit=args.limit)
    print_json([w.to_dict() for w in workouts])


async def cmd_detail(args, service: WorkoutService) -> None:
    """Show a workout with its location track and heart rate."""
    workout = await service.get_workout(args.workout_id)
    detail = await service.get_workout_detail(workout)
    print_json(detail.to_dict())


async def cmd_splits(args, service: WorkoutService) -> None:
    """Show the splits of a workout."""
    workout = await service.get_workout(args.workout_id)
    distance: Optional[float] = args.distance
    if distance is None and args.unit:
        distance = SplitUnit(args.unit).meters
    splits = await service.get_splits(
        workout,
        split_distance_m=distance,
        use_recorded=not args.computed,
    )
    print_json([s.to_dict() for s in splits])


async def cmd_paces(args, service: WorkoutService) -> None:
    """Show the segment events recorded for a workout."""
    workout = await service.get_workout(args.workout_id)
    print_json([s.to_dict() for s in service.get_prerecorded_paces(workout)])


COMMANDS = {
    "workouts": cmd_workouts,
    "detail": cmd_detail,
    "splits": cmd_splits,
    "paces": cmd_paces,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="workout-streams",
        description="Workout Streams - workout details and splits from an activity export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  workout-streams --export export.json workouts --kind running --limit 5
  workout-streams --export export.json detail w1
  workout-streams --export export.json splits w1 --unit mi
  workout-streams --export export.json paces w1
        """,
    )
    parser.add_argument("--export", "-e", help="Path to a JSON activity export")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Workouts command
    workouts_p = subparsers.add_parser("workouts", help="List workouts, newest first")
    workouts_p.add_argument(
        "--kind",
        choices=[k.value for k in ActivityKind],
        default=ActivityKind.RUNNING.value,
        help="Activity kind",
    )
    workouts_p.add_argument(
        "--limit", "-n", type=int, default=NO_LIMIT, help="Maximum number of workouts (0 = all)"
    )
    workouts_p.add_argument("--since", type=parse_cli_timestamp, help="Only workouts ending after this date")
    workouts_p.add_argument("--until", type=parse_cli_timestamp, help="Only workouts starting before this date")

    # Detail command
    detail_p = subparsers.add_parser("detail", help="Show a workout with locations and heart rate")
    detail_p.add_argument("workout_id", help="Workout id")

    # Splits command
    splits_p = subparsers.add_parser("splits", help="Show splits of a workout")
    splits_p.add_argument("workout_id", help="Workout id")
    size = splits_p.add_mutually_exclusive_group()
    size.add_argument("--distance", type=float, help="Split distance in meters")
    size.add_argument("--unit", choices=[u.value for u in SplitUnit], help="Split per kilometer or mile")
    splits_p.add_argument(
        "--computed",
        action="store_true",
        help="Compute splits from distance samples even if segments were recorded",
    )

    # Paces command
    paces_p = subparsers.add_parser("paces", help="Show recorded segment events of a workout")
    paces_p.add_argument("workout_id", help="Workout id")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command not in COMMANDS:
        parser.print_help()
        return 1

    settings = get_settings()
    try:
        configure_logging(args.log_level or settings.log_level)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "splits" and args.distance is not None and args.distance <= DISTANCE_TOLERANCE_M:
        print(f"Error: --distance must be greater than {DISTANCE_TOLERANCE_M} m", file=sys.stderr)
        return 1

    export_path = args.export or settings.export_path
    if not export_path:
        print("Error: no export given (use --export or WORKOUT_STREAMS_EXPORT_PATH)", file=sys.stderr)
        return 1

    try:
        store = load_export(
            export_path,
            batch_size=settings.batch_size,
            delivery_delay_s=settings.delivery_delay_s,
        )
    except OSError as e:
        print(f"Error: cannot read export {export_path}: {e}", file=sys.stderr)
        return 1
    except ValidationError as e:
        print(f"Error: invalid export {export_path}:\n{e}", file=sys.stderr)
        return 1

    service = WorkoutService(store, settings=settings, observer=LoggingObserver())
    try:
        asyncio.run(COMMANDS[args.command](args, service))
    except WorkoutStreamsError as e:
        logger.debug("Command %s failed: %r", args.command, e)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
