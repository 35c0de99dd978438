# ==============================================
# CLI: Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Drive the tracker from a terminal, one command per run.
#   Records persist in the storage directory between runs.
#
# COMMANDS:
# ---------
# 1. Add entries:
#    python -m smartzprod.cli add-productivity --name "Budi Santoso" --nrp 12345 \
#        --excavator EX01 --trips 10 --meter-start 100 --meter-end 105 --bucket 6.5
#    python -m smartzprod.cli add-match-factor --name "Budi Santoso" --nrp 12345 \
#        --excavator EX01 --haulers 5 --loader-ct 3 --hauler-ct 15
#
# 2. Edit an entry (same options, plus --id):
#    python -m smartzprod.cli edit-productivity --id <id> ...
#
# 3. List / summarize:
#    python -m smartzprod.cli list --kind productivity --excavator EX01
#    python -m smartzprod.cli stats [--excavator EX01]
#    python -m smartzprod.cli status
#
# 4. Delete one entry:
#    python -m smartzprod.cli delete --kind matchFactor --id <id>
#
# 5. Backup / restore:
#    python -m smartzprod.cli backup --dir backups/
#    python -m smartzprod.cli restore backups/SmartzProd-Backup-....json
#
# 6. Reset everything:
#    python -m smartzprod.cli reset --confirm
#
# Exit code 0 on success, 1 on a reported failure, 2 on bad arguments.
#
# ==============================================

import argparse
import sys
from datetime import date
from typing import List, Optional

from smartzprod.config import load_config
from smartzprod.errors import SmartzProdError
from smartzprod.persistence.record_store import CollectionKind
from smartzprod.tracker import EquipmentTracker, SubmitResult


def _day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def _add_general_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--name", dest="supervisor_name", required=True, help="Supervisor name")
    parser.add_argument("--nrp", dest="supervisor_id", required=True, help="Supervisor NRP")
    parser.add_argument("--excavator", dest="excavator_id", required=True, help="Excavator number")
    parser.add_argument("--timestamp", help="YYYY-MM-DDTHH:MM (default: now)")


def _add_productivity_arguments(parser: argparse.ArgumentParser) -> None:
    _add_general_arguments(parser)
    parser.add_argument("--trips", dest="trip_count", required=True, help="Number of trips")
    parser.add_argument("--meter-start", dest="meter_start", required=True, help="Hour meter at start")
    parser.add_argument("--meter-end", dest="meter_end", required=True, help="Hour meter at end")
    parser.add_argument("--bucket", dest="bucket_capacity", required=True, help="Bucket capacity (BCM)")


def _add_match_factor_arguments(parser: argparse.ArgumentParser) -> None:
    _add_general_arguments(parser)
    parser.add_argument("--haulers", dest="hauler_count", required=True, help="Number of haulers")
    parser.add_argument("--loader-ct", dest="loader_cycle_time", required=True,
                        help="Loader cycle time (minutes)")
    parser.add_argument("--hauler-ct", dest="hauler_cycle_time", required=True,
                        help="Hauler cycle time (minutes)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartzprod",
        description="Excavator productivity and match factor tracking",
    )
    parser.add_argument("--data-dir", help="Storage directory (default: SMARTZPROD_DATA_DIR or data/)")
    parser.add_argument("--env-file", help="Path to a .env file")
    commands = parser.add_subparsers(dest="command", required=True)

    _add_productivity_arguments(commands.add_parser("add-productivity", help="Add a productivity entry"))
    _add_match_factor_arguments(commands.add_parser("add-match-factor", help="Add a match factor entry"))

    edit = commands.add_parser("edit-productivity", help="Replace a productivity entry")
    edit.add_argument("--id", dest="record_id", required=True)
    _add_productivity_arguments(edit)

    edit = commands.add_parser("edit-match-factor", help="Replace a match factor entry")
    edit.add_argument("--id", dest="record_id", required=True)
    _add_match_factor_arguments(edit)

    kinds = [kind.value for kind in CollectionKind]

    listing = commands.add_parser("list", help="List entries")
    listing.add_argument("--kind", choices=kinds, default=CollectionKind.PRODUCTIVITY.value)
    listing.add_argument("--excavator")
    listing.add_argument("--from", dest="date_from", type=_day, help="First day (YYYY-MM-DD)")
    listing.add_argument("--to", dest="date_to", type=_day, help="Last day (YYYY-MM-DD)")

    stats = commands.add_parser("stats", help="Show statistics")
    stats.add_argument("--excavator")

    commands.add_parser("status", help="Show storage status")

    delete = commands.add_parser("delete", help="Delete one entry")
    delete.add_argument("--kind", choices=kinds, required=True)
    delete.add_argument("--id", dest="record_id", required=True)

    backup = commands.add_parser("backup", help="Write a backup file")
    backup.add_argument("--dir", dest="directory", default=".")

    restore = commands.add_parser("restore", help="Replace all data with a backup file")
    restore.add_argument("path")

    reset = commands.add_parser("reset", help="Delete all data")
    reset.add_argument("--confirm", action="store_true")

    return parser


_INPUT_FIELDS = (
    "supervisor_name", "supervisor_id", "excavator_id", "timestamp",
    "trip_count", "meter_start", "meter_end", "bucket_capacity",
    "hauler_count", "loader_cycle_time", "hauler_cycle_time",
)


def _inputs(args: argparse.Namespace) -> dict:
    return {name: getattr(args, name) for name in _INPUT_FIELDS if getattr(args, name, None) is not None}


def _report(result: SubmitResult) -> int:
    if not result.success:
        for error in result.errors:
            print(f"✗ {error}")
        return 1
    record = result.record
    print(f"id: {record.record_id}")
    for key, value in record.to_dict().items():
        if key != "id":
            print(f"  {key}: {value}")
    return 0


def _print_stats(tracker: EquipmentTracker, excavator_id: Optional[str]) -> None:
    prod = tracker.productivity_stats(excavator_id)
    mf = tracker.match_factor_stats(excavator_id)
    scope = f"Excavator {excavator_id}" if excavator_id else "All excavators"

    print("=" * 60)
    print(scope)
    print("=" * 60)
    print(f"Productivity records: {prod.count}")
    print(f"  avg {prod.avg} BCM/h, max {prod.max}, min {prod.min}")
    print(f"  total trips {prod.total_trips}, avg trips {prod.avg_trips}")
    print(f"Match factor records: {mf.count}")
    print(f"  avg {mf.avg}, max {mf.max}, min {mf.min}")
    status = mf.status.value if mf.status else "N/A"
    print(f"  status: {status}")
    if mf.count:
        interpretation = tracker.interpret(mf.avg)
        print(f"  {interpretation.message}")
        print(f"  → {interpretation.recommendation}")

    if not excavator_id:
        for summary in tracker.all_excavator_summaries():
            print(f"- {summary.excavator_id}: {summary.total_records} records, "
                  f"productivity avg {summary.productivity.avg}, "
                  f"match factor avg {summary.match_factor.avg}")


def run(args: argparse.Namespace, tracker: EquipmentTracker) -> int:
    command = args.command

    if command == "add-productivity":
        return _report(tracker.add_productivity(_inputs(args)))
    if command == "add-match-factor":
        return _report(tracker.add_match_factor(_inputs(args)))
    if command == "edit-productivity":
        return _report(tracker.edit_productivity(args.record_id, _inputs(args)))
    if command == "edit-match-factor":
        return _report(tracker.edit_match_factor(args.record_id, _inputs(args)))

    if command == "list":
        records = tracker.records(args.kind, args.excavator, args.date_from, args.date_to)
        for index, record in enumerate(records, start=1):
            if args.kind == CollectionKind.PRODUCTIVITY.value:
                value = f"{record.productivity} BCM/h"
            else:
                value = f"MF {record.match_factor}"
            print(f"{index:>3}. {record.timestamp}  {record.excavator_id:<10} {value:<16} "
                  f"{record.supervisor_name}  [{record.record_id}]")
        print(f"{len(records)} records")
        return 0

    if command == "stats":
        _print_stats(tracker, args.excavator)
        return 0

    if command == "status":
        for key, value in tracker.get_status().items():
            print(f"{key}: {value}")
        return 0

    if command == "delete":
        return 0 if tracker.delete(args.kind, args.record_id) else 1

    if command == "backup":
        tracker.backup(args.directory)
        return 0

    if command == "restore":
        return 0 if tracker.restore(args.path).success else 1

    if command == "reset":
        if not args.confirm:
            print("⚠ This deletes all data. Re-run with --confirm")
            return 1
        return 0 if tracker.reset() else 1

    print(f"Unknown command: {command}")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.env_file)
        with EquipmentTracker(config, storage_dir=args.data_dir) as tracker:
            return run(args, tracker)
    except SmartzProdError as e:
        print(f"✗ {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
