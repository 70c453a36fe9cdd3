"""
Santaspin CLI - Command-line interface for the service.

Usage:
    santaspin serve [--host H] [--port P]   Run the REST API
    santaspin seed <participants_file>      Load participants (JSON or CSV)
    santaspin list                          Print committed pairs
    santaspin reset [--yes]                 Clear all pairs

Stores are chosen from the environment (SANTASPIN_DB_PATH); without a
database path, list/reset/seed only affect a throwaway in-memory ledger.
"""

import argparse
import csv
import json
import logging
import sys
from pathlib import Path

from .config import AppConfig, configure_logging
from .errors import AllocationError, DuplicateParticipant

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Santaspin - Gift exchange assignment engine",
        prog="santaspin",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    serve_parser = subparsers.add_parser("serve", help="Run the REST API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=3001, help="Port")

    seed_parser = subparsers.add_parser("seed", help="Load participants from a file")
    seed_parser.add_argument("participants_file", help="JSON list or CSV with code,name columns")

    subparsers.add_parser("list", help="Print committed pairs")

    reset_parser = subparsers.add_parser("reset", help="Clear all pairs")
    reset_parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    args = parser.parse_args(argv)

    try:
        config = AppConfig.from_env()
    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(2)
    configure_logging(config)

    if args.command == "serve":
        cmd_serve(args, config)
    elif args.command == "seed":
        cmd_seed(args, config)
    elif args.command == "list":
        cmd_list(args, config)
    elif args.command == "reset":
        cmd_reset(args, config)
    else:
        parser.print_help()
        sys.exit(1)


def _service(config: AppConfig):
    from .api.service import AssignmentService

    if not config.db_path:
        logger.warning("SANTASPIN_DB_PATH is not set, changes will not be kept")
    return AssignmentService.from_config(config)


def load_participants(path: Path) -> list[tuple[str, str]]:
    """
    Read (code, name) pairs from a JSON or CSV file.

    JSON: [{"code": "X1", "name": "Alice"}, ...]
    CSV:  header row with code,name columns

    Non-string values (e.g. numeric codes) are read as their text.
    Raises ValueError if a JSON file is not a list of objects.
    """
    if path.suffix.lower() == ".json":
        with open(path, "r", encoding="utf-8") as f:
            records = json.load(f)
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise ValueError("expected a JSON list of {\"code\": ..., \"name\": ...} objects")
    else:
        with open(path, "r", encoding="utf-8", newline="") as f:
            records = list(csv.DictReader(f))

    return [(_text(record.get("code")), _text(record.get("name"))) for record in records]


def _text(value) -> str:
    return "" if value is None else str(value)


def cmd_serve(args, config: AppConfig):
    """Run the REST API with uvicorn."""
    import uvicorn
    from .api.app import create_app

    app = create_app(service=_service(config), config=config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=config.log_level.lower())


def cmd_seed(args, config: AppConfig):
    """Load participants, skipping codes that already exist."""
    path = Path(args.participants_file)
    try:
        pairs = load_participants(path)
    except FileNotFoundError:
        print(f"Error: File not found: {path}")
        sys.exit(1)
    except (ValueError, csv.Error) as e:
        print(f"Error: Cannot parse {path}: {e}")
        sys.exit(1)

    service = _service(config)
    added, skipped, invalid = 0, 0, []
    for code, name in pairs:
        try:
            service.add_participant(code, name)
            added += 1
        except DuplicateParticipant:
            skipped += 1
        except AllocationError as e:
            invalid.append(f"{code!r}: {e.message}")

    print(f"Added: {added}")
    print(f"Skipped (already registered): {skipped}")
    if invalid:
        print("\nInvalid rows:")
        for row in invalid:
            print(f"  - {row}")
        sys.exit(1)


def cmd_list(args, config: AppConfig):
    """Print every committed pair."""
    pairs = _service(config).list_assignments()
    if not pairs:
        print("No assignments yet")
        return
    for giver, receiver in sorted(pairs.items()):
        print(f"{giver} -> {receiver.receiver_code} ({receiver.receiver_name})")
    print(f"\nTotal: {len(pairs)}")


def cmd_reset(args, config: AppConfig):
    """Clear the ledger."""
    if not args.yes:
        answer = input("Delete ALL assignments? This cannot be undone [y/N] ")
        if answer.strip().lower() != "y":
            print("Aborted")
            return
    removed = _service(config).reset_assignments()
    print(f"Removed {removed} assignment(s)")


if __name__ == "__main__":
    main()
