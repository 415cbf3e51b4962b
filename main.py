#!/usr/bin/env python3
"""
Chronicle - track the in-world date and place of a Valdris story.

Loads a saved state (or starts fresh), applies narrative text and manual
commands to it, prints the result and saves it back.
"""

import argparse
import logging
import sys
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

from chronicle import TemporalManager, WorldStateAPI, load_config
from chronicle.logging_config import setup_logging
from chronicle.observer import ObserverError


def main():
    parser = argparse.ArgumentParser(
        description="Chronicle - world state tracker for Valdris narratives"
    )
    parser.add_argument(
        "--state",
        type=Path,
        default=Path("chronicle_state.json"),
        help="Path to the saved state document (default: ./chronicle_state.json)",
    )
    parser.add_argument(
        "--start-date",
        metavar="DATE",
        help='Starting date for a new state, e.g. "1st of Vexrise, 2847 AV"',
    )
    parser.add_argument(
        "--narrative",
        type=Path,
        metavar="FILE",
        help="Process narrative text from FILE ('-' reads stdin)",
    )
    parser.add_argument(
        "--skip",
        nargs=2,
        metavar=("AMOUNT", "UNIT"),
        help="Advance time, e.g. --skip 3 days",
    )
    parser.add_argument(
        "--undo",
        action="store_true",
        help="Undo the most recent change",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Just show the current state and exit",
    )
    parser.add_argument(
        "--logs",
        type=Path,
        default=Path("logs"),
        help="Directory for the log file (default: ./logs)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    # Always log DEBUG to file, console level depends on --debug
    console_level = logging.DEBUG if args.debug else logging.WARNING
    setup_logging(args.logs, console_level=console_level)

    config = load_config(starting_date=args.start_date, debug=args.debug or None)
    manager = TemporalManager(config)

    if args.state.exists():
        if not manager.import_state(args.state.read_text(encoding="utf-8")):
            print(f"Could not load {args.state}; not overwriting it.", file=sys.stderr)
            return 1
    else:
        manager.initialize()
        print(f"New state starting {manager.get_formatted_date()}")

    api = WorldStateAPI(manager)

    if args.status:
        print_status(api)
        return 0

    try:
        if args.undo:
            api.do_undo()
            print("Undid last change.")

        if args.skip:
            amount, unit = args.skip
            changes = api.do_advance_time(int(amount), unit)
            print(f"Advanced {amount} {unit} (+{changes.days_delta} days)")
    except (ObserverError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.narrative:
        text = sys.stdin.read() if str(args.narrative) == "-" else args.narrative.read_text(encoding="utf-8")
        changes = manager.process_narrative(text)
        if changes.updates:
            print(f"Applied: {', '.join(changes.updates)}")
        else:
            print("No time or location cues found.")

    args.state.write_text(manager.export_state(), encoding="utf-8")
    print_status(api)
    return 0


def print_status(api: WorldStateAPI) -> None:
    print("\nChronicle Status")
    print("================")
    for line in api.get_time_summary().lines():
        print(line)
    location = api.get_location_summary()
    print(f"Location: {location.name} (weather: {location.weather})")
    for error in api.get_validation_errors():
        print(f"  ! {error}")


if __name__ == "__main__":
    sys.exit(main())
