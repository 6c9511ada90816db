"""Command line entry point for the clinic calendar."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Dict, List, Optional

if __package__ is None or __package__ == "":  # pragma: no cover - runtime safety for script execution
    sys.path.append(str(Path(__file__).resolve().parent.parent))

from connector import CalendarAPIClient, CalendarAPIError
from scheduling import TIME_SLOTS, AppointmentStore, end_time_options
from ui.views import day_agenda

LOG_LEVEL = os.getenv("CLINIC_CALENDAR_LOG_LEVEL", "INFO")
DEFAULT_HOST = os.getenv("CLINIC_CALENDAR_HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "5000"))

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from exc


def run_agenda(
    target: date,
    *,
    remote: bool = False,
    client: Optional[CalendarAPIClient] = None,
) -> Dict[str, object]:
    """Return the agenda for ``target`` from a local store or the running API."""

    if remote:
        client = client or CalendarAPIClient()
        return client.get_agenda(target)
    store = AppointmentStore.with_sample_data()
    return day_agenda(store, target).to_dict()


def run_slots(start_time: Optional[str] = None) -> List[str]:
    if start_time:
        return end_time_options(start_time)
    return list(TIME_SLOTS)


def run_server(host: str, port: int) -> None:
    from ui.dashboard import create_app

    app = create_app(AppointmentStore.with_sample_data())
    logger.info("Serving clinic calendar on %s:%s", host, port)
    app.run(host=host, port=port, debug=False)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Clinic calendar controller")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the calendar web application")
    serve.add_argument("--host", default=DEFAULT_HOST)
    serve.add_argument("--port", type=int, default=DEFAULT_PORT)

    agenda = subparsers.add_parser("agenda", help="Print the appointments for a day")
    agenda.add_argument("--date", type=_parse_date, default=None, help="Day to show (YYYY-MM-DD)")
    agenda.add_argument(
        "--remote",
        action="store_true",
        help="Query the running calendar API instead of a freshly seeded store",
    )

    slots = subparsers.add_parser("slots", help="List bookable time slots")
    slots.add_argument("--start", default=None, help="Only list end times after this start slot")

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "serve"
        args.host = DEFAULT_HOST
        args.port = DEFAULT_PORT
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging()

    if args.command == "agenda":
        try:
            result = run_agenda(args.date or date.today(), remote=args.remote)
        except CalendarAPIError as exc:
            logger.error("Unable to load agenda: %s", exc)
            return 1
        print(json.dumps(result, indent=2))
    elif args.command == "slots":
        print(json.dumps(run_slots(args.start), indent=2))
    else:
        run_server(args.host, args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
