"""
Booking service entry point.

Runs a single booking submission against the live MessageBird API, or
prints the date/time an empty booking form would be pre-filled with.

Usage:
    Book:     python main.py book --name Jane --treatment Haircut --number +31612345678 --date 2024-05-01 --time 14:10
    Defaults: python main.py defaults
"""

import argparse
import asyncio
import json
import sys
from datetime import timedelta

from beautybird.config import settings
from beautybird.pipeline import build_pipeline
from beautybird.providers.messagebird import MessageBirdClient
from beautybird.schemas.booking_schema import BookingRequest, Failed
from beautybird.tools.clock import Clock, default_form_values, resolve_timezone


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Book a treatment and schedule its SMS reminder."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    book = subparsers.add_parser("book", help="Submit one booking.")
    for field_name in ("name", "treatment", "number", "date", "time"):
        book.add_argument(f"--{field_name}", default=None)

    subparsers.add_parser("defaults", help="Print the pre-filled form date and time.")
    return parser


async def _book(args: argparse.Namespace) -> int:
    request = BookingRequest(
        name=args.name,
        treatment=args.treatment,
        number=args.number,
        date=args.date,
        time=args.time,
    )
    async with MessageBirdClient.from_config(settings.messaging) as client:
        pipeline = build_pipeline(settings, provider=client)
        outcome = await pipeline.submit(request)

    if isinstance(outcome, Failed):
        sys.stdout.write(outcome.view() + "\n")
        return 1
    sys.stdout.write(json.dumps(outcome.view().model_dump(), indent=2) + "\n")
    return 0 if outcome.status == "confirmed" else 2


def main() -> None:
    args = _build_parser().parse_args()

    if args.command == "defaults":
        clock = Clock(resolve_timezone(settings.booking.timezone))
        values = default_form_values(
            clock.now(),
            timedelta(minutes=settings.booking.default_form_offset_minutes),
            clock.tz,
        )
        sys.stdout.write(json.dumps(values) + "\n")
        return

    sys.exit(asyncio.run(_book(args)))


if __name__ == "__main__":
    main()
