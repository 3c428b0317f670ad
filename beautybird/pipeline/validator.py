"""
Booking request validation.

Checks that every form field is present and that the appointment is far
enough ahead for its reminder to go out in the future. Unparsable
date/time input is reported the same way as missing input.
"""

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Optional

from beautybird.schemas.booking_schema import BookingRequest, RejectionReason, ValidatedBooking
from beautybird.tools.clock import BOOKING_SLACK, REMINDER_LEAD, earliest_bookable, parse_local

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("name", "treatment", "number", "date", "time")


class BookingValidator:
    """Pure validation of a submission against a given "now"."""

    def __init__(
        self,
        tz: Optional[tzinfo] = None,
        lead: timedelta = REMINDER_LEAD,
        slack: timedelta = BOOKING_SLACK,
    ) -> None:
        self._tz = tz
        self._lead = lead
        self._slack = slack

    def missing_fields(self, request: BookingRequest) -> list[str]:
        return [
            field_name
            for field_name in REQUIRED_FIELDS
            if not getattr(request, field_name)
        ]

    def validate(
        self, request: BookingRequest, now: datetime
    ) -> tuple[Optional[ValidatedBooking], Optional[RejectionReason]]:
        """Return ``(booking, None)`` when valid, else ``(None, reason)``."""
        missing = self.missing_fields(request)
        if missing:
            logger.info("Missing required fields: %s", ", ".join(missing))
            return None, RejectionReason.MISSING_FIELDS

        appointment_at = parse_local(request.date, request.time, self._tz)
        if appointment_at is None:
            logger.info("Unparsable date/time: %r %r", request.date, request.time)
            return None, RejectionReason.MISSING_FIELDS

        earliest = earliest_bookable(now, self._lead, self._slack, self._tz)
        if appointment_at.astimezone(timezone.utc) < earliest.astimezone(timezone.utc):
            logger.info(
                "Appointment %s is before earliest bookable %s",
                appointment_at.isoformat(), earliest.isoformat(),
            )
            return None, RejectionReason.TOO_SOON

        return ValidatedBooking(
            name=request.name,
            treatment=request.treatment,
            number=request.number,
            date=request.date,
            time=request.time,
            appointment_at=appointment_at,
        ), None
