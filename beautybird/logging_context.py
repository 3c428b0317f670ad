"""Correlation ID logging context for tracing booking submissions.

Provides a booking_id-aware logger that attaches a correlation ID to every
log message, so one submission can be followed through validation, phone
lookup and reminder scheduling even when several run concurrently.

Usage:
    from beautybird.logging_context import get_booking_logger, set_booking_id

    set_booking_id("BK-3F9A1C")
    logger = get_booking_logger(__name__)
    logger.info("Validating request")  # record.booking_id == "BK-3F9A1C"
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Optional

_booking_id: ContextVar[str] = ContextVar("booking_id", default="NO_BOOKING_ID")


def new_booking_id() -> str:
    """Generate a short correlation ID for a submission."""
    return f"BK-{uuid.uuid4().hex[:6].upper()}"


def set_booking_id(booking_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _booking_id.set(booking_id)


def get_booking_id() -> str:
    """Retrieve the current correlation ID."""
    return _booking_id.get()


def mask_phone(number: Optional[str]) -> str:
    """Mask a phone number for logs, keeping only the last three digits."""
    if not number:
        return ""
    visible = 3
    if len(number) <= visible:
        return "*" * len(number)
    return f"{'*' * (len(number) - visible)}{number[-visible:]}"


class BookingIdFilter(logging.Filter):
    """Injects booking_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.booking_id = _booking_id.get()  # type: ignore[attr-defined]
        return True


def get_booking_logger(name: str) -> logging.Logger:
    """Return a logger with the BookingIdFilter attached.

    The filter adds ``booking_id`` to each record so formatters can
    include ``%(booking_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, BookingIdFilter) for f in logger.filters):
        logger.addFilter(BookingIdFilter())
    return logger
