"""
Reminder scheduling through the provider's scheduled-message API.

The reminder goes out exactly ``lead`` before the appointment, addressed
to the normalized number from the lookup and signed with a fixed sender.
"""

from datetime import datetime, timedelta, tzinfo
from typing import Optional

from beautybird.logging_context import get_booking_logger, mask_phone
from beautybird.providers.messagebird import MessagingProvider, ProviderError
from beautybird.schemas.booking_schema import RejectionReason, ReminderRecord, VerifiedContact
from beautybird.tools.clock import REMINDER_LEAD, format_clock, format_iso, reminder_time

logger = get_booking_logger(__name__)


def build_reminder_body(name: str, treatment: str, appointment_at: datetime) -> str:
    """Reminder text with the appointment's clock time (no date)."""
    return (
        f"{name}, here's a reminder that you have a {treatment} "
        f"scheduled for {format_clock(appointment_at)}. See you soon!"
    )


class ReminderScheduler:
    """Submits one scheduled SMS per confirmed booking."""

    def __init__(
        self,
        provider: MessagingProvider,
        originator: str,
        lead: timedelta = REMINDER_LEAD,
        tz: Optional[tzinfo] = None,
    ) -> None:
        self._provider = provider
        self._originator = originator
        self._lead = lead
        self._tz = tz

    async def schedule_reminder(
        self,
        contact: VerifiedContact,
        appointment_at: datetime,
        name: str,
        treatment: str,
    ) -> tuple[Optional[ReminderRecord], Optional[RejectionReason]]:
        reminder_at = reminder_time(appointment_at, self._lead, self._tz)
        body = build_reminder_body(name, treatment, appointment_at)
        recipient = contact.normalized_phone_number

        try:
            message_id = await self._provider.create_scheduled_message(
                originator=self._originator,
                recipients=[recipient],
                scheduled_datetime=format_iso(reminder_at),
                body=body,
            )
        except ProviderError as e:
            logger.error("Reminder dispatch to %s failed: %s", mask_phone(recipient), e)
            return None, RejectionReason.REMINDER_DISPATCH_FAILED

        logger.info(
            "Reminder %s scheduled for %s at %s",
            message_id, mask_phone(recipient), format_iso(reminder_at),
        )
        return ReminderRecord(
            reminder_at=reminder_at,
            recipient=recipient,
            body=body,
            message_id=message_id,
        ), None
