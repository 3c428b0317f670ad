"""
Booking pipeline: validates, verifies, schedules the reminder and stores.

One call to ``submit`` handles one form submission from start to a
terminal state. The two provider calls are awaited in sequence; any stage
can short-circuit. An appointment is only built and stored after the
provider accepted the reminder, so a rejected or failed submission never
leaves anything behind.
"""

from datetime import timedelta
from typing import Optional

from beautybird.config import AppConfig
from beautybird.logging_context import get_booking_logger, new_booking_id, set_booking_id
from beautybird.pipeline.state_machine import BookingStateMachine, BookingTrigger
from beautybird.pipeline.validator import BookingValidator
from beautybird.providers.messagebird import MessagingProvider
from beautybird.schemas.booking_schema import (
    Appointment,
    BookingOutcome,
    BookingRequest,
    Confirmed,
    Failed,
    RejectionReason,
    Rejected,
)
from beautybird.tools.appointment_store import AppointmentStore
from beautybird.tools.clock import (
    DEFAULT_FORM_OFFSET,
    Clock,
    default_form_values,
    resolve_timezone,
)
from beautybird.tools.phone_verifier import PhoneVerifier
from beautybird.tools.reminder import ReminderScheduler

logger = get_booking_logger(__name__)

# Lookup outcomes that are decided before the line type is known.
_LOOKUP_REJECTIONS = frozenset(
    {RejectionReason.INVALID_PHONE_FORMAT, RejectionReason.LOOKUP_FAILED}
)


class BookingPipeline:
    """Orchestrates a booking submission through every stage."""

    def __init__(
        self,
        validator: BookingValidator,
        verifier: PhoneVerifier,
        scheduler: ReminderScheduler,
        store: AppointmentStore,
        country_code: Optional[str],
        clock: Optional[Clock] = None,
        form_offset: timedelta = DEFAULT_FORM_OFFSET,
    ) -> None:
        self._validator = validator
        self._verifier = verifier
        self._scheduler = scheduler
        self._store = store
        self._country_code = country_code or None
        self._clock = clock or Clock()
        self._form_offset = form_offset

    def form_defaults(self) -> dict[str, str]:
        """Pre-filled date and time for an empty booking form."""
        return default_form_values(self._clock.now(), self._form_offset, self._clock.tz)

    async def submit(self, request: BookingRequest) -> BookingOutcome:
        set_booking_id(new_booking_id())
        sm = BookingStateMachine()

        booking, reason = self._validator.validate(request, self._clock.now())
        if reason is not None:
            sm.transition(BookingTrigger.FIELDS_INVALID)
            return self._reject(request, reason)
        sm.transition(BookingTrigger.FIELDS_VALID)

        contact, reason = await self._verifier.verify(booking.number, self._country_code)
        if reason in _LOOKUP_REJECTIONS:
            sm.transition(BookingTrigger.LOOKUP_REJECTED)
            return self._reject(request, reason)
        sm.transition(BookingTrigger.LOOKUP_SUCCEEDED)
        if reason is not None:
            sm.transition(BookingTrigger.NOT_MOBILE)
            return self._reject(request, reason)

        sm.transition(BookingTrigger.REMINDER_SUBMITTED)
        reminder, reason = await self._scheduler.schedule_reminder(
            contact, booking.appointment_at, booking.name, booking.treatment
        )
        if reason is not None:
            sm.transition(BookingTrigger.REMINDER_FAILED)
            logger.error("Booking failed after validation: %s", reason.value)
            return Failed()

        appointment = Appointment(
            name=booking.name,
            treatment=booking.treatment,
            number=booking.number,
            appointment_at=booking.appointment_at,
            reminder_at=reminder.reminder_at,
        )
        self._store.append(appointment)
        sm.transition(BookingTrigger.REMINDER_ACCEPTED)
        logger.info(
            "Booking confirmed: %s on %s (trace: %s)",
            booking.treatment, booking.appointment_at.isoformat(),
            " -> ".join(sm.get_state_trace()),
        )
        return Confirmed(appointment=appointment)

    def _reject(self, request: BookingRequest, reason: RejectionReason) -> Rejected:
        logger.info("Booking rejected: %s", reason.value)
        return Rejected(reason=reason, echoed=request)


def build_pipeline(
    config: AppConfig,
    provider: MessagingProvider,
    store: Optional[AppointmentStore] = None,
    clock: Optional[Clock] = None,
) -> BookingPipeline:
    """Wire a pipeline from configuration around an open provider."""
    tz = resolve_timezone(config.booking.timezone)
    lead = timedelta(minutes=config.booking.reminder_lead_minutes)
    slack = timedelta(minutes=config.booking.slack_minutes)

    return BookingPipeline(
        validator=BookingValidator(tz=tz, lead=lead, slack=slack),
        verifier=PhoneVerifier(provider),
        scheduler=ReminderScheduler(
            provider, config.messaging.originator, lead=lead, tz=tz
        ),
        store=store if store is not None else AppointmentStore(),
        country_code=config.messaging.country_code,
        clock=clock or Clock(tz),
        form_offset=timedelta(minutes=config.booking.default_form_offset_minutes),
    )
