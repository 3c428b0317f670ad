"""Booking submission, verified contact, appointment and outcome models."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"

FATAL_MESSAGE = "Error occured while sending message!"


class RejectionReason(str, Enum):
    """Why a submission did not produce an appointment."""
    MISSING_FIELDS = "missing_fields"
    TOO_SOON = "too_soon"
    INVALID_PHONE_FORMAT = "invalid_phone_format"
    NOT_MOBILE = "not_mobile"
    LOOKUP_FAILED = "lookup_failed"
    REMINDER_DISPATCH_FAILED = "reminder_dispatch_failed"

    @property
    def message(self) -> str:
        """Human-readable text shown above the repopulated form."""
        return _REASON_MESSAGES[self]

    @property
    def is_fatal(self) -> bool:
        return self is RejectionReason.REMINDER_DISPATCH_FAILED


_REASON_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.MISSING_FIELDS: "Please fill all required fields!",
    RejectionReason.TOO_SOON: (
        "You can only book appointments that are at least 3 hours in the future!"
    ),
    RejectionReason.INVALID_PHONE_FORMAT: "You need to enter a valid phone number!",
    RejectionReason.NOT_MOBILE: (
        "You have entered a valid phone number, but it's not a mobile number! "
        "Provide a mobile number so we can contact you via SMS."
    ),
    RejectionReason.LOOKUP_FAILED: "Something went wrong while checking your phone number!",
    RejectionReason.REMINDER_DISPATCH_FAILED: FATAL_MESSAGE,
}


class BookingRequest(BaseModel):
    """Raw form submission. Every field may be absent until validated."""
    name: Optional[str] = None
    treatment: Optional[str] = None
    number: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None

    def echoed_fields(self) -> dict[str, Optional[str]]:
        """Field values exactly as submitted, for form repopulation."""
        return self.model_dump()


class ValidatedBooking(BaseModel):
    """Well-formed request with its parsed appointment timestamp."""
    model_config = ConfigDict(frozen=True)

    name: str
    treatment: str
    number: str
    date: str
    time: str
    appointment_at: datetime


class LineType(str, Enum):
    """Provider line classification, collapsed to what the pipeline needs."""
    MOBILE = "mobile"
    OTHER = "other"

    @classmethod
    def from_provider(cls, value: Optional[str]) -> "LineType":
        return cls.MOBILE if value == "mobile" else cls.OTHER


class VerifiedContact(BaseModel):
    """Result of a successful lookup for a mobile line."""
    model_config = ConfigDict(frozen=True)

    normalized_phone_number: str
    line_type: LineType


class ReminderRecord(BaseModel):
    """A scheduled reminder the provider accepted."""
    model_config = ConfigDict(frozen=True)

    reminder_at: datetime
    recipient: str
    body: str
    message_id: Optional[str] = None


class ConfirmationView(BaseModel):
    """View-data for the confirmation page."""
    name: str
    treatment: str
    number: str
    appointment_datetime: str
    reminder_datetime: str


class ErrorView(BaseModel):
    """View-data for redisplaying the form with an error."""
    error: str
    name: Optional[str] = None
    treatment: Optional[str] = None
    number: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None


class Appointment(BaseModel):
    """Confirmed booking. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    name: str
    treatment: str
    number: str
    appointment_at: datetime
    reminder_at: datetime

    def to_view(self) -> ConfirmationView:
        return ConfirmationView(
            name=self.name,
            treatment=self.treatment,
            number=self.number,
            appointment_datetime=self.appointment_at.strftime(DISPLAY_FORMAT),
            reminder_datetime=self.reminder_at.strftime(DISPLAY_FORMAT),
        )


class Confirmed(BaseModel):
    status: Literal["confirmed"] = "confirmed"
    appointment: Appointment

    def view(self) -> ConfirmationView:
        return self.appointment.to_view()


class Rejected(BaseModel):
    status: Literal["rejected"] = "rejected"
    reason: RejectionReason
    echoed: BookingRequest

    def view(self) -> ErrorView:
        return ErrorView(error=self.reason.message, **self.echoed.echoed_fields())


class Failed(BaseModel):
    status: Literal["failed"] = "failed"
    message: str = FATAL_MESSAGE

    def view(self) -> str:
        return self.message


BookingOutcome = Annotated[
    Union[Confirmed, Rejected, Failed], Field(discriminator="status")
]
