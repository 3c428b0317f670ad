"""Shared test fixtures and helpers."""

import asyncio
from datetime import datetime, timezone, tzinfo
from typing import Optional

import pytest

from beautybird.pipeline.booking_pipeline import BookingPipeline
from beautybird.pipeline.state_machine import BookingStateMachine
from beautybird.pipeline.validator import BookingValidator
from beautybird.providers.messagebird import LookupResult, ProviderError
from beautybird.schemas.booking_schema import BookingRequest
from beautybird.tools.appointment_store import AppointmentStore
from beautybird.tools.clock import FixedClock
from beautybird.tools.phone_verifier import PhoneVerifier
from beautybird.tools.reminder import ReminderScheduler

SUBMITTED_AT = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


class FakeProvider:
    """In-memory stand-in for the MessageBird API that records every call."""

    def __init__(
        self,
        line_type: str = "mobile",
        normalized: Optional[str] = None,
        lookup_error: Optional[ProviderError] = None,
        message_error: Optional[ProviderError] = None,
        lookup_delay: float = 0.0,
    ) -> None:
        self.line_type = line_type
        self.normalized = normalized
        self.lookup_error = lookup_error
        self.message_error = message_error
        self.lookup_delay = lookup_delay
        self.lookups: list[tuple[str, Optional[str]]] = []
        self.messages: list[dict] = []

    async def lookup(self, number: str, country_code: Optional[str] = None) -> LookupResult:
        self.lookups.append((number, country_code))
        if self.lookup_delay:
            await asyncio.sleep(self.lookup_delay)
        if self.lookup_error is not None:
            raise self.lookup_error
        return LookupResult(
            phone_number=self.normalized or number,
            line_type=self.line_type,
        )

    async def create_scheduled_message(
        self,
        originator: str,
        recipients: list[str],
        scheduled_datetime: str,
        body: str,
    ) -> Optional[str]:
        self.messages.append({
            "originator": originator,
            "recipients": recipients,
            "scheduled_datetime": scheduled_datetime,
            "body": body,
        })
        if self.message_error is not None:
            raise self.message_error
        return f"msg-{len(self.messages)}"


@pytest.fixture
def clock():
    return FixedClock(SUBMITTED_AT)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def store():
    return AppointmentStore()


@pytest.fixture
def state_machine():
    return BookingStateMachine()


@pytest.fixture
def validator():
    return BookingValidator(tz=timezone.utc)


def make_pipeline(
    provider: FakeProvider,
    store: AppointmentStore,
    clock: FixedClock,
    country_code: Optional[str] = "NL",
    tz: tzinfo = timezone.utc,
) -> BookingPipeline:
    """Helper to wire a pipeline around a fake provider, UTC unless told otherwise."""
    return BookingPipeline(
        validator=BookingValidator(tz=tz),
        verifier=PhoneVerifier(provider),
        scheduler=ReminderScheduler(provider, originator="BeautyBird", tz=tz),
        store=store,
        country_code=country_code,
        clock=clock,
    )


@pytest.fixture
def pipeline(provider, store, clock):
    return make_pipeline(provider, store, clock)


def make_request(**overrides: Optional[str]) -> BookingRequest:
    """Create a BookingRequest with sensible defaults."""
    fields = {
        "name": "Jane",
        "treatment": "Haircut",
        "number": "+31612345678",
        "date": "2024-05-01",
        "time": "14:10",
    }
    fields.update(overrides)
    return BookingRequest(**fields)
