"""
Finite state machine for a single booking submission.

Every submission walks the same explicit graph:

    RECEIVED -> VALIDATED -> PHONE_VERIFIED -> REMINDER_SCHEDULED -> CONFIRMED

REJECTED absorbs user-correctable failures from the first three states and
FAILED absorbs a reminder the provider would not accept.

Usage:
    sm = BookingStateMachine()
    sm.transition(BookingTrigger.FIELDS_VALID)
    assert sm.current_state == BookingState.VALIDATED
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class BookingState(str, Enum):
    """All states of a booking submission."""
    RECEIVED = "received"
    VALIDATED = "validated"
    PHONE_VERIFIED = "phone_verified"
    REMINDER_SCHEDULED = "reminder_scheduled"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    FAILED = "failed"


class BookingTrigger(str, Enum):
    """Events that move a submission forward."""
    FIELDS_VALID = "fields_valid"
    FIELDS_INVALID = "fields_invalid"
    LOOKUP_SUCCEEDED = "lookup_succeeded"
    LOOKUP_REJECTED = "lookup_rejected"
    NOT_MOBILE = "not_mobile"
    REMINDER_SUBMITTED = "reminder_submitted"
    REMINDER_ACCEPTED = "reminder_accepted"
    REMINDER_FAILED = "reminder_failed"


@dataclass
class Transition:
    """A single valid state transition."""
    from_state: BookingState
    to_state: BookingState
    trigger: BookingTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: BookingState
    entered_at: datetime
    trigger: Optional[BookingTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


TERMINAL_STATES = frozenset(
    {BookingState.CONFIRMED, BookingState.REJECTED, BookingState.FAILED}
)


class BookingStateMachine:
    """Deterministic state machine for one submission."""

    TRANSITIONS: list[Transition] = [
        # --- Validation ---
        Transition(BookingState.RECEIVED, BookingState.VALIDATED,
                   BookingTrigger.FIELDS_VALID),
        Transition(BookingState.RECEIVED, BookingState.REJECTED,
                   BookingTrigger.FIELDS_INVALID),

        # --- Phone lookup ---
        Transition(BookingState.VALIDATED, BookingState.PHONE_VERIFIED,
                   BookingTrigger.LOOKUP_SUCCEEDED),
        Transition(BookingState.VALIDATED, BookingState.REJECTED,
                   BookingTrigger.LOOKUP_REJECTED),
        Transition(BookingState.PHONE_VERIFIED, BookingState.REJECTED,
                   BookingTrigger.NOT_MOBILE),

        # --- Reminder ---
        Transition(BookingState.PHONE_VERIFIED, BookingState.REMINDER_SCHEDULED,
                   BookingTrigger.REMINDER_SUBMITTED),
        Transition(BookingState.REMINDER_SCHEDULED, BookingState.CONFIRMED,
                   BookingTrigger.REMINDER_ACCEPTED),
        Transition(BookingState.REMINDER_SCHEDULED, BookingState.FAILED,
                   BookingTrigger.REMINDER_FAILED),
    ]

    def __init__(self) -> None:
        self._current_state = BookingState.RECEIVED
        self._history: list[StateEntry] = [
            StateEntry(state=BookingState.RECEIVED, entered_at=datetime.now(timezone.utc))
        ]

    @property
    def current_state(self) -> BookingState:
        return self._current_state

    def transition(self, trigger: BookingTrigger) -> BookingState:
        """
        Execute a state transition.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state
                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                logger.debug(
                    "State transition: %s -> %s (trigger: %s)",
                    old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[BookingTrigger]:
        """Return all triggers valid from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_state in TERMINAL_STATES
