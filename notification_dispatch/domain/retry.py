"""Per-channel retry state machine.

States:
    PENDING -> SENDING -> SUCCEEDED | RETRY_PENDING | EXHAUSTED
    RETRY_PENDING -> SENDING

The machine only records transitions. Whoever drives it (the dispatch
service) decides when to attempt, supplies the clock reading, and may inject
a delay or deadline between attempts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from ..errors import ChannelConfigError, InvalidTransition
from .outcomes import DeliveryOutcome


class RetryState(str, Enum):
    PENDING = "pending"
    SENDING = "sending"
    RETRY_PENDING = "retry_pending"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


TERMINAL_STATES = frozenset({RetryState.SUCCEEDED, RetryState.EXHAUSTED})


@dataclass
class RetryRecord:
    """Attempt counters and timestamps owned by a single channel instance."""

    max_attempts: int
    attempts_made: int = 0
    state: RetryState = RetryState.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    sent_at: datetime | None = None

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ChannelConfigError(
                f"max_attempts must be an integer, got {self.max_attempts!r}"
            )
        if self.max_attempts <= 0:
            raise ChannelConfigError(f"max_attempts must be > 0, got {self.max_attempts}")
        if self.attempts_made < 0 or self.attempts_made > self.max_attempts:
            raise ChannelConfigError(
                f"attempts_made must be within 0..{self.max_attempts}, "
                f"got {self.attempts_made}"
            )


class RetryStateMachine:
    """Record attempt transitions on one channel's `RetryRecord`."""

    def __init__(self, record: RetryRecord) -> None:
        self.record = record

    @property
    def state(self) -> RetryState:
        return self.record.state

    @property
    def is_terminal(self) -> bool:
        return self.record.state in TERMINAL_STATES

    @property
    def can_attempt(self) -> bool:
        return (
            self.record.state in (RetryState.PENDING, RetryState.RETRY_PENDING)
            and self.record.attempts_made < self.record.max_attempts
        )

    def start_attempt(self) -> int:
        """Enter SENDING and count the attempt. Returns the attempt number."""
        if not self.can_attempt:
            raise InvalidTransition(
                f"cannot start attempt from state={self.record.state.value} "
                f"attempts={self.record.attempts_made}/{self.record.max_attempts}"
            )
        self.record.state = RetryState.SENDING
        self.record.attempts_made += 1
        return self.record.attempts_made

    def record_outcome(self, outcome: DeliveryOutcome, *, now: datetime) -> RetryState:
        if self.record.state is not RetryState.SENDING:
            raise InvalidTransition(
                f"cannot record outcome from state={self.record.state.value}"
            )

        if outcome.ok:
            self.record.state = RetryState.SUCCEEDED
            self.record.sent_at = now
        elif self.record.attempts_made < self.record.max_attempts:
            self.record.state = RetryState.RETRY_PENDING
        else:
            self.record.state = RetryState.EXHAUSTED
        return self.record.state

    def force_exhausted(self) -> None:
        """Stop retrying regardless of remaining budget (deadline reached)."""
        if self.is_terminal:
            raise InvalidTransition(
                f"cannot exhaust from terminal state={self.record.state.value}"
            )
        self.record.state = RetryState.EXHAUSTED
