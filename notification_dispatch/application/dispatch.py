"""Dispatch service: drive one channel's retry state machine to completion.

Mental model refresher:
- Application layer coordinates the use-case flow; it owns no channel rules.
- Every channel kind goes through the same retry protocol. Kind and priority
  are only reported in the log line.
- A send is synchronous: the caller gets a terminal `DispatchResult` back.
  Retry delays and the wall-time budget are injected, never hard-coded.
"""

from __future__ import annotations

import math
import time
from datetime import UTC, datetime

from ..domain.channels import Channel
from ..domain.outcomes import (
    DEADLINE_EXCEEDED,
    RETRIES_EXHAUSTED,
    Delivered,
    DeliveryOutcome,
    DispatchResult,
    ExhaustedRetries,
    Failed,
    Success,
)
from ..domain.retry import RetryState, RetryStateMachine
from ..errors import InvalidTransition
from ..types import BeforeRetryFn, LogFn, MonotonicFn, NowFn


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class DispatchService:
    """Run one channel through the shared retry protocol to a terminal result."""

    def __init__(
        self,
        *,
        log: LogFn = print,
        now: NowFn = _utc_now,
        monotonic: MonotonicFn = time.monotonic,
        deadline_seconds: float | None = None,
        before_retry: BeforeRetryFn | None = None,
    ) -> None:
        if deadline_seconds is not None and not (
            math.isfinite(deadline_seconds) and deadline_seconds > 0
        ):
            raise ValueError(f"deadline_seconds must be finite and > 0, got {deadline_seconds}")
        self._log = log
        self._now = now
        self._monotonic = monotonic
        self._deadline_seconds = deadline_seconds
        self._before_retry = before_retry

    def send(self, channel: Channel, message: str, recipient: str) -> DispatchResult:
        """Deliver `message` to `recipient` through `channel`, retrying on failure.

        The channel must be fresh: a channel that already reached a terminal
        state (or has no budget left) raises `InvalidTransition`.
        """
        machine = RetryStateMachine(channel.retry)
        if not machine.can_attempt:
            raise InvalidTransition(f"channel is not dispatchable: {channel!r}")

        kind = channel.kind().value
        self._log(
            f"[DISPATCH] kind={kind} priority={channel.priority.value} "
            f"recipient={recipient} max_attempts={channel.max_attempts}"
        )

        started = self._monotonic()
        last_error: str | None = None
        while machine.can_attempt:
            if machine.state is RetryState.RETRY_PENDING and self._before_retry is not None:
                self._before_retry(channel.attempts_made + 1)

            if self._deadline_reached(started):
                machine.force_exhausted()
                return self._exhausted(channel, recipient, last_error, DEADLINE_EXCEEDED)

            attempt = machine.start_attempt()
            outcome = self._attempt(channel, message, recipient)
            state = machine.record_outcome(outcome, now=self._now())

            if state is RetryState.SUCCEEDED:
                sent_at = channel.sent_at or self._now()
                self._log(
                    f"[DELIVERED] kind={kind} recipient={recipient} "
                    f"attempts={attempt}/{channel.max_attempts} sent_at={sent_at.isoformat()}"
                )
                return Success(sent_at=sent_at, attempts_made=attempt)

            if isinstance(outcome, Failed):
                last_error = outcome.reason
            self._log(
                f"[ATTEMPT FAILED] kind={kind} attempt={attempt}/{channel.max_attempts} "
                f"error={last_error}"
            )

        return self._exhausted(channel, recipient, last_error, RETRIES_EXHAUSTED)

    def _attempt(self, channel: Channel, message: str, recipient: str) -> DeliveryOutcome:
        try:
            outcome = channel.deliver(message, recipient)
        except Exception as exc:
            return Failed(str(exc) or type(exc).__name__)
        if not isinstance(outcome, (Delivered, Failed)):
            return Failed(f"transport returned {type(outcome).__name__}, not a delivery outcome")
        return outcome

    def _deadline_reached(self, started: float) -> bool:
        if self._deadline_seconds is None:
            return False
        return self._monotonic() - started >= self._deadline_seconds

    def _exhausted(
        self,
        channel: Channel,
        recipient: str,
        last_error: str | None,
        reason: str,
    ) -> ExhaustedRetries:
        result = ExhaustedRetries(
            channel_kind=channel.kind().value,
            recipient=recipient,
            max_attempts=channel.max_attempts,
            attempts_made=channel.attempts_made,
            last_error=last_error,
            reason=reason,
        )
        self._log(
            f"[EXHAUSTED] kind={result.channel_kind} recipient={recipient} "
            f"attempts={result.attempts_made}/{result.max_attempts} reason={reason}"
        )
        return result
