"""Error types raised by the dispatch core.

Per-attempt delivery problems are recoverable and never escape `send`; they
become `Failed` outcomes and are retried. Only construction mistakes and
explicit `unwrap()` calls raise.
"""

from __future__ import annotations


class DispatchError(Exception):
    """Base class for notification dispatch errors."""


class ChannelConfigError(DispatchError, ValueError):
    """A channel was built with an invalid kind or attempt budget."""


class DeliveryFailed(DispatchError):
    """A transient transport failure for one attempt. Safe to retry."""


class InvalidTransition(DispatchError):
    """The retry state machine was driven out of order."""


class RetriesExhausted(DispatchError):
    """The attempt budget was consumed without a successful delivery."""

    def __init__(
        self,
        *,
        channel_kind: str,
        recipient: str,
        max_attempts: int,
        reason: str = "retries_exhausted",
    ) -> None:
        self.channel_kind = channel_kind
        self.recipient = recipient
        self.max_attempts = max_attempts
        self.reason = reason
        super().__init__(
            f"{channel_kind} to {recipient} failed: {reason} | max retries = {max_attempts}"
        )
