"""Value objects produced while dispatching one notification.

`Delivered`/`Failed` describe a single attempt and are consumed immediately.
`Success`/`ExhaustedRetries` describe the whole dispatch and are handed back to
the caller; the core keeps no copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from ..errors import RetriesExhausted
from ..types import ResultDict

RETRIES_EXHAUSTED = "retries_exhausted"
DEADLINE_EXCEEDED = "deadline_exceeded"


@dataclass(frozen=True)
class Delivered:
    ok = True


@dataclass(frozen=True)
class Failed:
    reason: str

    ok = False


DeliveryOutcome = Union[Delivered, Failed]


@dataclass(frozen=True)
class Success:
    """Terminal result of a dispatch whose attempt eventually delivered."""

    sent_at: datetime
    attempts_made: int

    ok = True

    def unwrap(self) -> datetime:
        return self.sent_at

    def as_dict(self) -> ResultDict:
        return {
            "status": "delivered",
            "sent_at": self.sent_at.isoformat(),
            "attempts_made": self.attempts_made,
        }


@dataclass(frozen=True)
class ExhaustedRetries:
    """Terminal result of a dispatch that never delivered.

    Carries enough context for a caller to log, alert, or re-dispatch through
    another channel.
    """

    channel_kind: str
    recipient: str
    max_attempts: int
    attempts_made: int
    last_error: str | None = None
    reason: str = RETRIES_EXHAUSTED

    ok = False

    def unwrap(self) -> datetime:
        raise RetriesExhausted(
            channel_kind=self.channel_kind,
            recipient=self.recipient,
            max_attempts=self.max_attempts,
            reason=self.reason,
        )

    def as_dict(self) -> ResultDict:
        return {
            "status": self.reason,
            "channel_kind": self.channel_kind,
            "recipient": self.recipient,
            "max_attempts": self.max_attempts,
            "attempts_made": self.attempts_made,
            "last_error": self.last_error,
        }


DispatchResult = Union[Success, ExhaustedRetries]
