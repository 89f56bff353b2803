"""Delivery channels: email, SMS and push.

A channel knows what kind it is and how to hand one message to its
transport. Attempt counting lives in the channel's `RetryRecord`, which only
the retry state machine mutates while a dispatch is running.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum

from ..errors import ChannelConfigError
from ..types import DeliverFn
from .outcomes import DeliveryOutcome
from .retry import RetryRecord
from .simulator import simulate_delivery


class ChannelKind(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Attempt budgets used when a channel is built without an explicit one.
DEFAULT_MAX_ATTEMPTS = {
    ChannelKind.EMAIL: 3,
    ChannelKind.SMS: 5,
    ChannelKind.PUSH: 2,
}


class Channel(ABC):
    """A delivery mechanism with its own address, priority and retry record."""

    def __init__(
        self,
        address: str,
        *,
        priority: Priority | str = Priority.MEDIUM,
        max_attempts: int | None = None,
        transport: DeliverFn | None = None,
        created_at: datetime | None = None,
    ) -> None:
        text = str(address).strip() if address is not None else ""
        if not text:
            raise ChannelConfigError(f"{self.kind().value} channel requires an address")

        self.address = text
        self.priority = _as_priority(priority)
        budget = DEFAULT_MAX_ATTEMPTS[self.kind()] if max_attempts is None else max_attempts
        if created_at is None:
            self.retry = RetryRecord(max_attempts=budget)
        else:
            self.retry = RetryRecord(max_attempts=budget, created_at=created_at)
        self.transport: DeliverFn = transport or simulate_delivery

    @abstractmethod
    def kind(self) -> ChannelKind:
        raise NotImplementedError

    @abstractmethod
    def deliver(self, message: str, recipient: str) -> DeliveryOutcome:
        raise NotImplementedError

    @property
    def attempts_made(self) -> int:
        return self.retry.attempts_made

    @property
    def max_attempts(self) -> int:
        return self.retry.max_attempts

    @property
    def created_at(self) -> datetime:
        return self.retry.created_at

    @property
    def sent_at(self) -> datetime | None:
        return self.retry.sent_at

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(address={self.address!r}, "
            f"priority={self.priority.value}, "
            f"attempts={self.retry.attempts_made}/{self.retry.max_attempts}, "
            f"state={self.retry.state.value})"
        )


class EmailChannel(Channel):
    @property
    def email_address(self) -> str:
        return self.address

    def kind(self) -> ChannelKind:
        return ChannelKind.EMAIL

    def deliver(self, message: str, recipient: str) -> DeliveryOutcome:
        return self.transport(self, message, recipient)


class SMSChannel(Channel):
    @property
    def phone_number(self) -> str:
        return self.address

    def kind(self) -> ChannelKind:
        return ChannelKind.SMS

    def deliver(self, message: str, recipient: str) -> DeliveryOutcome:
        return self.transport(self, message, recipient)


class PushChannel(Channel):
    @property
    def device_token(self) -> str:
        return self.address

    def kind(self) -> ChannelKind:
        return ChannelKind.PUSH

    def deliver(self, message: str, recipient: str) -> DeliveryOutcome:
        return self.transport(self, message, recipient)


CHANNEL_TYPES: dict[ChannelKind, type[Channel]] = {
    ChannelKind.EMAIL: EmailChannel,
    ChannelKind.SMS: SMSChannel,
    ChannelKind.PUSH: PushChannel,
}


def build_channel(
    kind: ChannelKind | str,
    address: str,
    *,
    priority: Priority | str = Priority.MEDIUM,
    max_attempts: int | None = None,
    transport: DeliverFn | None = None,
) -> Channel:
    """Create a fresh channel instance for one dispatch."""
    channel_type = CHANNEL_TYPES[_as_kind(kind)]
    return channel_type(
        address,
        priority=priority,
        max_attempts=max_attempts,
        transport=transport,
    )


def _as_kind(value: ChannelKind | str) -> ChannelKind:
    if isinstance(value, ChannelKind):
        return value
    try:
        return ChannelKind(str(value).strip().lower())
    except ValueError as exc:
        raise ChannelConfigError(f"Unknown channel kind: {value!r}") from exc


def _as_priority(value: Priority | str) -> Priority:
    if isinstance(value, Priority):
        return value
    try:
        return Priority(str(value).strip().upper())
    except ValueError as exc:
        raise ChannelConfigError(f"Unknown priority: {value!r}") from exc
