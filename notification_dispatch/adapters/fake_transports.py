"""Fake transports for local runs and deterministic tests.

Mental model refresher:
- This is outbound adapter code.
- A transport is any callable `(channel, message, recipient) -> outcome`.
- Channels call it through their `transport` attribute; the dispatch service
  never knows which implementation is underneath.
"""

from __future__ import annotations

from ..domain.channels import Channel
from ..domain.outcomes import Delivered, DeliveryOutcome, Failed
from ..types import DeliverFn


def deliver_via_console(channel: Channel, message: str, recipient: str) -> DeliveryOutcome:
    print(f"[{channel.kind().value.upper()}]")
    print(f"to={recipient}")
    print(f"message={message}")
    return Delivered()


def scripted_transport(
    failures_before_success: int,
    *,
    reason: str = "simulated provider failure",
) -> DeliverFn:
    """Fail the first `failures_before_success` calls, then always deliver."""
    if failures_before_success < 0:
        raise ValueError("failures_before_success must be >= 0")
    calls = 0

    def deliver(channel: Channel, message: str, recipient: str) -> DeliveryOutcome:
        nonlocal calls
        calls += 1
        if calls <= failures_before_success:
            return Failed(f"{reason} (call {calls})")
        return Delivered()

    return deliver


def failing_transport(reason: str = "simulated provider failure") -> DeliverFn:
    def deliver(channel: Channel, message: str, recipient: str) -> DeliveryOutcome:
        return Failed(reason)

    return deliver
