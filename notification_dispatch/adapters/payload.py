"""Payload adapter functions.

Mental model refresher:
- This is an adapter/edge module.
- It translates transport-shaped data (an `orders.confirmed` message) into
  the internal event dictionary used by application/domain code.
- It validates shape and required fields; it does not dispatch anything.
"""

from __future__ import annotations

from typing import Any

from ..domain.channels import Channel, ChannelKind, Priority, build_channel
from ..domain.order import Order, as_amount
from ..types import DeliverFn, Event, EventDict


def parse_order_event_payload(payload: Event) -> EventDict:
    """Normalize an order event payload into a plain event dictionary."""
    order = payload.get("order", {}) or {}
    channel = payload.get("channel", {}) or {}

    kind = _as_required_str(channel.get("kind"), "channel.kind").lower()
    if kind not in {item.value for item in ChannelKind}:
        raise ValueError(f"Unsupported channel.kind: {kind!r}")

    priority = (_as_optional_str(channel.get("priority")) or Priority.MEDIUM.value).upper()
    if priority not in {item.value for item in Priority}:
        raise ValueError(f"Unsupported channel.priority: {priority!r}")

    return {
        "event_id": _as_required_str(payload.get("event_id"), "event_id"),
        "order_id": _as_required_str(order.get("order_id"), "order.order_id"),
        "amount": as_amount(_as_required_str(order.get("amount"), "order.amount")),
        "recipient": str(order.get("recipient") or ""),
        "channel_kind": kind,
        "channel_address": _as_required_str(channel.get("address"), "channel.address"),
        "priority": priority,
        "max_attempts": _as_optional_positive_int(
            channel.get("max_attempts"), "channel.max_attempts"
        ),
    }


def order_from_event(event: Event) -> Order:
    """Build the `Order` described by a parsed event."""
    return Order(
        order_id=event["order_id"],
        amount=event["amount"],
        recipient=event["recipient"],
    )


def channel_from_event(event: Event, *, transport: DeliverFn | None = None) -> Channel:
    """Build a fresh channel for the parsed event's kind and address."""
    return build_channel(
        event["channel_kind"],
        event["channel_address"],
        priority=event["priority"],
        max_attempts=event["max_attempts"],
        transport=transport,
    )


def _as_required_str(value: Any, field_name: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValueError(f"Missing required field: {field_name}")
    return text


def _as_optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_optional_positive_int(value: Any, field_name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field_name}: {value!r}")
    try:
        number = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Invalid {field_name}: {value!r}") from exc
    if number <= 0:
        raise ValueError(f"{field_name} must be > 0, got {number}")
    return number
