"""Consumer-handler adapter functions (Kafka-like flow without Kafka).

Mental model refresher:
- This is the controller-like entrypoint for order event processing.
- Real Kafka code would call this after polling a record.
- Flow:
  record -> parse adapter -> order confirmation use-case -> commit/no-commit
- This module owns transport lifecycle behavior (parse errors, commit
  callbacks), not retry rules.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..application.dispatch import DispatchService
from ..application.order_notification import send_order_confirmation
from ..types import CommitFn, DeliverFn, EventDict, Record, RejectFn
from .payload import channel_from_event, order_from_event, parse_order_event_payload


def handle_message(
    record: Record,
    *,
    service: DispatchService,
    commit: CommitFn,
    reject: RejectFn | None = None,
    transport: DeliverFn | None = None,
) -> dict[str, Any]:
    """Handle one incoming record and decide commit/no-commit.

    Commit policy:
    - Commit only when the order confirmation was delivered.
    - Do not commit on parse failures or exhausted dispatches; `reject` is
      called with the reason instead.
    """
    try:
        payload = _get_record_payload(record)
        event = parse_order_event_payload(payload)
        order = order_from_event(event)
        channel = channel_from_event(event, transport=transport)
    except Exception as exc:
        error = f"parse_failed: {exc}"
        if reject is not None:
            reject(record, error)
        return {
            "status": "parse_failed",
            "record_meta": _record_meta(record),
            "event": None,
            "dispatch": None,
            "should_commit": False,
            "error": error,
        }

    result = send_order_confirmation(order, channel, service)
    should_commit = result.ok

    if should_commit:
        commit(record)
        status = "dispatched_and_committed"
        error = None
    else:
        status = "dispatched_not_committed"
        error = result.as_dict()["status"]
        if reject is not None:
            reject(record, error)

    return {
        "status": status,
        "record_meta": _record_meta(record),
        "event": event,
        "dispatch": result.as_dict(),
        "should_commit": should_commit,
        "error": error,
    }


def handle_batch(
    records: Sequence[Record],
    *,
    service: DispatchService,
    commit: CommitFn,
    reject: RejectFn | None = None,
    transport: DeliverFn | None = None,
) -> list[dict[str, Any]]:
    """Handle a batch of records sequentially using `handle_message`."""
    results: list[dict[str, Any]] = []
    for record in records:
        result = handle_message(
            record,
            service=service,
            commit=commit,
            reject=reject,
            transport=transport,
        )
        results.append(result)
    return results


def _get_record_payload(record: Record) -> EventDict:
    payload = record.get("value")
    if not isinstance(payload, dict):
        raise ValueError("record.value must be a dict payload")
    return payload


def _record_meta(record: Record) -> dict[str, Any]:
    return {
        "topic": record.get("topic"),
        "partition": record.get("partition"),
        "offset": record.get("offset"),
    }
