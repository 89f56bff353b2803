#!/usr/bin/env python3
"""Run a Kafka-like order consumer flow without Kafka."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from notification_dispatch.adapters.consumer_handler import handle_batch  # noqa: E402
from notification_dispatch.adapters.fake_transports import deliver_via_console  # noqa: E402
from notification_dispatch.application.dispatch import DispatchService  # noqa: E402
from notification_dispatch.domain.channels import Channel  # noqa: E402
from notification_dispatch.domain.outcomes import DeliveryOutcome  # noqa: E402
from notification_dispatch.errors import DeliveryFailed  # noqa: E402


def main() -> int:
    records = sample_records()
    committed_offsets: list[tuple[int, int]] = []
    rejected_offsets: list[tuple[int, int, str]] = []

    def commit(record: dict[str, Any]) -> None:
        partition = int(record.get("partition", -1))
        offset = int(record.get("offset", -1))
        committed_offsets.append((partition, offset))
        print(f"[COMMIT] partition={partition} offset={offset}")

    def reject(record: dict[str, Any], reason: str) -> None:
        partition = int(record.get("partition", -1))
        offset = int(record.get("offset", -1))
        rejected_offsets.append((partition, offset, reason))
        print(f"[NO-COMMIT] partition={partition} offset={offset} reason={reason}")

    results = handle_batch(
        records,
        service=DispatchService(),
        commit=commit,
        reject=reject,
        transport=deliver_maybe_fail,
    )

    print("")
    print("[BATCH SUMMARY]")
    for result in results:
        meta = result["record_meta"]
        print(
            f"offset={meta['offset']} status={result['status']} "
            f"should_commit={result['should_commit']} error={result['error']}"
        )

    print("")
    print("[OFFSETS]")
    print(f"committed={committed_offsets}")
    print(f"rejected={rejected_offsets}")
    return 0


def deliver_maybe_fail(channel: Channel, message: str, recipient: str) -> DeliveryOutcome:
    if recipient.startswith("fail"):
        raise DeliveryFailed(f"{channel.kind().value} provider unavailable")
    return deliver_via_console(channel, message, recipient)


def sample_records() -> list[dict[str, Any]]:
    return [
        {
            "topic": "orders.confirmed",
            "partition": 0,
            "offset": 100,
            "value": {
                "event_id": "evt-100",
                "order": {"order_id": "ord-100", "amount": "100.00", "recipient": "behnam"},
                "channel": {"kind": "email", "address": "behnam@example.com", "priority": "MEDIUM"},
            },
        },
        {
            "topic": "orders.confirmed",
            "partition": 0,
            "offset": 101,
            "value": {
                "event_id": "evt-101",
                "order": {"order_id": "ord-101", "amount": "42.50", "recipient": "sara"},
                "channel": {"kind": "sms", "address": "fail-091298765432", "max_attempts": 2},
            },
        },
        {
            "topic": "orders.confirmed",
            "partition": 0,
            "offset": 102,
            "value": {
                "order": {"order_id": "ord-102", "amount": "10"},
                "channel": {"kind": "push", "address": "845484856698485"},
            },
        },
        {
            "topic": "orders.confirmed",
            "partition": 0,
            "offset": 103,
            "value": {
                "event_id": "evt-103",
                "order": {"order_id": "ord-103", "amount": "5.99", "recipient": "ali"},
                "channel": {"kind": "fax", "address": "+15555550123"},
            },
        },
    ]


if __name__ == "__main__":
    sys.exit(main())
