#!/usr/bin/env python3
"""Publish one `orders.confirmed` event to Kafka for local testing."""

from __future__ import annotations

import argparse
import sys
import uuid
from datetime import UTC, datetime
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from notification_dispatch.adapters.kafka_runtime import publish_order_confirmed_event  # noqa: E402
from notification_dispatch.config import load_env_file  # noqa: E402
from notification_dispatch.domain.channels import ChannelKind, Priority  # noqa: E402


def main() -> int:
    load_env_file(REPO_ROOT / ".env")
    args = parse_args()
    payload = build_payload(args)
    metadata = publish_order_confirmed_event(payload, topic=args.topic)

    print("[PUBLISHED]")
    print(f"topic={metadata['topic']}")
    print(f"partition={metadata['partition']}")
    print(f"offset={metadata['offset']}")
    print(f"event_id={payload['event_id']}")
    print(f"channel.kind={payload['channel']['kind']} channel.address={payload['channel']['address']}")
    return 0


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Publish one orders.confirmed event for Kafka testing."
    )
    parser.add_argument(
        "--kind",
        required=True,
        choices=[item.value for item in ChannelKind],
        help="Channel kind used to deliver the confirmation.",
    )
    parser.add_argument(
        "--address",
        required=True,
        help="Email address, phone number, or device token for the channel.",
    )
    parser.add_argument(
        "--amount",
        default="100.00",
        help="Order amount as a decimal string.",
    )
    parser.add_argument(
        "--recipient",
        default="customer-demo-1",
        help="Customer name carried on the order.",
    )
    parser.add_argument(
        "--priority",
        default=Priority.MEDIUM.value,
        choices=[item.value for item in Priority],
        help="Channel priority reported in dispatch logs.",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=None,
        help="Attempt budget. Default: the channel kind's default.",
    )
    parser.add_argument(
        "--event-id",
        default=None,
        help="Optional event id. Default: generated UUID.",
    )
    parser.add_argument(
        "--order-id",
        default=None,
        help="Optional order id. Default: generated UUID suffix.",
    )
    parser.add_argument(
        "--topic",
        default=None,
        help="Override Kafka topic (defaults to KAFKA_TOPIC_ORDERS_CONFIRMED).",
    )
    return parser.parse_args()


def build_payload(args: argparse.Namespace) -> dict[str, object]:
    if args.max_attempts is not None and args.max_attempts <= 0:
        raise SystemExit("--max-attempts must be > 0.")

    channel: dict[str, object] = {
        "kind": args.kind,
        "address": args.address,
        "priority": args.priority,
    }
    if args.max_attempts is not None:
        channel["max_attempts"] = args.max_attempts

    return {
        "event_id": args.event_id or f"evt-{uuid.uuid4()}",
        "event_type": "orders.confirmed",
        "occurred_at": datetime.now(tz=UTC).isoformat(),
        "order": {
            "order_id": args.order_id or f"ord-{uuid.uuid4().hex[:12]}",
            "amount": args.amount,
            "recipient": args.recipient,
        },
        "channel": channel,
    }


if __name__ == "__main__":
    sys.exit(main())
