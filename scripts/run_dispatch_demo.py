#!/usr/bin/env python3
"""Dispatch a plain message and an order confirmation through each channel.

Delivery uses the probabilistic simulator, so results differ between runs
unless `--seed` (or DELIVERY_SEED) is given.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from decimal import Decimal
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from notification_dispatch import (  # noqa: E402
    DispatchSettings,
    EmailChannel,
    Order,
    Priority,
    PushChannel,
    SMSChannel,
    send_order_confirmation,
)
from notification_dispatch.config import load_env_file  # noqa: E402
from notification_dispatch.domain.outcomes import DispatchResult  # noqa: E402
from notification_dispatch.types import DeliverFn  # noqa: E402


def main() -> int:
    load_env_file(REPO_ROOT / ".env")
    args = parse_args()
    settings = DispatchSettings.from_env()
    if args.seed is not None:
        settings = dataclasses.replace(settings, seed=args.seed)
    service = settings.build_service()
    transport = settings.build_simulator()
    order = Order(order_id="12345", amount=Decimal("100.00"), recipient="behnam")

    failures = 0
    for build in (build_email, build_push, build_sms):
        plain = service.send(build(transport), "your order is ready", order.recipient)
        print_result("plain", plain)
        confirmation = send_order_confirmation(order, build(transport), service)
        print_result("order", confirmation)
        failures += int(not plain.ok) + int(not confirmation.ok)
        print("")
        print("=====================")

    return 0 if failures == 0 else 1


def build_email(transport: DeliverFn) -> EmailChannel:
    return EmailChannel(
        "behnam@gmail.com", priority=Priority.MEDIUM, max_attempts=3, transport=transport
    )


def build_push(transport: DeliverFn) -> PushChannel:
    return PushChannel(
        "845484856698485", priority=Priority.LOW, max_attempts=2, transport=transport
    )


def build_sms(transport: DeliverFn) -> SMSChannel:
    return SMSChannel(
        "091298765432", priority=Priority.HIGH, max_attempts=5, transport=transport
    )


def print_result(label: str, result: DispatchResult) -> None:
    fields = " ".join(f"{key}={value}" for key, value in result.as_dict().items())
    print(f"[RESULT] message={label} {fields}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run email/push/sms dispatches against the delivery simulator."
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the delivery simulator (overrides DELIVERY_SEED).",
    )
    return parser.parse_args()


if __name__ == "__main__":
    sys.exit(main())
