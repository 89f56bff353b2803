#!/usr/bin/env python3
"""Run the Kafka order-confirmation worker.

This worker consumes `orders.confirmed` and dispatches each confirmation
through the simulated channel transport.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Allow running this file directly from repository root.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from notification_dispatch.adapters.kafka_runtime import run_order_worker_forever  # noqa: E402
from notification_dispatch.config import load_env_file  # noqa: E402


def main() -> int:
    parse_args()
    load_env_file(REPO_ROOT / ".env")
    return run_order_worker_forever()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run Kafka consumer loop for order confirmation dispatch."
    )
    return parser.parse_args()


if __name__ == "__main__":
    sys.exit(main())
