from __future__ import annotations

import unittest
from decimal import Decimal
from typing import Any

from notification_dispatch.adapters.consumer_handler import handle_batch, handle_message
from notification_dispatch.adapters.fake_transports import failing_transport, scripted_transport
from notification_dispatch.adapters.payload import parse_order_event_payload
from notification_dispatch.application.dispatch import DispatchService


def make_record(value: Any, *, offset: int) -> dict[str, Any]:
    return {
        "topic": "orders.confirmed",
        "partition": 0,
        "offset": offset,
        "value": value,
    }


def make_payload(**overrides: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "event_id": "evt-1",
        "order": {"order_id": "ord-1", "amount": "100.00", "recipient": "behnam"},
        "channel": {
            "kind": "email",
            "address": "behnam@example.com",
            "priority": "HIGH",
            "max_attempts": 3,
        },
    }
    return base | overrides


def quiet_service() -> DispatchService:
    return DispatchService(log=lambda _line: None)


class PayloadTests(unittest.TestCase):
    def test_parse_order_event_payload_maps_fields(self) -> None:
        event = parse_order_event_payload(make_payload())

        self.assertEqual(event["event_id"], "evt-1")
        self.assertEqual(event["order_id"], "ord-1")
        self.assertEqual(event["amount"], Decimal("100.00"))
        self.assertEqual(event["channel_kind"], "email")
        self.assertEqual(event["channel_address"], "behnam@example.com")
        self.assertEqual(event["priority"], "HIGH")
        self.assertEqual(event["max_attempts"], 3)

    def test_parse_applies_defaults(self) -> None:
        payload = make_payload(channel={"kind": "PUSH", "address": "token-1"})

        event = parse_order_event_payload(payload)

        self.assertEqual(event["channel_kind"], "push")
        self.assertEqual(event["priority"], "MEDIUM")
        self.assertIsNone(event["max_attempts"])

    def test_parse_requires_event_id(self) -> None:
        payload = make_payload()
        del payload["event_id"]

        with self.assertRaises(ValueError):
            parse_order_event_payload(payload)

    def test_parse_rejects_unknown_kind(self) -> None:
        with self.assertRaises(ValueError):
            parse_order_event_payload(
                make_payload(channel={"kind": "fax", "address": "+15555550123"})
            )

    def test_parse_rejects_zero_budget(self) -> None:
        with self.assertRaises(ValueError):
            parse_order_event_payload(
                make_payload(channel={"kind": "sms", "address": "+1555", "max_attempts": 0})
            )

    def test_parse_rejects_bad_amount(self) -> None:
        with self.assertRaises(ValueError):
            parse_order_event_payload(
                make_payload(order={"order_id": "ord-1", "amount": "ten"})
            )


class ConsumerHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.committed: list[int] = []
        self.rejected: list[tuple[int, str]] = []

    def commit(self, message_record: dict[str, Any]) -> None:
        self.committed.append(int(message_record["offset"]))

    def reject(self, message_record: dict[str, Any], reason: str) -> None:
        self.rejected.append((int(message_record["offset"]), reason))

    def test_handle_message_commits_when_dispatch_succeeds(self) -> None:
        result = handle_message(
            make_record(make_payload(), offset=10),
            service=quiet_service(),
            commit=self.commit,
            reject=self.reject,
            transport=scripted_transport(1),
        )

        self.assertEqual(result["status"], "dispatched_and_committed")
        self.assertTrue(result["should_commit"])
        self.assertEqual(result["dispatch"]["attempts_made"], 2)
        self.assertEqual(self.committed, [10])
        self.assertEqual(self.rejected, [])

    def test_handle_message_rejects_when_retries_exhausted(self) -> None:
        result = handle_message(
            make_record(make_payload(), offset=11),
            service=quiet_service(),
            commit=self.commit,
            reject=self.reject,
            transport=failing_transport("provider unavailable"),
        )

        self.assertEqual(result["status"], "dispatched_not_committed")
        self.assertFalse(result["should_commit"])
        self.assertEqual(result["error"], "retries_exhausted")
        self.assertEqual(result["dispatch"]["attempts_made"], 3)
        self.assertEqual(result["dispatch"]["recipient"], "behnam@example.com")
        self.assertEqual(self.committed, [])
        self.assertEqual(self.rejected, [(11, "retries_exhausted")])

    def test_handle_message_parse_failure_does_not_commit(self) -> None:
        bad_record = make_record({"order": {}, "channel": {}}, offset=12)

        result = handle_message(
            bad_record,
            service=quiet_service(),
            commit=self.commit,
            reject=self.reject,
        )

        self.assertEqual(result["status"], "parse_failed")
        self.assertFalse(result["should_commit"])
        self.assertIsNone(result["dispatch"])
        self.assertEqual(self.committed, [])
        self.assertEqual(self.rejected[0][0], 12)
        self.assertIn("parse_failed", result["error"] or "")

    def test_handle_message_non_dict_value_is_parse_failure(self) -> None:
        result = handle_message(
            make_record("not a dict", offset=13),
            service=quiet_service(),
            commit=self.commit,
        )

        self.assertEqual(result["status"], "parse_failed")
        self.assertEqual(self.committed, [])

    def test_handle_batch_mixes_commit_and_no_commit(self) -> None:
        records = [
            make_record(make_payload(), offset=20),
            make_record(
                make_payload(channel={"kind": "sms", "address": "+15555550123", "max_attempts": 1}),
                offset=21,
            ),
        ]

        def transport(channel, message: str, recipient: str):
            if channel.kind().value == "sms":
                return failing_transport()(channel, message, recipient)
            return scripted_transport(0)(channel, message, recipient)

        results = handle_batch(
            records,
            service=quiet_service(),
            commit=self.commit,
            reject=self.reject,
            transport=transport,
        )

        self.assertEqual(len(results), 2)
        self.assertEqual(self.committed, [20])
        self.assertEqual([offset for offset, _reason in self.rejected], [21])


if __name__ == "__main__":
    unittest.main()
