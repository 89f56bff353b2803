"""Adapter layer: transports, event payload mapping, and Kafka glue."""

from .consumer_handler import handle_batch, handle_message
from .fake_transports import deliver_via_console, failing_transport, scripted_transport
from .kafka_runtime import publish_order_confirmed_event, run_order_worker_forever
from .payload import channel_from_event, order_from_event, parse_order_event_payload

__all__ = [
    "channel_from_event",
    "deliver_via_console",
    "failing_transport",
    "handle_batch",
    "handle_message",
    "order_from_event",
    "parse_order_event_payload",
    "publish_order_confirmed_event",
    "run_order_worker_forever",
    "scripted_transport",
]
