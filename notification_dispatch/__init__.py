"""Notification dispatch with bounded per-channel retries.

Module layout by abstraction layer:
- domain: channels, retry state machine, outcomes, order context
- application: dispatch service and order confirmation use-case
- adapters: transports, payload mapping, consumer handler, Kafka runtime
"""

from .adapters.consumer_handler import handle_batch, handle_message
from .adapters.fake_transports import deliver_via_console, scripted_transport
from .adapters.payload import parse_order_event_payload
from .application.dispatch import DispatchService
from .application.order_notification import OrderNotification, send_order_confirmation
from .config import DispatchSettings
from .domain.channels import (
    Channel,
    ChannelKind,
    EmailChannel,
    Priority,
    PushChannel,
    SMSChannel,
    build_channel,
)
from .domain.order import Order
from .domain.outcomes import Delivered, ExhaustedRetries, Failed, Success
from .domain.simulator import make_simulator, simulate_delivery
from .errors import (
    ChannelConfigError,
    DeliveryFailed,
    DispatchError,
    InvalidTransition,
    RetriesExhausted,
)

__all__ = [
    "Channel",
    "ChannelConfigError",
    "ChannelKind",
    "Delivered",
    "DeliveryFailed",
    "DispatchError",
    "DispatchService",
    "DispatchSettings",
    "EmailChannel",
    "ExhaustedRetries",
    "Failed",
    "InvalidTransition",
    "Order",
    "OrderNotification",
    "Priority",
    "PushChannel",
    "RetriesExhausted",
    "SMSChannel",
    "Success",
    "build_channel",
    "deliver_via_console",
    "handle_batch",
    "handle_message",
    "make_simulator",
    "parse_order_event_payload",
    "scripted_transport",
    "send_order_confirmation",
    "simulate_delivery",
]
