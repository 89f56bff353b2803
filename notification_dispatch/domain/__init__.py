"""Domain layer: channels, retry bookkeeping, and order context."""

from .channels import (
    CHANNEL_TYPES,
    DEFAULT_MAX_ATTEMPTS,
    Channel,
    ChannelKind,
    EmailChannel,
    Priority,
    PushChannel,
    SMSChannel,
    build_channel,
)
from .order import Order, format_order_confirmation
from .outcomes import (
    Delivered,
    DeliveryOutcome,
    DispatchResult,
    ExhaustedRetries,
    Failed,
    Success,
)
from .retry import RetryRecord, RetryState, RetryStateMachine
from .simulator import make_simulator, simulate_delivery

__all__ = [
    "CHANNEL_TYPES",
    "DEFAULT_MAX_ATTEMPTS",
    "Channel",
    "ChannelKind",
    "Delivered",
    "DeliveryOutcome",
    "DispatchResult",
    "EmailChannel",
    "ExhaustedRetries",
    "Failed",
    "Order",
    "Priority",
    "PushChannel",
    "RetryRecord",
    "RetryState",
    "RetryStateMachine",
    "SMSChannel",
    "Success",
    "build_channel",
    "format_order_confirmation",
    "make_simulator",
    "simulate_delivery",
]
