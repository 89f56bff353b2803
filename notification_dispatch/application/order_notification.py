"""Order confirmation use-case built on top of the dispatch service.

The message is addressed to the channel's own destination (email address,
phone number, or device token). Retry behavior is entirely the dispatch
service's; this module only composes message and channel.
"""

from __future__ import annotations

from ..domain.channels import Channel
from ..domain.order import Order, format_order_confirmation
from ..domain.outcomes import DispatchResult
from .dispatch import DispatchService


class OrderNotification:
    """Pair an order with the channel that should confirm it."""

    def __init__(self, order: Order, channel: Channel) -> None:
        self.order = order
        self.channel = channel

    @property
    def message(self) -> str:
        return format_order_confirmation(self.order)

    @property
    def recipient(self) -> str:
        return self.channel.address

    def send(self, service: DispatchService) -> DispatchResult:
        return service.send(self.channel, self.message, self.recipient)


def send_order_confirmation(
    order: Order,
    channel: Channel,
    service: DispatchService,
) -> DispatchResult:
    """Dispatch the confirmation for `order` through `channel`."""
    return OrderNotification(order, channel).send(service)
