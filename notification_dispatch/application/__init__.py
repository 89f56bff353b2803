"""Application layer: dispatch orchestration and order use-case."""

from .dispatch import DispatchService
from .order_notification import OrderNotification, send_order_confirmation

__all__ = [
    "DispatchService",
    "OrderNotification",
    "send_order_confirmation",
]
