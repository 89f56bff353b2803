"""Order context used to build confirmation messages.

The order is owned by the caller; dispatch code only reads it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation


@dataclass(frozen=True)
class Order:
    order_id: str
    amount: Decimal
    recipient: str

    def __post_init__(self) -> None:
        if not str(self.order_id).strip():
            raise ValueError("Order requires an order_id")
        object.__setattr__(self, "amount", as_amount(self.amount))


def as_amount(value: object) -> Decimal:
    """Coerce a numeric/text amount to Decimal without float rounding."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid order amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid order amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid order amount: {value!r}")
    return amount


def format_order_confirmation(order: Order) -> str:
    """Render the confirmation text sent for `order`."""
    return f"Order {order.order_id} confirmed, amount {order.amount:.2f}"
