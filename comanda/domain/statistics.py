from collections.abc import Sequence
from decimal import Decimal

from pydantic import BaseModel, Field

from .money import ZERO, to_currency
from .order import Order


class StatisticsSnapshot(BaseModel):
    """Point-in-time totals over the whole ledger. Never persisted."""

    model_config = {"frozen": True}

    total_customers: int = Field(default=0, ge=0)
    total_orders: int = Field(default=0, ge=0)
    total_revenue: Decimal = ZERO
    average_order_value: Decimal = ZERO

    @classmethod
    def from_orders(cls, orders: Sequence[Order]) -> "StatisticsSnapshot":
        """Reduce a collection of orders to a snapshot.

        An empty collection yields a snapshot of zeros rather than a
        division error.
        """
        if not orders:
            return cls()

        revenue = sum((order.total for order in orders), ZERO)
        return cls(
            total_customers=len({order.customer_tax_id for order in orders}),
            total_orders=len(orders),
            total_revenue=revenue,
            average_order_value=to_currency(revenue / len(orders)),
        )
