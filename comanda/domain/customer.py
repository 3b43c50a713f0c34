from collections.abc import Iterable
from decimal import Decimal

from pydantic import BaseModel, Field

from .money import to_currency
from .order import TAX_ID_PATTERN, Order


class Customer(BaseModel):
    """Spending summary of every order placed under one tax id.

    A customer is derived state: it is fully determined by the orders
    that share its tax id. ``name`` is whichever name the latest absorbed
    order carried; different spellings for the same tax id are not
    reconciled.

    Attributes:
        tax_id: The customer's normalized tax id. Unique key.
        name: Most recently seen display name.
        total_orders: Number of orders placed.
        total_spent: Sum of the totals of those orders.
    """

    model_config = {"frozen": True}

    tax_id: str = Field(pattern=TAX_ID_PATTERN)
    name: str
    total_orders: int = Field(ge=0)
    total_spent: Decimal

    @classmethod
    def from_order(cls, order: Order) -> "Customer":
        """Start a new aggregate from a customer's first order."""
        return cls(
            tax_id=order.customer_tax_id,
            name=order.customer_name,
            total_orders=1,
            total_spent=order.total,
        )

    def absorb(self, order: Order) -> "Customer":
        """Return a copy of this aggregate with ``order`` folded in.

        Raises:
            ValueError: If the order belongs to another tax id.
        """
        if order.customer_tax_id != self.tax_id:
            raise ValueError(
                f"Order {order.id} does not belong to customer {self.tax_id}"
            )
        return self.model_copy(
            update={
                "name": order.customer_name,
                "total_orders": self.total_orders + 1,
                "total_spent": to_currency(self.total_spent + order.total),
            }
        )


def derive_customers(orders: Iterable[Order]) -> dict[str, Customer]:
    """Fold a collection of orders into one aggregate per tax id.

    Orders are replayed in id order regardless of how they are passed in,
    so the latest order's name always wins.
    """
    customers: dict[str, Customer] = {}
    for order in sorted(orders, key=lambda o: o.id):
        existing = customers.get(order.customer_tax_id)
        customers[order.customer_tax_id] = (
            existing.absorb(order) if existing else Customer.from_order(order)
        )
    return customers
