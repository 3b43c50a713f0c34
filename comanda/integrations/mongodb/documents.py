"""Document representations of ledger records for MongoDB storage.

Currency amounts are stored as decimal strings so no precision is lost and
no BSON Decimal128 conversion is needed. Timestamps stay native datetimes
so orders can be sorted server-side.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from comanda.domain import Customer, Order


class OrderDocument(BaseModel):
    """Order document representation for MongoDB storage."""

    order_id: int
    request_id: str
    customer_name: str
    customer_tax_id: str
    items: list[dict[str, Any]] = Field(description="Embedded order lines")
    subtotal: str
    service_fee_applied: bool
    service_fee: str
    total: str
    created_at: datetime

    @classmethod
    def from_value(cls, order: Order) -> "OrderDocument":
        """Create a document from an order."""
        return cls(
            order_id=order.id,
            request_id=str(order.request_id),
            customer_name=order.customer_name,
            customer_tax_id=order.customer_tax_id,
            items=[item.model_dump(mode="json") for item in order.items],
            subtotal=str(order.subtotal),
            service_fee_applied=order.service_fee_applied,
            service_fee=str(order.service_fee),
            total=str(order.total),
            created_at=order.created_at,
        )

    def to_value(self) -> Order:
        """Convert the document back to an order, re-checking its totals."""
        return Order.model_validate(
            {
                "id": self.order_id,
                "request_id": self.request_id,
                "customer_name": self.customer_name,
                "customer_tax_id": self.customer_tax_id,
                "items": self.items,
                "subtotal": self.subtotal,
                "service_fee_applied": self.service_fee_applied,
                "service_fee": self.service_fee,
                "total": self.total,
                "created_at": self.created_at,
            }
        )


class CustomerDocument(BaseModel):
    """Customer aggregate document representation for MongoDB storage."""

    tax_id: str
    name: str
    total_orders: int
    total_spent: str

    @classmethod
    def from_value(cls, customer: Customer) -> "CustomerDocument":
        return cls(
            tax_id=customer.tax_id,
            name=customer.name,
            total_orders=customer.total_orders,
            total_spent=str(customer.total_spent),
        )

    def to_value(self) -> Customer:
        return Customer.model_validate(self.model_dump())
