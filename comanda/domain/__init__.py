"""Domain records and rules of the order ledger.

- OrderItem, OrderRequest, Order: what was bought and how it was priced
- Customer: per tax id spending summary derived from orders
- StatisticsSnapshot: computed totals over the ledger
- Exceptions raised across the package
"""

from .customer import Customer, derive_customers
from .exceptions import (
    AggregationError,
    ComandaError,
    NotInitializedError,
    PersistenceError,
    UnknownProductError,
    ValidationError,
)
from .money import SERVICE_FEE_RATE, format_currency, service_fee_for, to_currency
from .order import Order, OrderItem, OrderRequest, most_recent_first, utc_now
from .statistics import StatisticsSnapshot
from .tax_id import format_tax_id, is_valid_tax_id, normalize_tax_id

__all__ = [
    # Records
    "Order",
    "OrderItem",
    "OrderRequest",
    "Customer",
    "StatisticsSnapshot",
    # Helpers
    "derive_customers",
    "most_recent_first",
    "utc_now",
    "SERVICE_FEE_RATE",
    "format_currency",
    "service_fee_for",
    "to_currency",
    "format_tax_id",
    "is_valid_tax_id",
    "normalize_tax_id",
    # Exceptions
    "ComandaError",
    "ValidationError",
    "PersistenceError",
    "AggregationError",
    "NotInitializedError",
    "UnknownProductError",
]
