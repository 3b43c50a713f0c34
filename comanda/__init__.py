"""Comanda - order ledger and customer aggregates for a café point of sale.

This module provides the public API used by the point-of-sale screens.
"""

from .application import (
    CheckoutResult,
    CheckoutService,
    CustomerAggregator,
    InMemoryPersistenceGateway,
    OrderLedger,
    PersistenceGateway,
    QueryFacade,
    StatisticsEngine,
)
from .config import ComandaSettings
from .domain import (
    AggregationError,
    ComandaError,
    Customer,
    NotInitializedError,
    Order,
    OrderItem,
    OrderRequest,
    PersistenceError,
    StatisticsSnapshot,
    ValidationError,
)

__all__ = [
    # Facade and components
    "QueryFacade",
    "CheckoutService",
    "CheckoutResult",
    "OrderLedger",
    "CustomerAggregator",
    "StatisticsEngine",
    "PersistenceGateway",
    "InMemoryPersistenceGateway",
    "ComandaSettings",
    # Records
    "Order",
    "OrderItem",
    "OrderRequest",
    "Customer",
    "StatisticsSnapshot",
    # Errors
    "ComandaError",
    "ValidationError",
    "PersistenceError",
    "AggregationError",
    "NotInitializedError",
]
