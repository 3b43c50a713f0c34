"""Ledger components and the facade that composes them.

- PersistenceGateway: storage interface with an in-memory implementation
- OrderLedger: records orders and lists them
- CustomerAggregator: keeps per-customer totals derived from the ledger
- StatisticsEngine: computes global totals on demand
- QueryFacade: lifecycle plus the operations the screens use
- CheckoutService: treats a recorded order as a completed sale
"""

from .aggregator import CustomerAggregator
from .checkout import CheckoutResult, CheckoutService
from .facade import QueryFacade
from .ledger import OrderLedger
from .statistics import StatisticsEngine
from .storage import InMemoryPersistenceGateway, PersistenceGateway

__all__ = [
    "PersistenceGateway",
    "InMemoryPersistenceGateway",
    "OrderLedger",
    "CustomerAggregator",
    "StatisticsEngine",
    "QueryFacade",
    "CheckoutService",
    "CheckoutResult",
]
