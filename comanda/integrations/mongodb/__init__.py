"""MongoDB integration for the comanda ledger.

This module provides a MongoDB implementation of the PersistenceGateway
interface using the async PyMongo driver.

Usage:
    >>> from comanda import QueryFacade
    >>> from comanda.integrations.mongodb import (
    ...     MongoConfiguration,
    ...     MongoPersistenceGateway,
    ... )
    >>>
    >>> config = MongoConfiguration(
    ...     uri="mongodb://localhost:27017",
    ...     database="cafe",
    ... )
    >>> async with QueryFacade(MongoPersistenceGateway(config)) as facade:
    ...     stats = await facade.statistics()
"""

from .collection import IndexDirection, IndexedCollection, IndexSpec
from .config import MongoConfiguration
from .documents import CustomerDocument, OrderDocument
from .gateway import MongoPersistenceGateway

__all__ = [
    "MongoConfiguration",
    "MongoPersistenceGateway",
    "IndexedCollection",
    "IndexSpec",
    "IndexDirection",
    "OrderDocument",
    "CustomerDocument",
]
