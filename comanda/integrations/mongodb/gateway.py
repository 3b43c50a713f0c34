"""MongoDB implementation of PersistenceGateway."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError
from ulid import ULID

from comanda.application.storage import PersistenceGateway
from comanda.domain import Customer, Order, PersistenceError
from comanda.integrations.mongodb.collection import (
    IndexDirection,
    IndexedCollection,
    IndexSpec,
)
from comanda.integrations.mongodb.config import MongoConfiguration
from comanda.integrations.mongodb.documents import CustomerDocument, OrderDocument

LOGGER = logging.getLogger(__name__)

ORDER_SEQUENCE = "orders"


@contextmanager
def translate_errors(operation: str) -> Iterator[None]:
    """Re-raise driver and decoding errors as PersistenceError, keeping the cause."""
    try:
        yield
    except DuplicateKeyError as err:
        raise PersistenceError(f"{operation} rejected: duplicate key") from err
    except PydanticValidationError as err:
        LOGGER.error("Stored document could not be decoded", extra={"operation": operation})
        raise PersistenceError(f"{operation} failed: undecodable document") from err
    except PyMongoError as err:
        LOGGER.error("MongoDB operation failed", extra={"operation": operation})
        raise PersistenceError(f"{operation} failed: {err}") from err


class MongoPersistenceGateway(PersistenceGateway):
    """MongoDB-backed storage for orders and customer aggregates.

    Collections:
        - orders: one document per order with its items embedded.
          Unique on order_id and on request_id.
        - customers: one document per tax id. Unique on tax_id.
        - counters: the order id sequence, advanced with an atomic $inc.

    Document schemas:
        orders: {"order_id": int, "request_id": "ULID string",
                 "customer_name": str, "customer_tax_id": str,
                 "items": [{...}], "subtotal": "20.00",
                 "service_fee_applied": bool, "service_fee": "0.00",
                 "total": "20.00", "created_at": datetime}
        customers: {"tax_id": str, "name": str, "total_orders": int,
                    "total_spent": "53.00"}

    Every method is a single MongoDB operation; no transactions are used.

    Example:
        >>> config = MongoConfiguration(database="cafe")
        >>> gateway = MongoPersistenceGateway(config)
        >>> await gateway.initialize()
        >>> orders = await gateway.load_orders()
        >>> await gateway.close()
    """

    def __init__(self, config: MongoConfiguration) -> None:
        self.config = config
        self._orders = IndexedCollection(
            config.orders,
            indexes=[
                IndexSpec(keys=[("order_id", IndexDirection.ASC)], unique=True),
                IndexSpec(keys=[("request_id", IndexDirection.ASC)], unique=True),
                IndexSpec(
                    keys=[
                        ("customer_tax_id", IndexDirection.ASC),
                        ("created_at", IndexDirection.DESC),
                    ]
                ),
            ],
        )
        self._customers = IndexedCollection(
            config.customers,
            indexes=[IndexSpec(keys=[("tax_id", IndexDirection.ASC)], unique=True)],
        )
        self._counters = IndexedCollection(config.counters)

    async def initialize(self) -> None:
        """Create indexes. Existing documents are never modified."""
        with translate_errors("initialize"):
            for collection in (self._orders, self._customers, self._counters):
                await collection.ensure_indexes()

    async def close(self) -> None:
        await self.config.on_shutdown()

    async def next_order_id(self) -> int:
        with translate_errors("allocate order id"):
            return await self._counters.increment({"_id": ORDER_SEQUENCE}, "value")

    async def insert_order(self, order: Order) -> None:
        doc = OrderDocument.from_value(order).model_dump()
        with translate_errors(f"insert order {order.id}"):
            await self._orders.insert_one(doc)

    async def load_orders(self, tax_id: str | None = None) -> list[Order]:
        filter_query: dict[str, Any] = {}
        if tax_id is not None:
            filter_query["customer_tax_id"] = tax_id

        with translate_errors("load orders"):
            docs = [doc async for doc in self._orders.find(filter_query)]
            return [OrderDocument.model_validate(doc).to_value() for doc in docs]

    async def load_order_by_request(self, request_id: ULID) -> Order | None:
        with translate_errors("load order by request"):
            doc = await self._orders.find_one({"request_id": str(request_id)})
            if doc is None:
                return None
            return OrderDocument.model_validate(doc).to_value()

    async def save_customer(self, customer: Customer) -> None:
        doc = CustomerDocument.from_value(customer).model_dump()
        with translate_errors("save customer"):
            await self._customers.replace_one({"tax_id": customer.tax_id}, doc, upsert=True)

    async def load_customer(self, tax_id: str) -> Customer | None:
        with translate_errors("load customer"):
            doc = await self._customers.find_one({"tax_id": tax_id})
            if doc is None:
                return None
            return CustomerDocument.model_validate(doc).to_value()

    async def load_customers(self) -> list[Customer]:
        with translate_errors("load customers"):
            docs = [
                doc
                async for doc in self._customers.find({}, sort=[("tax_id", IndexDirection.ASC)])
            ]
            return [CustomerDocument.model_validate(doc).to_value() for doc in docs]

    async def delete_customer(self, tax_id: str) -> None:
        with translate_errors("delete customer"):
            await self._customers.delete_one({"tax_id": tax_id})
