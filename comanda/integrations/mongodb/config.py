"""MongoDB configuration using pydantic-settings."""

from functools import cached_property
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.asynchronous.mongo_client import AsyncMongoClient


class MongoConfiguration(BaseSettings):
    """Configuration and factory for MongoDB resources.

    All settings can be configured via environment variables with the
    COMANDA_MONGO_ prefix. For example:
    - COMANDA_MONGO_URI=mongodb://localhost:27017
    - COMANDA_MONGO_DATABASE=cafe

    The configuration also acts as a factory, providing lazy-initialized
    properties for the MongoDB client, database, and collections.

    Attributes:
        uri: MongoDB connection URI.
        database: Database name to use.
        orders_collection: Collection name for recorded orders.
        customers_collection: Collection name for customer aggregates.
        counters_collection: Collection name for id sequences.
        server_selection_timeout_ms: How long to wait for a reachable
            server before an operation fails.

    Example:
        >>> config = MongoConfiguration(database="cafe")
        >>> orders = config.orders
        >>> await config.on_shutdown()
    """

    # Connection settings
    uri: str = "mongodb://localhost:27017"
    database: str = "comanda"
    server_selection_timeout_ms: int = Field(default=5000, ge=0)

    # Collection names
    orders_collection: str = "orders"
    customers_collection: str = "customers"
    counters_collection: str = "counters"

    model_config = {"env_prefix": "COMANDA_MONGO_"}

    @cached_property
    def client(self) -> AsyncMongoClient[dict[str, Any]]:
        """Get the MongoDB async client.

        The client is lazily created and cached for reuse. Datetimes are
        returned timezone-aware (UTC).
        """
        return AsyncMongoClient(
            self.uri,
            tz_aware=True,
            serverSelectionTimeoutMS=self.server_selection_timeout_ms,
        )

    @cached_property
    def db(self) -> AsyncDatabase[dict[str, Any]]:
        return self.client[self.database]

    @cached_property
    def orders(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.orders_collection]

    @cached_property
    def customers(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.customers_collection]

    @cached_property
    def counters(self) -> AsyncCollection[dict[str, Any]]:
        return self.db[self.counters_collection]

    async def on_startup(self) -> None:
        """No-op for MongoDB - connections are established lazily."""
        pass

    async def on_shutdown(self) -> None:
        """Close the MongoDB client if it was created.

        The client reopens its connections if it is used again.
        """
        if "client" in self.__dict__:
            await self.client.close()
