"""Pytest fixtures for MongoDB integration tests."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from pymongo.errors import PyMongoError

from comanda.integrations.mongodb import MongoConfiguration, MongoPersistenceGateway

# Assumes a MongoDB container is running locally on port 27017
LOCAL_MONGO_URI = "mongodb://localhost:27017"


@pytest_asyncio.fixture
async def mongo_config(request: pytest.FixtureRequest) -> AsyncIterator[MongoConfiguration]:
    """Create a MongoConfiguration pointing to a fresh local database."""
    db_name = f"test_{request.node.name}"[:63]
    config = MongoConfiguration(
        uri=LOCAL_MONGO_URI, database=db_name, server_selection_timeout_ms=2000
    )
    try:
        await config.client.drop_database(config.database)
    except PyMongoError:
        await config.client.close()
        pytest.skip(f"MongoDB is not reachable at {LOCAL_MONGO_URI}")
    try:
        yield config
    finally:
        await config.client.drop_database(config.database)
        await config.client.close()


@pytest_asyncio.fixture
async def mongo_gateway(mongo_config: MongoConfiguration) -> MongoPersistenceGateway:
    gateway = MongoPersistenceGateway(mongo_config)
    await gateway.initialize()
    return gateway
