"""Unit tests for MongoConfiguration."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from comanda.integrations.mongodb import MongoConfiguration


def test_config_with_defaults(monkeypatch: pytest.MonkeyPatch):
    """Test config creation with default values."""
    monkeypatch.delenv("COMANDA_MONGO_URI", raising=False)
    monkeypatch.delenv("COMANDA_MONGO_DATABASE", raising=False)

    config = MongoConfiguration()

    assert config.uri == "mongodb://localhost:27017"
    assert config.database == "comanda"
    assert config.server_selection_timeout_ms == 5000
    assert config.orders_collection == "orders"
    assert config.customers_collection == "customers"
    assert config.counters_collection == "counters"


def test_config_from_environment(monkeypatch: pytest.MonkeyPatch):
    """Test that settings are read with the COMANDA_MONGO_ prefix."""
    monkeypatch.setenv("COMANDA_MONGO_URI", "mongodb://db.cafe:27017")
    monkeypatch.setenv("COMANDA_MONGO_DATABASE", "cafe")
    monkeypatch.setenv("COMANDA_MONGO_ORDERS_COLLECTION", "pedidos")

    config = MongoConfiguration()

    assert config.uri == "mongodb://db.cafe:27017"
    assert config.database == "cafe"
    assert config.orders_collection == "pedidos"


def test_config_validation_timeout():
    """Test that the server selection timeout must be non-negative."""
    with pytest.raises(ValidationError):
        MongoConfiguration(server_selection_timeout_ms=-1)


@patch("comanda.integrations.mongodb.config.AsyncMongoClient")
def test_client_is_created_once(mock_async_mongo_client: MagicMock):
    """Test that the client is lazily created and reused."""
    config = MongoConfiguration(uri="mongodb://localhost:27017", server_selection_timeout_ms=100)

    assert config.client is config.client
    mock_async_mongo_client.assert_called_once_with(
        "mongodb://localhost:27017", tz_aware=True, serverSelectionTimeoutMS=100
    )


@patch("comanda.integrations.mongodb.config.AsyncMongoClient")
def test_collections_come_from_configured_database(mock_async_mongo_client: MagicMock):
    mock_client = MagicMock()
    mock_async_mongo_client.return_value = mock_client

    config = MongoConfiguration(database="cafe", customers_collection="clientes")
    customers = config.customers

    assert customers is mock_client["cafe"]["clientes"]
    mock_client.__getitem__.assert_any_call("cafe")
    mock_client.__getitem__.return_value.__getitem__.assert_any_call("clientes")


@pytest.mark.asyncio
async def test_shutdown_closes_created_client():
    mock_client = MagicMock()
    mock_client.close = AsyncMock()

    with patch("comanda.integrations.mongodb.config.AsyncMongoClient") as mock_async_mongo_client:
        mock_async_mongo_client.return_value = mock_client
        config = MongoConfiguration()

        await config.on_shutdown()
        mock_async_mongo_client.assert_not_called()

        assert config.client is mock_client
        await config.on_shutdown()

    mock_client.close.assert_awaited_once()
