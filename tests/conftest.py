"""Central test fixtures."""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from comanda.application import (
    CheckoutService,
    CustomerAggregator,
    OrderLedger,
    QueryFacade,
    StatisticsEngine,
)
from tests.fixtures import FlakyGateway


@pytest.fixture
def gateway() -> FlakyGateway:
    """Create an in-memory gateway that can be told to fail."""
    return FlakyGateway()


@pytest.fixture
def aggregator(gateway: FlakyGateway) -> CustomerAggregator:
    return CustomerAggregator(gateway)


@pytest.fixture
def ledger(gateway: FlakyGateway, aggregator: CustomerAggregator) -> OrderLedger:
    return OrderLedger(gateway, aggregator)


@pytest.fixture
def statistics_engine(gateway: FlakyGateway) -> StatisticsEngine:
    return StatisticsEngine(gateway)


@pytest_asyncio.fixture
async def facade(gateway: FlakyGateway) -> AsyncIterator[QueryFacade]:
    """Create an initialized facade over the flaky gateway."""
    async with QueryFacade(gateway) as facade:
        yield facade


@pytest.fixture
def checkout(facade: QueryFacade) -> CheckoutService:
    return CheckoutService(facade)
