import logging
from types import TracebackType
from typing import Any

from ..config import ComandaSettings
from ..domain import (
    Customer,
    NotInitializedError,
    Order,
    OrderRequest,
    StatisticsSnapshot,
)
from .aggregator import CustomerAggregator
from .ledger import OrderLedger
from .statistics import StatisticsEngine
from .storage import PersistenceGateway

LOGGER = logging.getLogger(__name__)


class QueryFacade:
    """The surface the point-of-sale screens talk to.

    A facade is an explicitly constructed component with an explicit
    lifecycle: :meth:`initialize` must be awaited before any other
    operation, and :meth:`close` releases the storage connections. The UI
    calls :meth:`initialize` unconditionally on every start, so it is
    idempotent and never loses recorded data.

    Examples:
        Explicit lifecycle:

        >>> facade = QueryFacade(PersistenceGateway.in_memory())
        >>> await facade.initialize()
        >>> order = await facade.record_order(request)
        >>> stats = await facade.statistics()
        >>> await facade.close()

        As an async context manager:

        >>> async with QueryFacade.from_settings() as facade:
        ...     orders = await facade.list_all_orders()
    """

    def __init__(self, gateway: PersistenceGateway, log_level: str = "INFO"):
        """Initialize the facade and its components.

        Args:
            gateway: Storage shared by the ledger, aggregator and statistics.
            log_level: Level at which successful writes are logged.
        """
        self.gateway = gateway
        self.aggregator = CustomerAggregator(gateway)
        self.ledger = OrderLedger(gateway, self.aggregator, level=log_level)
        self.statistics_engine = StatisticsEngine(gateway)
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: ComandaSettings | None = None) -> "QueryFacade":
        """Build a facade with the storage named in the settings.

        Args:
            settings: Settings to use. Read from the environment if omitted.
        """
        settings = settings or ComandaSettings()
        if settings.storage == "mongodb":
            from ..integrations.mongodb import MongoConfiguration, MongoPersistenceGateway

            gateway: PersistenceGateway = MongoPersistenceGateway(MongoConfiguration())
        else:
            gateway = PersistenceGateway.in_memory()
        return cls(gateway, log_level=settings.log_level)

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Prepare storage. Safe to call any number of times."""
        await self.gateway.initialize()
        if not self._initialized:
            LOGGER.info(
                "Ledger initialized", extra={"gateway": type(self.gateway).__name__}
            )
        self._initialized = True

    async def close(self) -> None:
        """Release storage connections. The facade must be re-initialized to be used again."""
        self._initialized = False
        await self.gateway.close()

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("initialize() must be awaited before using the ledger")

    # Writes

    async def record_order(self, request: OrderRequest | dict[str, Any]) -> Order:
        """Record an order. See :meth:`OrderLedger.record_order`."""
        self._ensure_initialized()
        return await self.ledger.record_order(request)

    async def rebuild_customers(self) -> list[Customer]:
        """Recompute customer aggregates from the orders. See :meth:`CustomerAggregator.rebuild`."""
        self._ensure_initialized()
        return await self.aggregator.rebuild()

    # Reads

    async def list_all_orders(self) -> list[Order]:
        self._ensure_initialized()
        return await self.ledger.list_all()

    async def list_all_customers(self) -> list[Customer]:
        self._ensure_initialized()
        return await self.aggregator.list_all()

    async def list_orders_for_customer(self, tax_id: str) -> list[Order]:
        self._ensure_initialized()
        return await self.ledger.list_by_customer(tax_id)

    async def statistics(self) -> StatisticsSnapshot:
        self._ensure_initialized()
        return await self.statistics_engine.snapshot()

    # Lifecycle hooks

    async def on_startup(self) -> None:
        await self.initialize()

    async def on_shutdown(self) -> None:
        await self.close()

    async def __aenter__(self) -> "QueryFacade":
        await self.initialize()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
