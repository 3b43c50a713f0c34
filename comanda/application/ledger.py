import asyncio
import logging
from typing import Any

from ..domain import (
    AggregationError,
    Order,
    OrderRequest,
    PersistenceError,
    ValidationError,
    is_valid_tax_id,
    most_recent_first,
    normalize_tax_id,
)
from .aggregator import CustomerAggregator
from .storage import PersistenceGateway

LOGGER = logging.getLogger(__name__)


class OrderLedger:
    """The append-only record of confirmed orders.

    The ledger is the single entry point for recording an order. Recording
    is a two step sequence that is not atomic as a pair:

    1. The order is appended to storage. If this fails nothing was written
       and :class:`~comanda.domain.PersistenceError` is raised.
    2. The customer aggregate absorbs the order. If this fails the order is
       still recorded and :class:`~comanda.domain.AggregationError` is
       raised carrying it; the aggregate can be repaired with
       :meth:`CustomerAggregator.rebuild`.

    Customer names and tax ids are never logged.

    Examples:
        >>> gateway = PersistenceGateway.in_memory()
        >>> ledger = OrderLedger(gateway, CustomerAggregator(gateway))
        >>> order = await ledger.record_order({
        ...     "customer_name": "Ana",
        ...     "customer_tax_id": "111.111.111-11",
        ...     "items": [{"product_id": "1", "name": "Espresso",
        ...                "unit_price": "10.00", "quantity": 2}],
        ... })
        >>> order.total
        Decimal('20.00')
    """

    __slots__ = ("gateway", "aggregator", "level", "_write_lock")

    def __init__(
        self,
        gateway: PersistenceGateway,
        aggregator: CustomerAggregator,
        level: str = "INFO",
    ):
        """Initialize the ledger.

        Args:
            gateway: Storage the orders are appended to.
            aggregator: Customer aggregates kept in step with the ledger.
            level: Log level for successful writes (e.g. "INFO", "DEBUG").
                Case-insensitive.
        """
        self.gateway = gateway
        self.aggregator = aggregator
        self.level = getattr(logging, level.upper())
        self._write_lock = asyncio.Lock()

    async def record_order(self, request: OrderRequest | dict[str, Any]) -> Order:
        """Price, persist and aggregate an order.

        Submitting a request whose ``request_id`` was already recorded
        returns the existing order without writing anything.

        Args:
            request: The order request, or a mapping with the same fields.

        Returns:
            The recorded order.

        Raises:
            ValidationError: If the request is malformed. Nothing is stored.
            PersistenceError: If the order could not be appended. Nothing
                is stored.
            AggregationError: If the order was stored but its customer
                aggregate could not be updated.
        """
        request = OrderRequest.coerce(request)

        # The UI disables its confirm action while a write is in flight;
        # this keeps overlapping calls from interleaving anyway.
        async with self._write_lock:
            existing = await self.gateway.load_order_by_request(request.request_id)
            if existing is not None:
                LOGGER.warning(
                    "Skipping previously recorded request",
                    extra={"request_id": str(request.request_id), "order_id": existing.id},
                )
                return existing

            order = Order.create(await self.gateway.next_order_id(), request)

            try:
                await self.gateway.insert_order(order)
            except PersistenceError:
                LOGGER.error(
                    "Failed to record order",
                    extra={"request_id": str(request.request_id), "order_id": order.id},
                )
                raise

            LOGGER.log(
                self.level,
                "Recorded order",
                extra={
                    "order_id": order.id,
                    "request_id": str(order.request_id),
                    "item_count": order.item_count,
                    "total": str(order.total),
                },
            )

            # The order is durable from here on; any failure leaves only the
            # customer aggregate stale.
            try:
                await self.aggregator.absorb(order)
            except Exception as err:
                LOGGER.warning(
                    "Customer aggregate is stale after recording order",
                    extra={"order_id": order.id, "error": type(err).__name__},
                )
                raise AggregationError(order) from err

            return order

    async def list_all(self) -> list[Order]:
        """Load every order, newest first."""
        return most_recent_first(await self.gateway.load_orders())

    async def list_by_customer(self, tax_id: str) -> list[Order]:
        """Load the orders placed under a tax id, newest first.

        Raises:
            ValidationError: If ``tax_id`` is not an 11 digit tax id.
        """
        if not is_valid_tax_id(tax_id):
            raise ValidationError("tax id must contain exactly 11 digits")
        orders = await self.gateway.load_orders(normalize_tax_id(tax_id))
        return most_recent_first(orders)
