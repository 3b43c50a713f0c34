import asyncio
import logging

from ..domain import Customer, Order, derive_customers
from .storage import PersistenceGateway

LOGGER = logging.getLogger(__name__)


class CustomerAggregator:
    """Maintains one spending summary per customer tax id.

    The customer collection is derived from the order collection and must
    never disagree with what :func:`~comanda.domain.derive_customers` would
    produce from the recorded orders. :meth:`absorb` keeps it in step one
    order at a time; :meth:`rebuild` recomputes it from scratch whenever the
    two may have drifted apart (for example after an aggregation failure).
    """

    __slots__ = ("gateway", "_rebuild_lock")

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway
        self._rebuild_lock = asyncio.Lock()

    async def absorb(self, order: Order) -> Customer:
        """Fold a newly recorded order into its customer's aggregate.

        Raises:
            PersistenceError: If the customer could not be read or written.
                The order itself is never touched.
        """
        existing = await self.gateway.load_customer(order.customer_tax_id)
        customer = existing.absorb(order) if existing else Customer.from_order(order)
        await self.gateway.save_customer(customer)
        return customer

    async def rebuild(self) -> list[Customer]:
        """Recompute every customer aggregate from the recorded orders.

        Derived customers are written over the stored ones and customers
        with no backing orders are removed. Running it twice in a row
        yields the same state as running it once. Concurrent calls are
        serialized; reads may proceed while a rebuild is running.

        Rebuilds are not serialized with :meth:`OrderLedger.record_order`.
        A rebuild that overlaps a confirm can write back an aggregate
        computed before that order was absorbed, so run it between
        confirms (or run it again afterwards).

        Returns:
            The rebuilt customers, ordered by tax id.
        """
        async with self._rebuild_lock:
            orders = await self.gateway.load_orders()
            derived = derive_customers(orders)

            for customer in derived.values():
                await self.gateway.save_customer(customer)

            orphans = [
                customer.tax_id
                for customer in await self.gateway.load_customers()
                if customer.tax_id not in derived
            ]
            for tax_id in orphans:
                await self.gateway.delete_customer(tax_id)

            LOGGER.info(
                "Rebuilt customer aggregates",
                extra={
                    "order_count": len(orders),
                    "customer_count": len(derived),
                    "removed_count": len(orphans),
                },
            )
            return sorted(derived.values(), key=lambda c: c.tax_id)

    async def list_all(self) -> list[Customer]:
        """Load every customer, ordered by tax id."""
        customers = await self.gateway.load_customers()
        return sorted(customers, key=lambda c: c.tax_id)
