"""Checkout policy on top of the ledger."""

import logging
from typing import Any

from pydantic import BaseModel

from ..domain import AggregationError, Order, OrderRequest
from .facade import QueryFacade

LOGGER = logging.getLogger(__name__)


class CheckoutResult(BaseModel):
    """Outcome of a successful checkout.

    Attributes:
        order: The recorded order.
        aggregates_current: False when the order was recorded but the
            customer's history could not be updated. The customer list is
            stale until the aggregates are rebuilt.
    """

    model_config = {"frozen": True}

    order: Order
    aggregates_current: bool = True


class CheckoutService:
    """Confirms orders on behalf of the point-of-sale screens.

    The recorded order is the source of truth: once it is stored the sale
    happened, so a failure to update the customer aggregate is reported
    alongside a successful result instead of as an error. Validation and
    storage failures still propagate, since nothing was recorded.
    """

    __slots__ = ("facade",)

    def __init__(self, facade: QueryFacade):
        self.facade = facade

    async def confirm(self, request: OrderRequest | dict[str, Any]) -> CheckoutResult:
        """Record an order and report whether customer aggregates kept up.

        Raises:
            ValidationError: If the request is malformed.
            PersistenceError: If the order could not be recorded.
        """
        try:
            order = await self.facade.record_order(request)
        except AggregationError as err:
            LOGGER.warning(
                "Checkout completed with stale customer aggregates",
                extra={"order_id": err.order.id},
            )
            return CheckoutResult(order=err.order, aggregates_current=False)
        return CheckoutResult(order=order)
