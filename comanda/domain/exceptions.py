"""Exceptions raised by the order ledger."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .order import Order


class ComandaError(Exception):
    """Base class for every error raised by comanda."""

    pass


class ValidationError(ComandaError, ValueError):
    """Raised when an order request is malformed.

    Nothing is persisted when this is raised. Callers are expected to
    validate input before submitting it, but the ledger re-checks and
    refuses to record an invalid order.
    """

    pass


class PersistenceError(ComandaError):
    """Raised when the underlying store is unavailable or rejects a write.

    When raised while appending an order, the order was not recorded and
    no customer aggregate was touched.
    """

    pass


class AggregationError(ComandaError):
    """Raised when an order was recorded but its customer aggregate was not.

    The order is durably stored and remains the source of truth. Only the
    derived customer record is stale; running
    :meth:`~comanda.application.CustomerAggregator.rebuild` repairs it.

    Attributes:
        order: The order that was successfully recorded.
    """

    def __init__(self, order: "Order", message: str | None = None):
        super().__init__(
            message or f"Order {order.id} was recorded but its customer aggregate is stale"
        )
        self.order = order


class NotInitializedError(ComandaError):
    """Raised when the ledger is used before ``initialize()`` was called."""

    pass


class UnknownProductError(ComandaError, KeyError):
    """Raised when a product id is not part of the catalog."""

    pass
