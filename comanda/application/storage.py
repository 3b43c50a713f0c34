from abc import ABC, abstractmethod

from ulid import ULID

from ..domain import Customer, Order, PersistenceError


class PersistenceGateway(ABC):
    """Durable storage for orders and customer aggregates.

    Every method is a single storage operation and is expected to be atomic
    on its own. No method spans several operations, so implementations do
    not need transactions: the ledger defines what happens when a sequence
    of calls is interrupted half-way.

    Implementations must translate their driver's errors into
    :class:`~comanda.domain.PersistenceError`.
    """

    @staticmethod
    def in_memory() -> "PersistenceGateway":
        """A gateway that keeps everything in process memory."""
        return InMemoryPersistenceGateway()

    @abstractmethod
    async def initialize(self) -> None:
        """Create storage structures if they do not exist yet.

        Must be idempotent: calling it against populated storage leaves
        every order and customer untouched.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the gateway."""
        ...

    @abstractmethod
    async def next_order_id(self) -> int:
        """Allocate the next order id.

        Ids are strictly increasing and never reused, even when the order
        they were allocated for is never stored.
        """
        ...

    @abstractmethod
    async def insert_order(self, order: Order) -> None:
        """Append an order.

        Raises:
            PersistenceError: If the order could not be stored, including
                when an order with the same id or request id exists.
        """
        ...

    @abstractmethod
    async def load_orders(self, tax_id: str | None = None) -> list[Order]:
        """Load every order, or only those placed under ``tax_id``.

        No ordering is guaranteed; callers sort.
        """
        ...

    @abstractmethod
    async def load_order_by_request(self, request_id: ULID) -> Order | None:
        """Find the order recorded for a request id, if any."""
        ...

    @abstractmethod
    async def save_customer(self, customer: Customer) -> None:
        """Insert or overwrite the customer stored under its tax id."""
        ...

    @abstractmethod
    async def load_customer(self, tax_id: str) -> Customer | None:
        ...

    @abstractmethod
    async def load_customers(self) -> list[Customer]:
        ...

    @abstractmethod
    async def delete_customer(self, tax_id: str) -> None:
        """Remove a customer record. Missing records are ignored.

        Only used when repairing aggregates that have no backing orders.
        """
        ...


class InMemoryPersistenceGateway(PersistenceGateway):
    """A gateway that stores orders and customers in memory.

    This is not intended for production use: nothing survives the process.
    It is used by the test suite and for throwaway sessions. Records are
    immutable, so they are stored and returned without copying.
    """

    def __init__(self) -> None:
        self.orders: dict[int, Order] = {}
        self.customers: dict[str, Customer] = {}
        self.last_order_id = 0

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        pass

    async def next_order_id(self) -> int:
        self.last_order_id += 1
        return self.last_order_id

    async def insert_order(self, order: Order) -> None:
        if order.id in self.orders:
            raise PersistenceError(f"Order {order.id} already exists")
        if any(o.request_id == order.request_id for o in self.orders.values()):
            raise PersistenceError(f"Request {order.request_id} was already recorded")
        self.orders[order.id] = order

    async def load_orders(self, tax_id: str | None = None) -> list[Order]:
        return [
            order
            for order in self.orders.values()
            if tax_id is None or order.customer_tax_id == tax_id
        ]

    async def load_order_by_request(self, request_id: ULID) -> Order | None:
        for order in self.orders.values():
            if order.request_id == request_id:
                return order
        return None

    async def save_customer(self, customer: Customer) -> None:
        self.customers[customer.tax_id] = customer

    async def load_customer(self, tax_id: str) -> Customer | None:
        return self.customers.get(tax_id)

    async def load_customers(self) -> list[Customer]:
        return list(self.customers.values())

    async def delete_customer(self, tax_id: str) -> None:
        self.customers.pop(tax_id, None)
