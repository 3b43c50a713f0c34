from ..domain import StatisticsSnapshot
from .storage import PersistenceGateway


class StatisticsEngine:
    """Computes global totals on demand.

    Nothing is cached or counted incrementally: every snapshot is reduced
    from the recorded orders at the time of the call, so it cannot drift
    from the ledger, even while customer aggregates are stale.
    """

    __slots__ = ("gateway",)

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def snapshot(self) -> StatisticsSnapshot:
        return StatisticsSnapshot.from_orders(await self.gateway.load_orders())
