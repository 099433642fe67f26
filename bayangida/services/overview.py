"""Dashboard overview counters."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable

from pydantic import BaseModel

from bayangida.models.account import ExtensionOfficer, OfficerStatus, UserAccount
from bayangida.models.driver import Driver
from bayangida.models.farmer import Farmer
from bayangida.models.order import Order, OrderStatus, utcnow
from bayangida.models.payout import PayoutRequest, PayoutStatus
from bayangida.models.produce import ProduceListing, ProduceStatus
from bayangida.state.store import DocumentStore

REVENUE_WINDOW = timedelta(days=30)


class DashboardStats(BaseModel):
    """Headline numbers on the dashboard landing page."""

    total_users: int
    total_farmers: int
    total_drivers: int
    total_consumers: int
    active_officers: int
    pending_orders: int
    pending_produce: int
    pending_payouts: int
    monthly_revenue: Decimal


class DashboardOverview:
    """Counts read from the store's indexes."""

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.clock = clock

    async def monthly_revenue(self) -> Decimal:
        """Order value created in the last 30 days, cancelled orders excluded."""
        since = self.clock() - REVENUE_WINDOW
        return sum(
            (
                order.total_amount
                for order in await self.store.list_orders()
                if order.created_at >= since and order.status != OrderStatus.CANCELLED
            ),
            Decimal("0"),
        )

    async def stats(self) -> DashboardStats:
        """Current counters."""
        farmers = await self.store.count_documents(Farmer)
        drivers = await self.store.count_documents(Driver)
        consumers = await self.store.count_documents(UserAccount)

        return DashboardStats(
            total_users=farmers + drivers + consumers,
            total_farmers=farmers,
            total_drivers=drivers,
            total_consumers=consumers,
            active_officers=await self.store.count_documents(
                ExtensionOfficer, OfficerStatus.ACTIVE
            ),
            pending_orders=await self.store.count_documents(Order, OrderStatus.PENDING),
            pending_produce=await self.store.count_documents(
                ProduceListing, ProduceStatus.PENDING
            ),
            pending_payouts=await self.store.count_documents(
                PayoutRequest, PayoutStatus.PENDING
            ),
            monthly_revenue=await self.monthly_revenue(),
        )
