"""Operations exposed to the dashboard."""

from bayangida.services.accounts import OfficerRoster, UserDirectory
from bayangida.services.drivers import DriverRegistry
from bayangida.services.farmers import FarmerRegistry
from bayangida.services.lifecycle import AssignmentResult, OrderLifecycleManager
from bayangida.services.orders import OrderBoard
from bayangida.services.overview import DashboardOverview, DashboardStats
from bayangida.services.payouts import PayoutDesk
from bayangida.services.produce import ProduceReview

__all__ = [
    "OrderLifecycleManager",
    "AssignmentResult",
    "OrderBoard",
    "DriverRegistry",
    "FarmerRegistry",
    "ProduceReview",
    "PayoutDesk",
    "UserDirectory",
    "OfficerRoster",
    "DashboardOverview",
    "DashboardStats",
]
