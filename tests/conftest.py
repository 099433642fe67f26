"""Pytest configuration and fixtures."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer

from bayangida.models.account import ExtensionOfficer, UserAccount
from bayangida.models.driver import ApplicationStatus, Driver, Vehicle, VerificationStatus
from bayangida.models.farmer import Farmer
from bayangida.models.order import Order, OrderItem, OrderStatus, Party, PaymentStatus
from bayangida.models.payout import BankAccount, PayoutRequest, RequesterType
from bayangida.models.produce import ProduceListing
from bayangida.services import (
    DashboardOverview,
    DriverRegistry,
    FarmerRegistry,
    OfficerRoster,
    OrderBoard,
    OrderLifecycleManager,
    PayoutDesk,
    ProduceReview,
    UserDirectory,
)
from bayangida.state.manager import StateManager
from bayangida.state.store import DocumentStore

NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def state_manager() -> AsyncGenerator[StateManager, None]:
    """State manager backed by an in-process fake Redis server."""
    manager = StateManager(redis_client=FakeAsyncRedis(server=FakeServer(), decode_responses=True))
    yield manager
    await manager.disconnect()


@pytest.fixture
def store(state_manager: StateManager) -> DocumentStore:
    """Document store over the fake server."""
    return DocumentStore(state_manager)


@pytest.fixture
def lifecycle(store: DocumentStore) -> OrderLifecycleManager:
    """Lifecycle manager with a frozen clock."""
    return OrderLifecycleManager(store, clock=lambda: NOW)


@pytest.fixture
def board(store: DocumentStore) -> OrderBoard:
    return OrderBoard(store)


@pytest.fixture
def registry(store: DocumentStore) -> DriverRegistry:
    return DriverRegistry(store)


@pytest.fixture
def farmers(store: DocumentStore) -> FarmerRegistry:
    return FarmerRegistry(store, clock=lambda: NOW)


@pytest.fixture
def produce_review(store: DocumentStore) -> ProduceReview:
    return ProduceReview(store, clock=lambda: NOW)


@pytest.fixture
def payout_desk(store: DocumentStore) -> PayoutDesk:
    return PayoutDesk(store, clock=lambda: NOW)


@pytest.fixture
def users(store: DocumentStore) -> UserDirectory:
    return UserDirectory(store, clock=lambda: NOW)


@pytest.fixture
def officers(store: DocumentStore) -> OfficerRoster:
    return OfficerRoster(store, clock=lambda: NOW)


@pytest.fixture
def overview(store: DocumentStore) -> DashboardOverview:
    return DashboardOverview(store, clock=lambda: NOW)


# Sample data fixtures


def build_order(order_id: str = "O1", **overrides) -> Order:
    """A paid, pending order of tomatoes and onions."""
    data = {
        "id": order_id,
        "buyer": Party(id="B1", name="John Doe", email="john@example.com"),
        "seller": Party(id="S1", name="Aminu Hassan"),
        "items": [
            OrderItem(product_id="P1", name="Fresh Tomatoes", quantity=10, unit_price=Decimal("2000")),
            OrderItem(product_id="P2", name="Onions", quantity=5, unit_price=Decimal("1500")),
        ],
        "delivery_fee": Decimal("1500"),
        "delivery_address": "22 Allen Avenue, Ikeja, Lagos",
        "payment_status": PaymentStatus.PAID,
        "created_at": NOW,
    }
    data.update(overrides)
    return Order(**data)


def build_driver(driver_id: str = "D1", **overrides) -> Driver:
    """An approved, available driver."""
    data = {
        "id": driver_id,
        "name": f"Driver {driver_id}",
        "phone": "+2348031234567",
        "license_number": f"LIC-{driver_id}",
        "vehicle": Vehicle(type="van", plate_number=f"KAN-{driver_id}"),
        "is_available": True,
        "rating": 4.5,
        "completed_deliveries": 10,
        "application_status": ApplicationStatus.APPROVED,
        "verification_status": VerificationStatus.VERIFIED,
        "created_at": NOW,
    }
    data.update(overrides)
    return Driver(**data)


@pytest.fixture
def make_order(store: DocumentStore) -> Callable[..., Awaitable[Order]]:
    """Insert an order built from ``build_order``."""

    async def _make(order_id: str = "O1", **overrides) -> Order:
        return await store.insert_order(build_order(order_id, **overrides))

    return _make


@pytest.fixture
def make_driver(store: DocumentStore) -> Callable[..., Awaitable[Driver]]:
    """Insert a driver built from ``build_driver``."""

    async def _make(driver_id: str = "D1", **overrides) -> Driver:
        return await store.insert_driver(build_driver(driver_id, **overrides))

    return _make


@pytest_asyncio.fixture
async def pending_order(make_order) -> Order:
    """Order O1, pending and paid, no driver."""
    return await make_order("O1")


@pytest_asyncio.fixture
async def available_driver(make_driver) -> Driver:
    """Driver D1, available with ten completed deliveries."""
    return await make_driver("D1")


@pytest_asyncio.fixture
async def busy_driver(make_driver, make_order) -> Driver:
    """Driver D9 flagged available but already carrying a processing order."""
    driver = await make_driver("D9")
    await make_order(
        "O9",
        status=OrderStatus.PROCESSING,
        driver_id=driver.id,
        driver_name=driver.name,
        assigned_at=NOW,
    )
    return driver


def build_farmer(farmer_id: str = "F1", **overrides) -> Farmer:
    """A farmer awaiting verification."""
    data = {
        "id": farmer_id,
        "name": f"Farmer {farmer_id}",
        "email": f"{farmer_id.lower()}@example.com",
        "farm_location": "Kaduna State",
        "crop_types": ["Maize"],
        "created_at": NOW,
    }
    data.update(overrides)
    return Farmer(**data)


def build_listing(listing_id: str = "P1", **overrides) -> ProduceListing:
    """100 kg of tomatoes at 2000 per kg, awaiting review."""
    data = {
        "id": listing_id,
        "name": "Fresh Tomatoes",
        "category": "Vegetables",
        "farmer_id": "F1",
        "farmer_name": "Fatima Abdullahi",
        "quantity": Decimal("100"),
        "price_per_unit": Decimal("2000"),
        "location": "Kano State",
        "created_at": NOW,
    }
    data.update(overrides)
    return ProduceListing(**data)


def build_payout(payout_id: str = "PAY1", **overrides) -> PayoutRequest:
    """A pending farmer payout of 89000."""
    data = {
        "id": payout_id,
        "requester_id": "F1",
        "requester_name": "Fatima Abdullahi",
        "requester_type": RequesterType.FARMER,
        "requester_email": "fatima@example.com",
        "amount": Decimal("89000"),
        "bank": BankAccount(bank_name="UBA", account_number="1122334455", account_name="Fatima Abdullahi"),
        "reason": "Rice sales earnings",
        "created_at": NOW,
    }
    data.update(overrides)
    return PayoutRequest(**data)


def build_user(user_id: str = "U1", **overrides) -> UserAccount:
    """An active buyer account."""
    data = {
        "id": user_id,
        "name": f"User {user_id}",
        "email": f"{user_id.lower()}@example.com",
        "phone": "+2348030000000",
        "created_at": NOW,
    }
    data.update(overrides)
    return UserAccount(**data)


def build_officer(officer_id: str = "E1", **overrides) -> ExtensionOfficer:
    """An active extension officer."""
    data = {
        "id": officer_id,
        "name": f"Officer {officer_id}",
        "email": f"{officer_id.lower()}@example.com",
        "location": "Kaduna State",
        "specialization": "Cereal crops",
        "created_at": NOW,
    }
    data.update(overrides)
    return ExtensionOfficer(**data)


@pytest.fixture
def insert(store: DocumentStore) -> Callable[..., Awaitable]:
    """Insert any review-collection record."""

    async def _insert(document):
        return await store.insert_document(document)

    return _insert
