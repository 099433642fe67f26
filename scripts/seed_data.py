"""Seed demo records for every dashboard page."""

import asyncio
from decimal import Decimal

from bayangida import errors
from bayangida.models.account import ExtensionOfficer, UserAccount
from bayangida.models.driver import ApplicationStatus, Driver, Vehicle, VerificationStatus
from bayangida.models.farmer import Farmer
from bayangida.models.order import Order, OrderItem, Party, PaymentStatus
from bayangida.models.payout import BankAccount, Earnings, PayoutRequest, RequesterType
from bayangida.models.produce import ProduceListing
from bayangida.state.manager import StateManager
from bayangida.state.store import DocumentStore


async def seed_drivers(store: DocumentStore) -> None:
    """Seed approved drivers."""
    print("Seeding drivers...")

    drivers = [
        Driver(
            id="drv-musa-ibrahim",
            name="Musa Ibrahim",
            email="musa.ibrahim@example.com",
            phone="+2348031234567",
            license_number="KAN-DL-20931",
            vehicle=Vehicle(type="van", model="Toyota Hiace", plate_number="KAN-482-XA"),
            address="12 Zoo Road, Kano",
            is_available=True,
            rating=4.7,
            completed_deliveries=45,
            application_status=ApplicationStatus.APPROVED,
            verification_status=VerificationStatus.VERIFIED,
        ),
        Driver(
            id="drv-ngozi-okafor",
            name="Ngozi Okafor",
            email="ngozi.okafor@example.com",
            phone="+2348059876543",
            license_number="ABJ-DL-55120",
            vehicle=Vehicle(type="motorcycle", model="Bajaj Boxer", plate_number="ABJ-913-KP"),
            address="4 Aminu Kano Crescent, Abuja",
            is_available=True,
            rating=4.9,
            completed_deliveries=112,
            application_status=ApplicationStatus.APPROVED,
            verification_status=VerificationStatus.VERIFIED,
        ),
        Driver(
            id="drv-yusuf-bello",
            name="Yusuf Bello",
            email="yusuf.bello@example.com",
            phone="+2348024455667",
            license_number="KAD-DL-71002",
            vehicle=Vehicle(type="truck", model="Isuzu NPR", plate_number="KAD-220-TR"),
            address="9 Ahmadu Bello Way, Kaduna",
        ),
    ]

    for driver in drivers:
        try:
            await store.insert_driver(driver)
        except errors.ValidationError:
            print(f"  - Skipped {driver.name} (already seeded)")
            continue
        print(f"  ✓ Added {driver.name} (available: {driver.is_available})")

    print("✓ Drivers seeded successfully\n")


async def seed_orders(store: DocumentStore) -> None:
    """Seed paid orders awaiting a driver."""
    print("Seeding orders...")

    orders = [
        Order(
            id="ORD-001",
            buyer=Party(id="usr-john-doe", name="John Doe", email="john@example.com"),
            seller=Party(id="usr-aminu-hassan", name="Aminu Hassan"),
            items=[
                OrderItem(product_id="prd-tomato", name="Fresh Tomatoes", quantity=10, unit_price=Decimal("2000")),
                OrderItem(product_id="prd-onion", name="Onions", quantity=5, unit_price=Decimal("1500")),
            ],
            delivery_fee=Decimal("1500"),
            delivery_address="22 Allen Avenue, Ikeja, Lagos",
            payment_status=PaymentStatus.PAID,
        ),
        Order(
            id="ORD-002",
            buyer=Party(id="usr-jane-smith", name="Jane Smith", email="jane@example.com"),
            seller=Party(id="usr-fatima-abdullahi", name="Fatima Abdullahi"),
            items=[
                OrderItem(product_id="prd-rice", name="Rice", quantity=20, unit_price=Decimal("5000"), unit="bag"),
            ],
            delivery_fee=Decimal("3000"),
            delivery_address="7 Ogui Road, Enugu",
            payment_status=PaymentStatus.PAID,
        ),
    ]

    for order in orders:
        try:
            await store.insert_order(order)
        except errors.ValidationError:
            print(f"  - Skipped {order.id} (already seeded)")
            continue
        print(f"  ✓ Added {order.id} (total: ₦{order.total_amount:,})")

    print("✓ Orders seeded successfully\n")


async def seed_marketplace(store: DocumentStore) -> None:
    """Seed farmer registrations, listings, payouts, buyers and officers."""
    print("Seeding marketplace records...")

    records = [
        Farmer(
            id="frm-aminu-hassan",
            name="Aminu Hassan",
            email="aminu@example.com",
            phone="+2348012345678",
            farm_location="Kaduna State",
            farm_size="5 hectares",
            crop_types=["Maize", "Rice", "Yam"],
        ),
        Farmer(
            id="frm-fatima-abdullahi",
            name="Fatima Abdullahi",
            email="fatima@example.com",
            phone="+2348023456789",
            farm_location="Kano State",
            farm_size="3 hectares",
            crop_types=["Tomatoes", "Onions", "Pepper"],
            status=ApplicationStatus.APPROVED,
            verification_status=VerificationStatus.VERIFIED,
        ),
        ProduceListing(
            id="prd-tomato-kano",
            name="Fresh Tomatoes",
            category="Vegetables",
            farmer_id="frm-fatima-abdullahi",
            farmer_name="Fatima Abdullahi",
            farmer_email="fatima@example.com",
            quantity=Decimal("500"),
            price_per_unit=Decimal("2000"),
            location="Kano State",
        ),
        PayoutRequest(
            id="pay-fatima-jan",
            requester_id="frm-fatima-abdullahi",
            requester_name="Fatima Abdullahi",
            requester_type=RequesterType.FARMER,
            requester_email="fatima@example.com",
            amount=Decimal("89000"),
            bank=BankAccount(
                bank_name="UBA",
                account_number="1122334455",
                account_name="Fatima Abdullahi",
            ),
            reason="Tomato sales earnings",
            earnings=Earnings(
                total_sales=Decimal("120000"), commission=Decimal("89000"), period="January"
            ),
        ),
        UserAccount(
            id="usr-john-doe",
            name="John Doe",
            email="john@example.com",
            phone="+2348034567890",
            location="Lagos",
        ),
        ExtensionOfficer(
            id="ext-halima-sani",
            name="Halima Sani",
            email="halima.sani@example.com",
            location="Kaduna State",
            specialization="Cereal crops",
        ),
    ]

    for record in records:
        try:
            await store.insert_document(record)
        except errors.ValidationError:
            print(f"  - Skipped {record.id} (already seeded)")
            continue
        print(f"  ✓ Added {type(record).__name__} {record.id}")

    print("✓ Marketplace records seeded successfully\n")


async def main() -> None:
    """Run all seed functions."""
    print("\n" + "=" * 50)
    print("  Seeding Bayangida Order Data")
    print("=" * 50 + "\n")

    state_manager = StateManager()
    await state_manager.connect()
    store = DocumentStore(state_manager)

    try:
        await seed_drivers(store)
        await seed_orders(store)
        await seed_marketplace(store)
    finally:
        await state_manager.disconnect()

    print("=" * 50)
    print("  ✓ All data seeded successfully!")
    print("=" * 50 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
