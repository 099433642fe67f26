"""Data models for the order operations service."""

from bayangida.models.account import (
    AccountStatus,
    ExtensionOfficer,
    OfficerStatus,
    UserAccount,
)
from bayangida.models.driver import (
    ApplicationStatus,
    Driver,
    DriverSummary,
    Vehicle,
    VerificationStatus,
)
from bayangida.models.farmer import Farmer
from bayangida.models.notification import AssignmentMessage, Notification
from bayangida.models.order import (
    DeliveryStatus,
    Order,
    OrderItem,
    OrderStatus,
    Party,
    PaymentStatus,
)
from bayangida.models.payout import (
    BankAccount,
    Earnings,
    PayoutRequest,
    PayoutStatus,
    RequesterType,
)
from bayangida.models.produce import ProduceListing, ProduceStatus, QualityGrade

__all__ = [
    # Account
    "UserAccount",
    "AccountStatus",
    "ExtensionOfficer",
    "OfficerStatus",
    # Driver
    "Driver",
    "DriverSummary",
    "Vehicle",
    "ApplicationStatus",
    "VerificationStatus",
    # Farmer
    "Farmer",
    # Notification
    "Notification",
    "AssignmentMessage",
    # Order
    "Order",
    "OrderItem",
    "OrderStatus",
    "DeliveryStatus",
    "PaymentStatus",
    "Party",
    # Payout
    "PayoutRequest",
    "PayoutStatus",
    "RequesterType",
    "BankAccount",
    "Earnings",
    # Produce
    "ProduceListing",
    "ProduceStatus",
    "QualityGrade",
]
