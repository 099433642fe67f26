"""Payout request models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from bayangida.models.order import utcnow


class PayoutStatus(str, Enum):
    """Payout request states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PROCESSED = "processed"


class RequesterType(str, Enum):
    """Who asked to be paid."""

    FARMER = "farmer"
    DRIVER = "driver"


class Earnings(BaseModel):
    """Earnings the requested amount is drawn from."""

    total_sales: Decimal | None = None
    total_deliveries: int | None = None
    commission: Decimal = Decimal("0")
    period: str | None = None


class BankAccount(BaseModel):
    """Destination account for a payout."""

    bank_name: str
    account_number: str
    account_name: str


class PayoutRequest(BaseModel):
    """Request by a farmer or driver to withdraw earnings."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    requester_id: str
    requester_name: str
    requester_type: RequesterType
    requester_email: str | None = None

    amount: Decimal = Field(gt=0)
    bank: BankAccount
    reason: str | None = None
    earnings: Earnings = Field(default_factory=Earnings)
    documents: list[str] = Field(default_factory=list)

    status: PayoutStatus = PayoutStatus.PENDING
    decided_at: datetime | None = None
    processed_at: datetime | None = None

    created_at: datetime = Field(default_factory=utcnow)
    version: int = Field(default=0, ge=0)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on requester, bank and reason."""
        term = term.lower()
        return any(
            term in (value or "").lower()
            for value in (self.requester_name, self.requester_email, self.bank.bank_name, self.reason)
        )
