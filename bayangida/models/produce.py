"""Produce listing models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from bayangida.models.order import utcnow


class ProduceStatus(str, Enum):
    """Listing review states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class QualityGrade(str, Enum):
    """Grade given to a listing when it is approved."""

    A = "A"
    B = "B"
    C = "C"
    NOT_GRADED = "not_graded"


class ProduceListing(BaseModel):
    """Harvest a farmer offers on the marketplace."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    category: str | None = None
    farmer_id: str | None = None
    farmer_name: str | None = None
    farmer_email: str | None = None

    quantity: Decimal = Field(ge=0)
    unit: str = "kg"
    price_per_unit: Decimal = Field(ge=0)
    total_value: Decimal = Field(default=Decimal("0"), ge=0)

    harvest_date: date | None = None
    expiry_date: date | None = None
    location: str | None = None
    description: str | None = None
    images: list[str] = Field(default_factory=list)

    status: ProduceStatus = ProduceStatus.PENDING
    quality_grade: QualityGrade = QualityGrade.NOT_GRADED
    reviewed_at: datetime | None = None

    created_at: datetime = Field(default_factory=utcnow)
    version: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def compute_total_value(self) -> "ProduceListing":
        self.total_value = self.quantity * self.price_per_unit
        return self

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name, category, farmer and location."""
        term = term.lower()
        return any(
            term in (value or "").lower()
            for value in (self.name, self.category, self.farmer_name, self.location)
        )
