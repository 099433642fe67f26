"""Driver models."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, EmailStr, Field

from bayangida.models.order import utcnow


class ApplicationStatus(str, Enum):
    """Registration review states."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class VerificationStatus(str, Enum):
    """Document verification states."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class Vehicle(BaseModel):
    """Vehicle a driver delivers with."""

    type: str = "motorcycle"
    model: str | None = None
    plate_number: str | None = None


class Driver(BaseModel):
    """Courier profile."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    email: EmailStr | None = None
    phone: str | None = None
    license_number: str | None = None
    vehicle: Vehicle = Field(default_factory=Vehicle)
    address: str | None = None

    # Cached hint only; active orders are the ground truth.
    is_available: bool = False
    rating: float = Field(default=0.0, ge=0, le=5)
    completed_deliveries: int = Field(default=0, ge=0)

    application_status: ApplicationStatus = ApplicationStatus.PENDING
    verification_status: VerificationStatus = VerificationStatus.PENDING

    created_at: datetime = Field(default_factory=utcnow)
    version: int = Field(default=0, ge=0)

    def summary(self) -> "DriverSummary":
        """Condensed view shown when picking a driver."""
        return DriverSummary(
            id=self.id,
            name=self.name,
            vehicle_type=self.vehicle.type,
            plate_number=self.vehicle.plate_number,
            rating=self.rating,
            completed_deliveries=self.completed_deliveries,
            phone=self.phone,
            email=self.email,
            license_number=self.license_number,
        )

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on contact and plate fields."""
        term = term.lower()
        return any(
            term in (value or "").lower()
            for value in (self.name, self.email, self.phone, self.vehicle.plate_number)
        )


class DriverSummary(BaseModel):
    """Driver as listed for assignment."""

    id: str
    name: str
    vehicle_type: str
    plate_number: str | None = None
    rating: float
    completed_deliveries: int
    phone: str | None = None
    email: str | None = None
    license_number: str | None = None
