"""Farmer registration models."""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, EmailStr, Field

from bayangida.models.driver import ApplicationStatus, VerificationStatus
from bayangida.models.order import utcnow


class Farmer(BaseModel):
    """Farmer registered to sell produce."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    email: EmailStr | None = None
    phone: str | None = None
    farm_location: str | None = None
    farm_size: str | None = None
    crop_types: list[str] = Field(default_factory=list)

    status: ApplicationStatus = ApplicationStatus.PENDING
    verification_status: VerificationStatus = VerificationStatus.PENDING

    created_at: datetime = Field(default_factory=utcnow)
    version: int = Field(default=0, ge=0)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name, email and farm location."""
        term = term.lower()
        return any(
            term in (value or "").lower()
            for value in (self.name, self.email, self.farm_location)
        )
