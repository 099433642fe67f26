"""Consumer accounts and extension officers."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, EmailStr, Field

from bayangida.models.order import utcnow


class AccountStatus(str, Enum):
    """Consumer account states."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class OfficerStatus(str, Enum):
    """Extension officer states."""

    ACTIVE = "active"
    SUSPENDED = "suspended"


class UserAccount(BaseModel):
    """Marketplace buyer account."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    email: EmailStr | None = None
    phone: str | None = None
    location: str | None = None
    status: AccountStatus = AccountStatus.ACTIVE

    created_at: datetime = Field(default_factory=utcnow)
    version: int = Field(default=0, ge=0)

    def matches(self, term: str) -> bool:
        """Case-insensitive match on name and email; phone matched as typed."""
        lowered = term.lower()
        return (
            lowered in (self.name or "").lower()
            or lowered in (self.email or "").lower()
            or term in (self.phone or "")
        )


class ExtensionOfficer(BaseModel):
    """Field officer supporting farmers in a region."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    email: EmailStr
    phone: str | None = None
    location: str | None = None
    specialization: str | None = None
    assigned_farmers: int = Field(default=0, ge=0)
    active_listings: int = Field(default=0, ge=0)
    status: OfficerStatus = OfficerStatus.ACTIVE
    last_active: datetime | None = None

    created_at: datetime = Field(default_factory=utcnow)
    version: int = Field(default=0, ge=0)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on contact, location and specialization."""
        term = term.lower()
        return any(
            term in (value or "").lower()
            for value in (self.name, self.email, self.location, self.specialization)
        )
