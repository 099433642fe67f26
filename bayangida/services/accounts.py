"""Consumer accounts and extension officers."""

from datetime import datetime
from typing import Any

from bayangida.models.account import AccountStatus, ExtensionOfficer, OfficerStatus, UserAccount
from bayangida.services.base import StatusWorkflow
from bayangida.utils.logging import get_logger

logger = get_logger(__name__)


class UserDirectory(StatusWorkflow[UserAccount]):
    """Buyer accounts an operator can suspend or reactivate."""

    model = UserAccount
    status_type = AccountStatus
    subject = "user account"
    TRANSITIONS = {
        AccountStatus.ACTIVE: frozenset({AccountStatus.SUSPENDED}),
        AccountStatus.INACTIVE: frozenset({AccountStatus.ACTIVE}),
        AccountStatus.SUSPENDED: frozenset({AccountStatus.ACTIVE}),
    }

    async def list_users(
        self,
        status: AccountStatus | str | None = None,
        search: str | None = None,
    ) -> list[UserAccount]:
        """Accounts, newest first."""
        return await self.list_records(status, search)

    async def get_user(self, user_id: str) -> UserAccount:
        """Fetch one account."""
        return await self.get_record(user_id)

    async def set_user_status(self, user_id: str, status: AccountStatus | str) -> UserAccount:
        """Suspend an active account or reactivate an idle or suspended one."""
        return await self.change_status(user_id, status)


class OfficerRoster(StatusWorkflow[ExtensionOfficer]):
    """Extension officers: onboarding, suspension and removal."""

    model = ExtensionOfficer
    status_type = OfficerStatus
    subject = "extension officer"
    TRANSITIONS = {
        OfficerStatus.ACTIVE: frozenset({OfficerStatus.SUSPENDED}),
        OfficerStatus.SUSPENDED: frozenset({OfficerStatus.ACTIVE}),
    }

    def extra_patch(self, record: ExtensionOfficer, target: Any, now: datetime) -> dict[str, Any]:
        return {"last_active": now}

    async def list_officers(
        self,
        status: OfficerStatus | str | None = None,
        search: str | None = None,
    ) -> list[ExtensionOfficer]:
        """Officers, newest first."""
        return await self.list_records(status, search)

    async def get_officer(self, officer_id: str) -> ExtensionOfficer:
        """Fetch one officer."""
        return await self.get_record(officer_id)

    async def add_officer(
        self,
        name: str,
        email: str,
        phone: str | None = None,
        location: str | None = None,
        specialization: str | None = None,
    ) -> ExtensionOfficer:
        """Register a new, active officer with no farmers or listings yet."""
        now = self.clock()
        officer = ExtensionOfficer(
            name=name,
            email=email,
            phone=phone,
            location=location,
            specialization=specialization,
            created_at=now,
            last_active=now,
        )
        await self.store.insert_document(officer)
        logger.info("officer_added", officer_id=officer.id, location=location)
        return officer

    async def toggle_suspension(self, officer_id: str) -> ExtensionOfficer:
        """Suspend an active officer or reactivate a suspended one."""
        officer = await self.get_record(officer_id)
        target = (
            OfficerStatus.SUSPENDED
            if officer.status == OfficerStatus.ACTIVE
            else OfficerStatus.ACTIVE
        )
        return await self.change_status(officer_id, target)

    async def remove_officer(self, officer_id: str) -> None:
        """Delete an officer record."""
        officer = await self.get_record(officer_id)
        await self.store.delete_document(
            ExtensionOfficer, officer.id, expected_version=officer.version
        )
        logger.info("officer_removed", officer_id=officer.id)
