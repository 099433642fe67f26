"""Farmer registration review."""

from datetime import datetime
from typing import Any

from bayangida import errors
from bayangida.models.driver import ApplicationStatus, VerificationStatus
from bayangida.models.farmer import Farmer
from bayangida.services.base import StatusWorkflow, parse_choice

_VERIFICATION_FOR_DECISION = {
    ApplicationStatus.APPROVED: VerificationStatus.VERIFIED,
    ApplicationStatus.REJECTED: VerificationStatus.REJECTED,
}


class FarmerRegistry(StatusWorkflow[Farmer]):
    """Farmer listing and verification."""

    model = Farmer
    status_type = ApplicationStatus
    subject = "farmer registration"
    TRANSITIONS = {
        ApplicationStatus.PENDING: frozenset(_VERIFICATION_FOR_DECISION),
    }

    def extra_patch(self, record: Farmer, target: Any, now: datetime) -> dict[str, Any]:
        return {"verification_status": _VERIFICATION_FOR_DECISION[target]}

    async def list_farmers(
        self,
        status: ApplicationStatus | str | None = None,
        search: str | None = None,
    ) -> list[Farmer]:
        """Farmers, newest registration first."""
        return await self.list_records(status, search)

    async def get_farmer(self, farmer_id: str) -> Farmer:
        """Fetch one farmer."""
        return await self.get_record(farmer_id)

    async def decide_registration(
        self,
        farmer_id: str,
        decision: ApplicationStatus | str,
    ) -> Farmer:
        """Approve or reject a pending registration and set its verification."""
        decision = parse_choice(ApplicationStatus, decision, "decision")
        if decision not in _VERIFICATION_FOR_DECISION:
            raise errors.ValidationError(
                "Decision must be 'approved' or 'rejected'", field="decision"
            )
        return await self.change_status(farmer_id, decision)
