"""Payout request handling."""

from datetime import datetime
from typing import Any

from bayangida.models.payout import PayoutRequest, PayoutStatus
from bayangida.services.base import StatusWorkflow


class PayoutDesk(StatusWorkflow[PayoutRequest]):
    """
    Withdrawal requests from farmers and drivers.

    A request is approved or rejected while pending; only an approved
    request can be marked processed once the transfer is made.
    """

    model = PayoutRequest
    status_type = PayoutStatus
    subject = "payout request"
    TRANSITIONS = {
        PayoutStatus.PENDING: frozenset({PayoutStatus.APPROVED, PayoutStatus.REJECTED}),
        PayoutStatus.APPROVED: frozenset({PayoutStatus.PROCESSED}),
    }

    # Default queue: requests that still need an operator.
    OPEN = (PayoutStatus.PENDING, PayoutStatus.APPROVED)

    def extra_patch(self, record: PayoutRequest, target: Any, now: datetime) -> dict[str, Any]:
        if target == PayoutStatus.PROCESSED:
            return {"processed_at": now}
        return {"decided_at": now}

    async def list_payouts(
        self,
        status: PayoutStatus | str | None = None,
        search: str | None = None,
    ) -> list[PayoutRequest]:
        """Payout requests, newest first."""
        return await self.list_records(status, search)

    async def list_open_payouts(self, search: str | None = None) -> list[PayoutRequest]:
        """Pending and approved requests, newest first."""
        payouts = []
        for status in self.OPEN:
            payouts.extend(await self.list_records(status, search))
        return sorted(payouts, key=lambda p: (p.created_at, p.id), reverse=True)

    async def get_payout(self, payout_id: str) -> PayoutRequest:
        """Fetch one payout request."""
        return await self.get_record(payout_id)

    async def update_payout_status(
        self,
        payout_id: str,
        status: PayoutStatus | str,
    ) -> PayoutRequest:
        """Approve, reject or process a payout request."""
        return await self.change_status(payout_id, status)
