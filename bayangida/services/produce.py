"""Produce listing review."""

from datetime import datetime
from typing import Any

from bayangida import errors
from bayangida.models.produce import ProduceListing, ProduceStatus, QualityGrade
from bayangida.services.base import StatusWorkflow, parse_choice

DEFAULT_GRADE = QualityGrade.A


class ProduceReview(StatusWorkflow[ProduceListing]):
    """Listings awaiting approval before they go on sale."""

    model = ProduceListing
    status_type = ProduceStatus
    subject = "produce listing"
    TRANSITIONS = {
        ProduceStatus.PENDING: frozenset({ProduceStatus.APPROVED, ProduceStatus.REJECTED}),
    }

    def extra_patch(self, record: ProduceListing, target: Any, now: datetime) -> dict[str, Any]:
        return {"reviewed_at": now}

    async def list_listings(
        self,
        status: ProduceStatus | str | None = None,
        search: str | None = None,
    ) -> list[ProduceListing]:
        """Listings, newest submission first."""
        return await self.list_records(status, search)

    async def get_listing(self, listing_id: str) -> ProduceListing:
        """Fetch one listing."""
        return await self.get_record(listing_id)

    async def decide_listing(
        self,
        listing_id: str,
        decision: ProduceStatus | str,
        quality_grade: QualityGrade | str | None = None,
    ) -> ProduceListing:
        """
        Approve or reject a pending listing.

        Approval grades the listing, A unless another grade is given. A
        grade cannot accompany a rejection.
        """
        decision = parse_choice(ProduceStatus, decision, "decision")
        if decision == ProduceStatus.PENDING:
            raise errors.ValidationError(
                "Decision must be 'approved' or 'rejected'", field="decision"
            )

        grade = None
        if quality_grade is not None:
            grade = parse_choice(QualityGrade, quality_grade, "quality_grade")
            if grade == QualityGrade.NOT_GRADED:
                raise errors.ValidationError(
                    "Approved listings need a grade of A, B or C", field="quality_grade"
                )
            if decision == ProduceStatus.REJECTED:
                raise errors.ValidationError(
                    "Rejected listings are not graded", field="quality_grade"
                )

        if decision == ProduceStatus.APPROVED:
            return await self.change_status(
                listing_id, decision, quality_grade=grade or DEFAULT_GRADE
            )
        return await self.change_status(listing_id, decision)
