"""Shared listing and status-change logic for the review collections."""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from bayangida import errors
from bayangida.models.order import utcnow
from bayangida.state.store import DocumentStore
from bayangida.utils.logging import get_logger
from bayangida.utils.tracing import trace_operation

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


def parse_choice(enum_type: type[Enum], value: Any, field: str) -> Any:
    """Coerce a raw value to ``enum_type`` or raise ValidationError."""
    try:
        return enum_type(value)
    except ValueError as e:
        raise errors.ValidationError(f"Unknown {field} '{value}'", field=field) from e


class StatusWorkflow(Generic[RecordT]):
    """
    Base class for collections an operator reviews by changing ``status``.

    Subclasses declare the model, its status enum and the allowed moves.
    Every change re-reads the record and writes it back guarded by the
    version it read, so two operators acting at once cannot both succeed.
    """

    model: ClassVar[type[BaseModel]]
    status_type: ClassVar[type[Enum]]
    subject: ClassVar[str]
    TRANSITIONS: ClassVar[dict[Any, frozenset]] = {}

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.clock = clock

    async def list_records(
        self,
        status: Any = None,
        search: str | None = None,
    ) -> list[RecordT]:
        """Records in one status (or all), newest first, optionally searched."""
        wanted = None if status is None else parse_choice(self.status_type, status, "status")
        records = await self.store.list_documents(self.model, wanted)

        term = (search or "").strip()
        if term:
            records = [record for record in records if record.matches(term)]

        return list(reversed(records))

    async def get_record(self, record_id: str) -> RecordT:
        """Fetch one record or raise NotFound."""
        return await self.store.get_document(self.model, record_id)

    def can_transition(self, current: Enum, target: Enum) -> bool:
        """Check if a status move is allowed."""
        return target in self.TRANSITIONS.get(current, frozenset())

    def extra_patch(self, record: RecordT, target: Enum, now: datetime) -> dict[str, Any]:
        """Fields written alongside the new status."""
        return {}

    async def change_status(self, record_id: str, target: Any, **extra: Any) -> RecordT:
        """
        Move a record to ``target``.

        Raises:
            ValidationError: unknown status
            NotFound: record missing
            IllegalTransition: move not allowed from the current status
            ConcurrentUpdateConflict: record changed meanwhile
        """
        target = parse_choice(self.status_type, target, "status")

        with trace_operation("change_status", subject=self.subject, record_id=record_id):
            record = await self.store.get_document(self.model, record_id)
            if not self.can_transition(record.status, target):
                raise errors.IllegalTransition(
                    record.status.value, target.value, subject=self.subject
                )

            patch = {"status": target}
            patch.update(self.extra_patch(record, target, self.clock()))
            patch.update(extra)
            updated = await self.store.update_document(
                self.model, record.id, patch, expected_version=record.version
            )

            logger.info(
                "status_changed",
                subject=self.subject,
                record_id=record.id,
                from_status=record.status.value,
                to_status=target.value,
            )
            return updated
