"""Document store for the marketplace collections on Redis.

Documents are JSON strings keyed by id. Secondary indexes are Redis sets
written in the same MULTI block as the document they describe, so a
reader never sees a document whose indexes disagree with it.

Every write bumps the document's ``version``. Updates can name the
version they were computed from; the write is rejected when it no longer
matches, and ``WATCH`` rejects it when the key changed between read and
commit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, TypeVar

from pydantic import BaseModel
from redis.asyncio.client import Pipeline
from redis.exceptions import WatchError

from bayangida import errors
from bayangida.models.account import ExtensionOfficer, UserAccount
from bayangida.models.driver import Driver
from bayangida.models.farmer import Farmer
from bayangida.models.notification import Notification
from bayangida.models.order import Order, OrderStatus
from bayangida.models.payout import PayoutRequest
from bayangida.models.produce import ProduceListing
from bayangida.state.manager import StateManager
from bayangida.utils.logging import get_logger

logger = get_logger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)

_COLLECTIONS: dict[type, str] = {
    Order: "orders",
    Driver: "drivers",
    Farmer: "farmers",
    ProduceListing: "produce",
    PayoutRequest: "payouts",
    UserAccount: "users",
    ExtensionOfficer: "extension_officers",
}
_KINDS: dict[type, str] = {
    Order: "order",
    Driver: "driver",
    Farmer: "farmer",
    ProduceListing: "produce listing",
    PayoutRequest: "payout request",
    UserAccount: "user",
    ExtensionOfficer: "extension officer",
}

# Review collections keep one index set per value of their ``status`` field.
STATUS_INDEXED = (Farmer, ProduceListing, PayoutRequest, UserAccount, ExtensionOfficer)


@dataclass
class PendingWrite:
    """A patch to apply to one stored document."""

    model: type[BaseModel]
    document_id: str
    patch: dict[str, Any] = field(default_factory=dict)
    expected_version: int | None = None


def _sorted(documents: Iterable[DocumentT]) -> list[DocumentT]:
    """Stable, total order: oldest first, id breaks ties."""
    return sorted(documents, key=lambda doc: (doc.created_at, doc.id))


def _apply(document: DocumentT, patch: dict[str, Any]) -> DocumentT:
    """Validate a patched copy of a document with its version bumped."""
    data = document.model_dump()
    data.update(patch)
    data["version"] = document.version + 1
    return type(document).model_validate(data)


class DocumentStore:
    """Data access for the order workflow."""

    def __init__(self, state: StateManager):
        self.state = state

    # Keys

    def _document_key(self, model: type, document_id: str) -> str:
        return self.state.key(_COLLECTIONS[model], document_id)

    def _notification_key(self, notification_id: str) -> str:
        return self.state.key("notifications", notification_id)

    def _index_key(self, *parts: str) -> str:
        return self.state.key("index", *parts)

    # Index maintenance, queued on a pipeline in MULTI mode

    def _index_order(self, pipe: Pipeline, before: Order | None, after: Order) -> None:
        if before is None:
            pipe.sadd(self._index_key("orders"), after.id)
        if before is None or before.status != after.status:
            if before is not None:
                pipe.srem(self._index_key("orders", "status", before.status.value), after.id)
            pipe.sadd(self._index_key("orders", "status", after.status.value), after.id)
        if before is not None and before.driver_id and before.driver_id != after.driver_id:
            pipe.srem(self._index_key("orders", "driver", before.driver_id), after.id)
        if after.driver_id and (before is None or before.driver_id != after.driver_id):
            pipe.sadd(self._index_key("orders", "driver", after.driver_id), after.id)

    def _index_driver(self, pipe: Pipeline, before: Driver | None, after: Driver) -> None:
        if before is None:
            pipe.sadd(self._index_key("drivers"), after.id)
        if before is None or before.is_available != after.is_available:
            if after.is_available:
                pipe.sadd(self._index_key("drivers", "available"), after.id)
            else:
                pipe.srem(self._index_key("drivers", "available"), after.id)

    def _index_status(self, pipe: Pipeline, before: Any, after: Any) -> None:
        collection = _COLLECTIONS[type(after)]
        if before is None:
            pipe.sadd(self._index_key(collection), after.id)
        if before is None or before.status != after.status:
            if before is not None:
                pipe.srem(self._index_key(collection, "status", before.status.value), after.id)
            pipe.sadd(self._index_key(collection, "status", after.status.value), after.id)

    def _index(self, pipe: Pipeline, before: Any, after: Any) -> None:
        if isinstance(after, Order):
            self._index_order(pipe, before, after)
        elif isinstance(after, Driver):
            self._index_driver(pipe, before, after)
        else:
            self._index_status(pipe, before, after)

    # Loading

    def _parse(self, model: type[DocumentT], raw: Any, document_id: str) -> DocumentT:
        if raw is None:
            raise errors.NotFound(_KINDS[model], document_id)
        return model.model_validate_json(raw)

    async def _load_many(self, model: type[DocumentT], ids: Iterable[str]) -> list[DocumentT]:
        keys = [self._document_key(model, document_id) for document_id in ids]
        documents = []
        for raw in await self.state.mget(keys):
            # Index entries can outlive a manually deleted document.
            if raw is not None:
                documents.append(model.model_validate(raw))
        return _sorted(documents)

    async def _insert(self, document: BaseModel) -> None:
        model = type(document)
        key = self._document_key(model, document.id)
        try:
            async with self.state.watch(key) as pipe:
                if await pipe.exists(key):
                    raise errors.ValidationError(
                        f"{_KINDS[model].capitalize()} {document.id} already exists",
                        field="id",
                    )
                pipe.multi()
                pipe.set(key, document.model_dump_json())
                self._index(pipe, None, document)
                await pipe.execute()
        except WatchError as e:
            raise errors.ConcurrentUpdateConflict(
                f"{_KINDS[model].capitalize()} {document.id} was created concurrently",
                document_id=document.id,
            ) from e
        logger.debug("document_inserted", kind=_KINDS[model], document_id=document.id)

    # Orders

    async def insert_order(self, order: Order) -> Order:
        """Store a new order."""
        await self._insert(order)
        return order

    async def get_order(self, order_id: str) -> Order:
        """Fetch an order or raise NotFound."""
        raw = await self.state.get(self._document_key(Order, order_id))
        if raw is None:
            raise errors.NotFound("order", order_id)
        return Order.model_validate(raw)

    async def list_orders(self, status: OrderStatus | None = None) -> list[Order]:
        """All orders, or those in one status."""
        if status is None:
            ids = await self.state.smembers(self._index_key("orders"))
        else:
            ids = await self.state.smembers(self._index_key("orders", "status", status.value))
        return [
            order for order in await self._load_many(Order, ids)
            if status is None or order.status == status
        ]

    async def query_orders_by_driver_and_status(
        self,
        driver_id: str,
        statuses: Iterable[OrderStatus],
    ) -> list[Order]:
        """Orders carried by a driver whose status is in ``statuses``."""
        wanted = set(statuses)
        ids = await self.state.smembers(self._index_key("orders", "driver", driver_id))
        return [
            order for order in await self._load_many(Order, ids)
            if order.driver_id == driver_id and order.status in wanted
        ]

    async def conditional_update_order(
        self,
        order_id: str,
        expected_version: int,
        patch: dict[str, Any],
    ) -> Order:
        """Apply a patch only if the order is still at ``expected_version``."""
        (order,) = await self.commit(PendingWrite(Order, order_id, patch, expected_version))
        return order

    # Drivers

    async def insert_driver(self, driver: Driver) -> Driver:
        """Store a new driver."""
        await self._insert(driver)
        return driver

    async def get_driver(self, driver_id: str) -> Driver:
        """Fetch a driver or raise NotFound."""
        raw = await self.state.get(self._document_key(Driver, driver_id))
        if raw is None:
            raise errors.NotFound("driver", driver_id)
        return Driver.model_validate(raw)

    async def list_drivers(self) -> list[Driver]:
        """All drivers."""
        ids = await self.state.smembers(self._index_key("drivers"))
        return await self._load_many(Driver, ids)

    async def query_drivers_by_availability(self, is_available: bool) -> list[Driver]:
        """Drivers whose availability flag equals ``is_available``."""
        available = await self.state.smembers(self._index_key("drivers", "available"))
        if is_available:
            ids = available
        else:
            ids = await self.state.smembers(self._index_key("drivers")) - available
        return [
            driver for driver in await self._load_many(Driver, ids)
            if driver.is_available == is_available
        ]

    async def update_driver(
        self,
        driver_id: str,
        patch: dict[str, Any],
        expected_version: int | None = None,
    ) -> Driver:
        """Apply a patch to a driver, optionally guarded by version."""
        (driver,) = await self.commit(PendingWrite(Driver, driver_id, patch, expected_version))
        return driver

    # Multi-document writes

    async def commit_order_and_driver(
        self,
        order_id: str,
        order_version: int,
        order_patch: dict[str, Any],
        driver_id: str,
        driver_version: int,
        driver_patch: dict[str, Any],
    ) -> tuple[Order, Driver]:
        """Update an order and a driver together or not at all."""
        order, driver = await self.commit(
            PendingWrite(Order, order_id, order_patch, order_version),
            PendingWrite(Driver, driver_id, driver_patch, driver_version),
        )
        return order, driver

    async def commit(self, *writes: PendingWrite) -> list[Any]:
        """Apply several patches in one optimistic transaction.

        Raises NotFound if a document is missing and
        ConcurrentUpdateConflict if a version check fails or a watched key
        changes before EXEC. Nothing is written in either case.
        """
        keys = [self._document_key(write.model, write.document_id) for write in writes]
        try:
            async with self.state.watch(*keys) as pipe:
                changes = []
                for write, key in zip(writes, keys):
                    current = self._parse(write.model, await pipe.get(key), write.document_id)
                    if write.expected_version is not None and current.version != write.expected_version:
                        raise errors.ConcurrentUpdateConflict(
                            f"{_KINDS[write.model].capitalize()} {write.document_id} is at "
                            f"version {current.version}, expected {write.expected_version}",
                            document_id=write.document_id,
                        )
                    changes.append((key, current, _apply(current, write.patch)))

                pipe.multi()
                for key, before, after in changes:
                    pipe.set(key, after.model_dump_json())
                    self._index(pipe, before, after)
                await pipe.execute()
        except WatchError as e:
            ids = ", ".join(write.document_id for write in writes)
            raise errors.ConcurrentUpdateConflict(
                f"Concurrent modification of {ids}",
                document_id=writes[0].document_id,
            ) from e

        logger.debug(
            "documents_committed",
            documents=[f"{_KINDS[w.model]}:{w.document_id}" for w in writes],
        )
        return [after for _, _, after in changes]

    # Review collections: farmers, produce, payouts, users, extension officers

    async def insert_document(self, document: DocumentT) -> DocumentT:
        """Store a new document in its model's collection."""
        await self._insert(document)
        return document

    async def get_document(self, model: type[DocumentT], document_id: str) -> DocumentT:
        """Fetch a document or raise NotFound."""
        raw = await self.state.get(self._document_key(model, document_id))
        if raw is None:
            raise errors.NotFound(_KINDS[model], document_id)
        return model.model_validate(raw)

    async def list_documents(
        self,
        model: type[DocumentT],
        status: Enum | None = None,
    ) -> list[DocumentT]:
        """All documents of a collection, or those in one status."""
        collection = _COLLECTIONS[model]
        if status is None:
            ids = await self.state.smembers(self._index_key(collection))
        else:
            ids = await self.state.smembers(self._index_key(collection, "status", status.value))
        return [
            document for document in await self._load_many(model, ids)
            if status is None or document.status == status
        ]

    async def count_documents(self, model: type[BaseModel], status: Enum | None = None) -> int:
        """Size of a collection or of one of its status indexes."""
        collection = _COLLECTIONS[model]
        if status is None:
            return await self.state.scard(self._index_key(collection))
        return await self.state.scard(self._index_key(collection, "status", status.value))

    async def update_document(
        self,
        model: type[DocumentT],
        document_id: str,
        patch: dict[str, Any],
        expected_version: int | None = None,
    ) -> DocumentT:
        """Apply a patch to one document, optionally guarded by version."""
        (document,) = await self.commit(PendingWrite(model, document_id, patch, expected_version))
        return document

    async def delete_document(
        self,
        model: type[BaseModel],
        document_id: str,
        expected_version: int | None = None,
    ) -> None:
        """Remove a status-indexed document and its index entries."""
        if model not in STATUS_INDEXED:
            raise errors.ValidationError(f"{_KINDS[model].capitalize()} records cannot be deleted")

        collection = _COLLECTIONS[model]
        key = self._document_key(model, document_id)
        try:
            async with self.state.watch(key) as pipe:
                current = self._parse(model, await pipe.get(key), document_id)
                if expected_version is not None and current.version != expected_version:
                    raise errors.ConcurrentUpdateConflict(
                        f"{_KINDS[model].capitalize()} {document_id} is at "
                        f"version {current.version}, expected {expected_version}",
                        document_id=document_id,
                    )
                pipe.multi()
                pipe.delete(key)
                pipe.srem(self._index_key(collection), document_id)
                pipe.srem(self._index_key(collection, "status", current.status.value), document_id)
                await pipe.execute()
        except WatchError as e:
            raise errors.ConcurrentUpdateConflict(
                f"Concurrent modification of {document_id}", document_id=document_id
            ) from e
        logger.debug("document_deleted", kind=_KINDS[model], document_id=document_id)

    # Notifications

    async def insert_notification(self, notification: Notification) -> str:
        """Store a notification and return its id."""
        async with self.state.transaction() as pipe:
            pipe.set(self._notification_key(notification.id), notification.model_dump_json())
            pipe.sadd(self._index_key("notifications", "driver", notification.driver_id), notification.id)
            await pipe.execute()
        return notification.id

    async def list_notifications(self, driver_id: str) -> list[Notification]:
        """Notifications addressed to a driver, oldest first."""
        ids = await self.state.smembers(self._index_key("notifications", "driver", driver_id))
        raw_values = await self.state.mget([self._notification_key(i) for i in ids])
        notifications = [Notification.model_validate(raw) for raw in raw_values if raw is not None]
        return sorted(notifications, key=lambda n: (n.created_at, n.id))
