"""Tests for the Redis document store."""

import pytest

from bayangida import errors
from bayangida.models.driver import Driver
from bayangida.models.notification import Notification
from bayangida.models.order import Order, OrderStatus
from bayangida.models.payout import PayoutRequest, PayoutStatus
from bayangida.state.store import DocumentStore, PendingWrite
from conftest import NOW, build_driver, build_order, build_payout


@pytest.mark.asyncio
async def test_insert_and_get_order(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1"))

    order = await store.get_order("O1")

    assert order.id == "O1"
    assert order.version == 0
    assert order.status == OrderStatus.PENDING


@pytest.mark.asyncio
async def test_duplicate_insert_is_rejected(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1"))

    with pytest.raises(errors.ValidationError):
        await store.insert_order(build_order("O1"))


@pytest.mark.asyncio
async def test_missing_documents_raise_not_found(store: DocumentStore) -> None:
    with pytest.raises(errors.NotFound) as order_error:
        await store.get_order("nope")
    with pytest.raises(errors.NotFound) as driver_error:
        await store.get_driver("nope")

    assert order_error.value.kind == "order"
    assert driver_error.value.kind == "driver"


@pytest.mark.asyncio
async def test_conditional_update_bumps_version_and_moves_status_index(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1"))

    updated = await store.conditional_update_order("O1", 0, {"status": OrderStatus.CANCELLED})

    assert updated.version == 1
    assert [o.id for o in await store.list_orders(OrderStatus.CANCELLED)] == ["O1"]
    assert await store.list_orders(OrderStatus.PENDING) == []


@pytest.mark.asyncio
async def test_stale_version_is_rejected_without_writing(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1"))
    await store.conditional_update_order("O1", 0, {"delivery_address": "New address"})

    with pytest.raises(errors.ConcurrentUpdateConflict) as exc_info:
        await store.conditional_update_order("O1", 0, {"status": OrderStatus.CANCELLED})

    order = await store.get_order("O1")
    assert exc_info.value.retryable is True
    assert order.status == OrderStatus.PENDING
    assert order.version == 1


@pytest.mark.asyncio
async def test_query_orders_by_driver_and_status(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1", status=OrderStatus.PROCESSING, driver_id="D1"))
    await store.insert_order(build_order("O2", status=OrderStatus.COMPLETED, driver_id="D1"))
    await store.insert_order(build_order("O3", status=OrderStatus.SHIPPED, driver_id="D2"))

    active = await store.query_orders_by_driver_and_status(
        "D1", {OrderStatus.PROCESSING, OrderStatus.SHIPPED}
    )

    assert [o.id for o in active] == ["O1"]


@pytest.mark.asyncio
async def test_driver_index_follows_reassignment(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1", status=OrderStatus.PROCESSING, driver_id="D1"))

    await store.conditional_update_order("O1", 0, {"driver_id": "D2"})

    assert await store.query_orders_by_driver_and_status("D1", {OrderStatus.PROCESSING}) == []
    moved = await store.query_orders_by_driver_and_status("D2", {OrderStatus.PROCESSING})
    assert [o.id for o in moved] == ["O1"]


@pytest.mark.asyncio
async def test_availability_index_follows_updates(store: DocumentStore) -> None:
    await store.insert_driver(build_driver("D1"))
    await store.insert_driver(build_driver("D2", is_available=False))

    assert [d.id for d in await store.query_drivers_by_availability(True)] == ["D1"]
    assert [d.id for d in await store.query_drivers_by_availability(False)] == ["D2"]

    await store.update_driver("D1", {"is_available": False})

    assert await store.query_drivers_by_availability(True) == []
    assert [d.id for d in await store.query_drivers_by_availability(False)] == ["D1", "D2"]


@pytest.mark.asyncio
async def test_driver_queries_are_ordered_by_creation_then_id(store: DocumentStore) -> None:
    for driver_id in ("D3", "D1", "D2"):
        await store.insert_driver(build_driver(driver_id))

    first = [d.id for d in await store.query_drivers_by_availability(True)]
    second = [d.id for d in await store.query_drivers_by_availability(True)]

    assert first == ["D1", "D2", "D3"]
    assert first == second


@pytest.mark.asyncio
async def test_update_driver_with_stale_version(store: DocumentStore) -> None:
    await store.insert_driver(build_driver("D1"))

    with pytest.raises(errors.ConcurrentUpdateConflict):
        await store.update_driver("D1", {"rating": 1.0}, expected_version=3)

    assert (await store.get_driver("D1")).rating == 4.5


@pytest.mark.asyncio
async def test_multi_document_commit_is_all_or_nothing(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1"))
    await store.insert_driver(build_driver("D1"))
    await store.update_driver("D1", {"rating": 3.0})

    with pytest.raises(errors.ConcurrentUpdateConflict):
        await store.commit_order_and_driver(
            "O1", 0, {"status": OrderStatus.PROCESSING, "driver_id": "D1"},
            "D1", 0, {"is_available": False},
        )

    order = await store.get_order("O1")
    driver = await store.get_driver("D1")
    assert order.status == OrderStatus.PENDING
    assert order.driver_id is None
    assert driver.is_available is True


@pytest.mark.asyncio
async def test_commit_missing_document(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1"))

    with pytest.raises(errors.NotFound):
        await store.commit(
            PendingWrite(Driver, "ghost", {"is_available": True}),
        )


@pytest.mark.asyncio
async def test_notifications_are_indexed_per_driver(store: DocumentStore) -> None:
    order = build_order("O1")
    notification_id = await store.insert_notification(Notification.for_assignment(order, "D1", NOW))
    await store.insert_notification(Notification.for_assignment(order, "D2", NOW))

    notifications = await store.list_notifications("D1")

    assert [n.id for n in notifications] == [notification_id]
    assert notifications[0].order_id == "O1"


@pytest.mark.asyncio
async def test_status_indexed_update_moves_between_tabs(store: DocumentStore) -> None:
    await store.insert_document(build_payout("PAY1"))

    payout = await store.update_document(
        PayoutRequest, "PAY1", {"status": PayoutStatus.APPROVED}, expected_version=0
    )

    assert payout.version == 1
    assert await store.list_documents(PayoutRequest, PayoutStatus.PENDING) == []
    assert [p.id for p in await store.list_documents(PayoutRequest, PayoutStatus.APPROVED)] == ["PAY1"]
    assert await store.count_documents(PayoutRequest, PayoutStatus.APPROVED) == 1


@pytest.mark.asyncio
async def test_status_indexed_stale_update_is_rejected(store: DocumentStore) -> None:
    await store.insert_document(build_payout("PAY1"))
    await store.update_document(PayoutRequest, "PAY1", {"reason": "corrected"})

    with pytest.raises(errors.ConcurrentUpdateConflict):
        await store.update_document(
            PayoutRequest, "PAY1", {"status": PayoutStatus.REJECTED}, expected_version=0
        )

    payout = await store.get_document(PayoutRequest, "PAY1")
    assert payout.status == PayoutStatus.PENDING
    assert payout.reason == "corrected"


@pytest.mark.asyncio
async def test_delete_document_with_stale_version(store: DocumentStore) -> None:
    await store.insert_document(build_payout("PAY1"))
    await store.update_document(PayoutRequest, "PAY1", {"reason": "corrected"})

    with pytest.raises(errors.ConcurrentUpdateConflict):
        await store.delete_document(PayoutRequest, "PAY1", expected_version=0)

    assert await store.count_documents(PayoutRequest) == 1


@pytest.mark.asyncio
async def test_orders_cannot_be_deleted(store: DocumentStore) -> None:
    await store.insert_order(build_order("O1"))

    with pytest.raises(errors.ValidationError):
        await store.delete_document(Order, "O1")

    assert (await store.get_order("O1")).id == "O1"
