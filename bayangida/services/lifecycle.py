"""Order lifecycle: driver eligibility, assignment and status changes."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from bayangida import errors
from bayangida.models.driver import DriverSummary
from bayangida.models.notification import Notification
from bayangida.models.order import Order, OrderStatus, utcnow
from bayangida.state.store import DocumentStore
from bayangida.state.workflow import OrderTransitions
from bayangida.utils.logging import WorkflowLogger
from bayangida.utils.tracing import trace_operation

RATING_RANGE = range(1, 6)


@dataclass
class AssignmentResult:
    """Outcome of a successful assignment."""

    order: Order
    notification_id: str | None = None
    notification_error: errors.NotificationDeliveryFailed | None = None

    @property
    def notified(self) -> bool:
        """Whether the driver notification was stored."""
        return self.notification_id is not None


def waybill_number(order_id: str, now: datetime) -> str:
    """Waybill of epoch millis plus an order id suffix, unique per order."""
    return f"WB-{int(now.timestamp() * 1000)}-{order_id[-6:].upper()}"


def _parse_status(value: OrderStatus | str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError as e:
        raise errors.ValidationError(f"Unknown order status '{value}'", field="status") from e


def _check_rating(name: str, value: Any) -> int:
    # bool is an int subclass; True must not count as a rating of 1.
    if isinstance(value, bool) or not isinstance(value, int) or value not in RATING_RANGE:
        raise errors.ValidationError(f"{name} must be an integer from 1 to 5", field=name)
    return value


def _check_feedback(name: str, value: Any) -> str | None:
    if value is not None and not isinstance(value, str):
        raise errors.ValidationError(f"{name} must be text", field=name)
    return value


class OrderLifecycleManager:
    """
    Stateless operations moving orders through delivery.

    Every call reads fresh documents from the store. Writes that change
    both an order and its driver go through one versioned transaction, so
    two operators can neither put two drivers on one order nor one driver
    on two orders.
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.clock = clock
        self.logger = WorkflowLogger("order_lifecycle")

    async def list_eligible_drivers(self) -> list[DriverSummary]:
        """
        Drivers who can take a new order right now.

        The availability flag is only a hint: each flagged driver is
        checked for orders still in processing or shipped, and dropped if
        any exist.

        Returns:
            Driver summaries ordered by registration time, then id
        """
        with trace_operation("list_eligible_drivers") as trace:
            candidates = await self.store.query_drivers_by_availability(True)

            eligible = []
            for driver in candidates:
                active = await self.store.query_orders_by_driver_and_status(
                    driver.id, OrderTransitions.ACTIVE
                )
                if active:
                    self.logger.logger.warning(
                        "stale_driver_availability",
                        driver_id=driver.id,
                        active_orders=[order.id for order in active],
                    )
                    continue
                eligible.append(driver.summary())

            trace.metadata.update(candidates=len(candidates), eligible=len(eligible))
            return eligible

    async def assign_driver(self, order_id: str, driver_id: str) -> AssignmentResult:
        """
        Bind a driver to a pending order and notify them.

        Args:
            order_id: Order awaiting a driver
            driver_id: Driver picked by the operator

        Returns:
            AssignmentResult with the updated order. A failed notification
            is attached to the result instead of being raised.

        Raises:
            NotFound: order or driver missing
            IllegalTransition: order is past processing or cancelled
            ConcurrentAssignmentConflict: order or driver taken meanwhile
        """
        with trace_operation("assign_driver", order_id=order_id, driver_id=driver_id):
            order = await self.store.get_order(order_id)
            if order.status == OrderStatus.PROCESSING:
                raise errors.ConcurrentAssignmentConflict(
                    f"Order {order_id} was already assigned to driver {order.driver_id}",
                    document_id=order_id,
                )
            if not OrderTransitions.can_transition(order.status, OrderStatus.PROCESSING):
                raise errors.IllegalTransition(order.status.value, OrderStatus.PROCESSING.value)

            driver = await self.store.get_driver(driver_id)
            if not driver.is_available:
                raise errors.ConcurrentAssignmentConflict(
                    f"Driver {driver_id} is no longer available", document_id=driver_id
                )
            active = await self.store.query_orders_by_driver_and_status(
                driver_id, OrderTransitions.ACTIVE
            )
            if active:
                raise errors.ConcurrentAssignmentConflict(
                    f"Driver {driver_id} is busy with order {active[0].id}",
                    document_id=driver_id,
                )

            now = self.clock()
            try:
                order, driver = await self.store.commit_order_and_driver(
                    order.id,
                    order.version,
                    {
                        "status": OrderStatus.PROCESSING,
                        "driver_id": driver.id,
                        "driver_name": driver.name,
                        "waybill_number": waybill_number(order.id, now),
                        "assigned_at": now,
                    },
                    driver.id,
                    driver.version,
                    {"is_available": False},
                )
            except errors.ConcurrentUpdateConflict as e:
                self.logger.log_conflict("assign_driver", order_id, str(e), driver_id=driver_id)
                raise errors.ConcurrentAssignmentConflict(
                    str(e), document_id=e.document_id
                ) from e

            self.logger.log_assignment(order.id, driver.id, order.waybill_number)

            result = AssignmentResult(order=order)
            notification = Notification.for_assignment(order, driver.id, now)
            try:
                result.notification_id = await self.store.insert_notification(notification)
            except Exception as e:
                result.notification_error = errors.NotificationDeliveryFailed(
                    order.id, driver.id, str(e)
                )
                self.logger.log_error(
                    "notification_failed", order_id=order.id, driver_id=driver.id, reason=str(e)
                )
            return result

    async def advance_status(self, order_id: str, target_status: OrderStatus | str) -> Order:
        """
        Move an order to shipped, completed or cancelled.

        Completing an order frees its driver and credits them one
        delivery. Cancelling releases any driver found attached.

        Raises:
            ValidationError: unknown status name
            NotFound: order missing
            IllegalTransition: move not allowed from the current status
            ConcurrentUpdateConflict: order or driver changed meanwhile
        """
        target = _parse_status(target_status)

        with trace_operation("advance_status", order_id=order_id, target=target.value):
            order = await self.store.get_order(order_id)
            if target not in OrderTransitions.ADVANCE_TARGETS or not OrderTransitions.can_transition(
                order.status, target
            ):
                raise errors.IllegalTransition(order.status.value, target.value)
            if target in OrderTransitions.DRIVER_BOUND and not order.driver_id:
                self.logger.log_error("driver_missing_from_active_order", order_id=order.id)
                raise errors.IllegalTransition(order.status.value, target.value)

            now = self.clock()
            previous = order.status
            try:
                if target == OrderStatus.SHIPPED:
                    order = await self.store.conditional_update_order(
                        order.id, order.version, {"status": target}
                    )
                elif target == OrderStatus.COMPLETED:
                    order = await self._complete(order, now)
                else:
                    order = await self._cancel(order, now)
            except errors.ConcurrentUpdateConflict as e:
                self.logger.log_conflict("advance_status", order_id, str(e), target=target.value)
                raise

            self.logger.log_transition(order.id, previous.value, order.status.value)
            return order

    async def _complete(self, order: Order, now: datetime) -> Order:
        patch = {"status": OrderStatus.COMPLETED, "delivered_at": now, "completed_at": now}
        try:
            driver = await self.store.get_driver(order.driver_id)
        except errors.NotFound:
            self.logger.log_error(
                "driver_missing_on_completion", order_id=order.id, driver_id=order.driver_id
            )
            return await self.store.conditional_update_order(order.id, order.version, patch)

        order, _ = await self.store.commit_order_and_driver(
            order.id,
            order.version,
            patch,
            driver.id,
            driver.version,
            {
                "is_available": True,
                "completed_deliveries": driver.completed_deliveries + 1,
            },
        )
        return order

    async def _cancel(self, order: Order, now: datetime) -> Order:
        patch = {"status": OrderStatus.CANCELLED, "cancelled_at": now}
        if not order.driver_id:
            return await self.store.conditional_update_order(order.id, order.version, patch)

        # A pending order should never carry a driver; detach and free them.
        self.logger.log_error(
            "driver_attached_to_pending_order", order_id=order.id, driver_id=order.driver_id
        )
        patch.update(driver_id=None, driver_name=None)
        try:
            driver = await self.store.get_driver(order.driver_id)
        except errors.NotFound:
            return await self.store.conditional_update_order(order.id, order.version, patch)

        order, _ = await self.store.commit_order_and_driver(
            order.id,
            order.version,
            patch,
            driver.id,
            driver.version,
            {"is_available": True},
        )
        return order

    async def record_review(
        self,
        order_id: str,
        product_rating: int,
        product_feedback: str | None,
        logistics_rating: int,
        logistics_feedback: str | None,
    ) -> Order:
        """
        Store the buyer's ratings for a completed order.

        Raises:
            ValidationError: rating outside 1-5 or feedback not text
            NotFound: order missing
            IllegalTransition: order not completed
            AlreadyReviewed: a review already exists
        """
        patch = {
            "product_rating": _check_rating("product_rating", product_rating),
            "product_feedback": _check_feedback("product_feedback", product_feedback),
            "logistics_rating": _check_rating("logistics_rating", logistics_rating),
            "logistics_feedback": _check_feedback("logistics_feedback", logistics_feedback),
            "reviewed": True,
        }

        with trace_operation("record_review", order_id=order_id):
            order = await self.store.get_order(order_id)
            if order.status != OrderStatus.COMPLETED:
                raise errors.IllegalTransition(order.status.value, "reviewed")
            if order.reviewed:
                raise errors.AlreadyReviewed(order_id)

            patch["reviewed_at"] = self.clock()
            try:
                order = await self.store.conditional_update_order(order.id, order.version, patch)
            except errors.ConcurrentUpdateConflict as e:
                # Lost to another write; re-read to report a duplicate review precisely.
                latest = await self.store.get_order(order_id)
                if latest.reviewed:
                    raise errors.AlreadyReviewed(order_id) from e
                raise

            self.logger.logger.info(
                "order_reviewed",
                order_id=order.id,
                product_rating=order.product_rating,
                logistics_rating=order.logistics_rating,
            )
            return order
