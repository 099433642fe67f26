"""Order status state machine."""

from bayangida.models.order import OrderStatus, delivery_status_for

__all__ = ["OrderTransitions", "delivery_status_for"]


class OrderTransitions:
    """Valid order status transitions."""

    TRANSITIONS = {
        OrderStatus.PENDING: [OrderStatus.PROCESSING, OrderStatus.CANCELLED],
        OrderStatus.PROCESSING: [OrderStatus.SHIPPED],
        OrderStatus.SHIPPED: [OrderStatus.COMPLETED],
        OrderStatus.COMPLETED: [],
        OrderStatus.CANCELLED: [],
    }

    # Targets an operator may request directly; processing is reached only by assignment.
    ADVANCE_TARGETS = frozenset(
        {OrderStatus.SHIPPED, OrderStatus.COMPLETED, OrderStatus.CANCELLED}
    )

    # Orders in these states occupy their driver.
    ACTIVE = frozenset({OrderStatus.PROCESSING, OrderStatus.SHIPPED})

    # Orders in these states must carry a driver.
    DRIVER_BOUND = frozenset(
        {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.COMPLETED}
    )

    @classmethod
    def can_transition(cls, from_state: OrderStatus, to_state: OrderStatus) -> bool:
        """Check if a state transition is valid."""
        return to_state in cls.TRANSITIONS.get(from_state, [])

    @classmethod
    def is_terminal(cls, state: OrderStatus) -> bool:
        """Check if no further transition is possible."""
        return not cls.TRANSITIONS.get(state)