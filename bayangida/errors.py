"""Typed errors raised by the order lifecycle and its store."""


class WorkflowError(Exception):
    """Base class for all order workflow errors."""

    retryable: bool = False


class NotFound(WorkflowError):
    """A referenced document does not exist."""

    def __init__(self, kind: str, document_id: str):
        self.kind = kind
        self.document_id = document_id
        super().__init__(f"{kind} {document_id} not found")


class IllegalTransition(WorkflowError):
    """A requested status change is not allowed from the current status."""

    def __init__(self, current: str, requested: str, subject: str = "order"):
        self.current = current
        self.requested = requested
        self.subject = subject
        super().__init__(f"Cannot move {subject} from '{current}' to '{requested}'")


class ConcurrentUpdateConflict(WorkflowError):
    """A versioned write lost against a concurrent modification."""

    retryable = True

    def __init__(self, message: str, document_id: str | None = None):
        self.document_id = document_id
        super().__init__(message)


class ConcurrentAssignmentConflict(ConcurrentUpdateConflict):
    """The order or the driver changed while an assignment was in flight.

    Re-list eligible drivers and try again.
    """


class NotificationDeliveryFailed(WorkflowError):
    """The assignment notification could not be stored.

    The assignment itself stands; this is reported as a warning.
    """

    retryable = True

    def __init__(self, order_id: str, driver_id: str, reason: str):
        self.order_id = order_id
        self.driver_id = driver_id
        self.reason = reason
        super().__init__(
            f"Driver {driver_id} was assigned to order {order_id} "
            f"but could not be notified: {reason}"
        )


class AlreadyReviewed(WorkflowError):
    """A review was already recorded for the order."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} has already been reviewed")


class ValidationError(WorkflowError):
    """Malformed input such as an out-of-range rating."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)
