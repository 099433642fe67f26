"""Driver notification models."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from pydantic import BaseModel, Field

from bayangida.models.order import Order, utcnow


class AssignmentMessage(BaseModel):
    """Payload telling a driver about a new delivery."""

    order_id: str
    amount: Decimal
    delivery_address: str | None = None
    seller_name: str
    item_count: int
    total_units: int


class Notification(BaseModel):
    """Record consumed by the driver app."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    driver_id: str
    order_id: str
    type: str = "order_assigned"
    title: str
    message: AssignmentMessage
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def for_assignment(cls, order: Order, driver_id: str, now: datetime) -> "Notification":
        """Build the notification sent when an order is assigned."""
        return cls(
            driver_id=driver_id,
            order_id=order.id,
            title="New delivery assigned",
            message=AssignmentMessage(
                order_id=order.id,
                amount=order.total_amount,
                delivery_address=order.delivery_address,
                seller_name=order.seller.name,
                item_count=order.item_count,
                total_units=order.unit_count,
            ),
            created_at=now,
        )
