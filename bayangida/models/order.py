"""Order-related data models."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    """Order lifecycle states."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DeliveryStatus(str, Enum):
    """Delivery states, always derived from the order status."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment states reported by checkout."""

    PAID = "paid"
    PENDING = "pending"
    FAILED = "failed"


DELIVERY_STATUS_BY_ORDER_STATUS = {
    OrderStatus.PENDING: DeliveryStatus.PENDING,
    OrderStatus.PROCESSING: DeliveryStatus.PROCESSING,
    OrderStatus.SHIPPED: DeliveryStatus.SHIPPED,
    OrderStatus.COMPLETED: DeliveryStatus.DELIVERED,
    OrderStatus.CANCELLED: DeliveryStatus.CANCELLED,
}


def delivery_status_for(status: OrderStatus) -> DeliveryStatus:
    """Return the delivery status coupled to an order status."""
    return DELIVERY_STATUS_BY_ORDER_STATUS[status]


class Party(BaseModel):
    """Buyer or seller on an order."""

    id: str
    name: str
    email: str | None = None
    phone: str | None = None


class OrderItem(BaseModel):
    """Individual produce line in an order."""

    product_id: str
    name: str
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)
    unit: str = "kg"

    @property
    def subtotal(self) -> Decimal:
        """Line total for this item."""
        return self.unit_price * Decimal(self.quantity)


class Order(BaseModel):
    """Marketplace order moving from seller to buyer."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    buyer: Party
    seller: Party

    # Items
    items: list[OrderItem] = Field(default_factory=list)

    # Pricing, recomputed on validation
    items_total: Decimal = Field(default=Decimal("0.00"), ge=0)
    delivery_fee: Decimal = Field(default=Decimal("0.00"), ge=0)
    total_amount: Decimal = Field(default=Decimal("0.00"), ge=0)

    delivery_address: str | None = None

    # Status
    payment_status: PaymentStatus = PaymentStatus.PAID
    status: OrderStatus = OrderStatus.PENDING
    delivery_status: DeliveryStatus = DeliveryStatus.PENDING

    # Assignment
    driver_id: str | None = None
    driver_name: str | None = None
    waybill_number: str | None = None

    # Timing
    created_at: datetime = Field(default_factory=utcnow)
    assigned_at: datetime | None = None
    delivered_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None

    # Review
    product_rating: int | None = Field(default=None, ge=1, le=5)
    product_feedback: str | None = None
    logistics_rating: int | None = Field(default=None, ge=1, le=5)
    logistics_feedback: str | None = None
    reviewed: bool = False
    reviewed_at: datetime | None = None

    version: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def derive_computed_fields(self) -> "Order":
        """Recompute totals and couple delivery status to status."""
        self.calculate_totals()
        self.delivery_status = delivery_status_for(self.status)
        return self

    def calculate_totals(self) -> None:
        """Calculate item and grand totals from the line items."""
        self.items_total = sum((item.subtotal for item in self.items), Decimal("0.00"))
        self.total_amount = self.items_total + self.delivery_fee

    @property
    def item_count(self) -> int:
        """Number of distinct lines."""
        return len(self.items)

    @property
    def unit_count(self) -> int:
        """Total quantity across all lines."""
        return sum(item.quantity for item in self.items)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on id, buyer and seller names."""
        term = term.lower()
        return any(
            term in (value or "").lower()
            for value in (self.id, self.buyer.name, self.seller.name)
        )
