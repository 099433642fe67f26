"""Read side of the transactions page."""

from bayangida import errors
from bayangida.models.order import Order, OrderStatus
from bayangida.state.store import DocumentStore


class OrderBoard:
    """Lists orders by status tab with free-text search."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_orders(
        self,
        status: OrderStatus | str | None = None,
        search: str | None = None,
    ) -> list[Order]:
        """
        Orders in a status tab, newest first.

        Args:
            status: Tab to show, or None for every order
            search: Case-insensitive substring of order id, buyer or seller name
        """
        if status is not None:
            try:
                status = OrderStatus(status)
            except ValueError as e:
                raise errors.ValidationError(
                    f"Unknown order status '{status}'", field="status"
                ) from e

        orders = await self.store.list_orders(status)

        term = (search or "").strip()
        if term:
            orders = [order for order in orders if order.matches(term)]

        # Store order is oldest first with id tie-break; reversing keeps it total.
        return list(reversed(orders))

    async def get_order(self, order_id: str) -> Order:
        """Fetch one order."""
        return await self.store.get_order(order_id)
