"""Order history — a customer's past orders, newest first."""

from ordering.order.order import Order
from ordering.order.store import OrderStore


def _matches_search(order: Order, query: str) -> bool:
    if query in (order.order_number or "").lower():
        return True
    return any(query in (line.product_name or "").lower() for line in order.lines)


def order_history(user_id: str, status: str | None = None, search: str | None = None, store=None) -> list[Order]:
    """Orders placed by ``user_id``.

    ``status`` filters case-insensitively (``"all"`` or None keeps every
    order). ``search`` matches the order number or any product name.
    """
    orders = (store or OrderStore()).list_by_user(user_id)

    if status and status.lower() != "all":
        orders = [o for o in orders if (o.status or "").lower() == status.lower()]

    if search and search.strip():
        query = search.strip().lower()
        orders = [o for o in orders if _matches_search(o, query)]

    return orders
