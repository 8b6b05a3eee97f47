"""Repository for the Order aggregate."""

from ordering.domain import ordering
from ordering.order.order import Order


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_user(self, user_id: str) -> list[Order]:
        """Orders placed by ``user_id``, newest first."""
        orders = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def find_by_order_number(self, order_number: str) -> Order | None:
        results = self._dao.query.filter(order_number=order_number).all().items
        return results[0] if results else None
