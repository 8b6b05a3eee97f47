"""Order store — the checkout's gateway to order persistence.

Wraps order placement so the workflow sees one failure type,
OrderPersistenceError, whatever the storage provider raised. ``check()``
builds the order without saving it, so input the order cannot hold is
refused before any money moves.
"""

import structlog
from protean.domain import Domain

from ordering.checkout.errors import OrderPersistenceError
from ordering.domain import ordering
from ordering.order.creation import place_order_command
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


class OrderStore:
    def __init__(self, domain: Domain = ordering):
        self._domain = domain

    def check(self, request, order_number: str) -> None:
        """Raise ``ValidationError`` if ``request`` could not be recorded as an order."""
        with self._domain.domain_context():
            place_order_command(request, order_number)
            Order.place(request, order_number)

    def create(
        self,
        request,
        order_number: str,
        gateway_payment_id: str | None = None,
        gateway_order_id: str | None = None,
        gateway_signature: str | None = None,
    ) -> Order:
        """Persist a new Order from ``request`` and return it."""
        try:
            with self._domain.domain_context():
                command = place_order_command(
                    request,
                    order_number,
                    gateway_payment_id=gateway_payment_id,
                    gateway_order_id=gateway_order_id,
                    gateway_signature=gateway_signature,
                )
                order_id = self._domain.process(command, asynchronous=False)
                order = self._domain.repository_for(Order).get(order_id)
        except Exception as e:
            logger.error("Order could not be recorded", order_number=order_number, error=str(e))
            raise OrderPersistenceError(str(e)) from e

        logger.info("Order recorded", order_number=order_number, order_id=str(order.id), total=order.total)
        return order

    def list_by_user(self, user_id: str) -> list[Order]:
        with self._domain.domain_context():
            return self._domain.repository_for(Order).find_by_user(user_id)

    def get_by_order_number(self, order_number: str) -> Order | None:
        with self._domain.domain_context():
            return self._domain.repository_for(Order).find_by_order_number(order_number)
