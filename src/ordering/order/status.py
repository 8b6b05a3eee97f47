"""Order status updates made by store staff — command and handler.

The customer is emailed about the change on a best-effort basis.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String
from protean.utils.globals import current_domain

from notifications.dispatcher import NotificationDispatcher
from notifications.email import NotificationKind
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.order.store import OrderStore

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_number = String(required=True, max_length=40)
    status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_by_order_number(command.order_number)
        if order is None:
            raise ObjectNotFoundError(f"Order {command.order_number} not found")

        order.update_status(command.status)
        repo.add(order)


def update_order_status(
    order_number: str,
    new_status: str,
    store: OrderStore | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> Order:
    """Move an order to ``new_status`` and email the customer about it.

    Must run inside an event loop when a dispatcher is given; the email is
    fired without waiting.
    """
    store = store or OrderStore()
    with ordering.domain_context():
        current_domain.process(UpdateOrderStatus(order_number=order_number, status=new_status), asynchronous=False)
    order = store.get_by_order_number(order_number)
    logger.info("Order status updated", order_number=order_number, status=order.status)

    if dispatcher is not None:
        dispatcher.fire_and_forget(NotificationKind.STATUS_UPDATE, order.snapshot())
    return order
