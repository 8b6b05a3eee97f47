"""Order confirmation summary shown right after checkout."""

from dataclasses import dataclass

from ordering.order.order import Order
from payments.methods import PaymentMethod

_PAYMENT_LABELS = {
    PaymentMethod.COD.value: "Cash on Delivery",
    PaymentMethod.ONLINE.value: "Paid Online",
}


@dataclass(frozen=True)
class ConfirmationView:
    order_number: str
    greeting_name: str
    item_count: int
    payment_label: str
    total: int
    shipping_address: str
    email: str


def confirmation_view(order: Order) -> ConfirmationView:
    first_name = (order.customer_name or "").split(" ")[0]
    return ConfirmationView(
        order_number=order.order_number,
        greeting_name=first_name,
        item_count=order.item_count,
        payment_label=_PAYMENT_LABELS.get(order.payment_method, order.payment_method),
        total=order.total,
        shipping_address=order.shipping_address.one_line() if order.shipping_address else "",
        email=order.email,
    )
