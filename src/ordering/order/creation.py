"""Order placement — command and handler."""

import json

from protean import handle
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import (
    MAX_EMAIL_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    Order,
)


@ordering.command(part_of="Order")
class PlaceOrder:
    order_number = String(required=True, max_length=40)
    user_id = Identifier(required=True)
    customer_name = String(required=True, max_length=MAX_NAME_LENGTH)
    email = String(required=True, max_length=MAX_EMAIL_LENGTH)
    phone = String(required=True, max_length=MAX_PHONE_LENGTH)
    items = Text(required=True)  # JSON: list of line dicts
    shipping_address = Text(required=True)  # JSON: address dict
    subtotal = Integer(required=True)
    tax = Integer(default=0)
    cod_fee = Integer(default=0)
    total = Integer(required=True)
    payment_method = String(required=True, max_length=10)
    payment_status = String(required=True, max_length=10)
    gateway_payment_id = String(max_length=255)
    gateway_order_id = String(max_length=255)
    gateway_signature = String(max_length=512)
    created_at = DateTime()


def place_order_command(request, order_number, gateway_payment_id=None, gateway_order_id=None, gateway_signature=None):
    """Build the PlaceOrder command for a finalized OrderRequest."""
    address = request.shipping_address
    return PlaceOrder(
        order_number=order_number,
        user_id=request.user_id,
        customer_name=request.customer_name,
        email=request.email,
        phone=request.phone,
        items=json.dumps([item.to_snapshot() for item in request.items]),
        shipping_address=json.dumps(
            {
                "address1": address.address1,
                "address2": address.address2,
                "city": address.city,
                "state": address.state,
                "pincode": address.pincode,
            }
        ),
        subtotal=request.subtotal,
        tax=request.tax,
        cod_fee=request.cod_fee,
        total=request.total,
        payment_method=request.payment_method.value,
        payment_status=request.payment_status.value,
        gateway_payment_id=gateway_payment_id,
        gateway_order_id=gateway_order_id,
        gateway_signature=gateway_signature,
        created_at=request.created_at,
    )


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )

        order = Order.record(
            order_number=command.order_number,
            user_id=command.user_id,
            customer_name=command.customer_name,
            email=command.email,
            phone=command.phone,
            items_data=items_data,
            shipping_address=shipping_address,
            pricing={
                "subtotal": command.subtotal,
                "tax": command.tax or 0,
                "cod_fee": command.cod_fee or 0,
                "total": command.total,
            },
            payment_method=command.payment_method,
            payment_status=command.payment_status,
            gateway_payment_id=command.gateway_payment_id,
            gateway_order_id=command.gateway_order_id,
            gateway_signature=command.gateway_signature,
            created_at=command.created_at,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
