"""Order aggregate (CQRS) — a recorded checkout.

An Order is created exactly once per successful checkout, from the
immutable OrderRequest the workflow built, after the payment outcome is
known. Afterwards only fulfillment moves it along:

State Machine (5 states):
    PROCESSING → CONFIRMED → SHIPPED → DELIVERED
    PROCESSING / CONFIRMED → CANCELLED
    PROCESSING → SHIPPED
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.domain import ordering
from ordering.order.events import OrderPlaced
from payments.methods import PaymentMethod


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PROCESSING = "Processing"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"


# Storage limits; checkout validation enforces the same ones before payment
MAX_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 254
MAX_PHONE_LENGTH = 20
MAX_ADDRESS_LENGTH = 255
MAX_LOCALITY_LENGTH = 100
MAX_PINCODE_LENGTH = 20
MAX_PRODUCT_NAME_LENGTH = 255

_VALID_TRANSITIONS = {
    OrderStatus.PROCESSING: {OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, captured at checkout and never changed afterwards."""

    address1 = String(required=True, max_length=MAX_ADDRESS_LENGTH)
    address2 = String(max_length=MAX_ADDRESS_LENGTH)
    city = String(required=True, max_length=MAX_LOCALITY_LENGTH)
    state = String(required=True, max_length=MAX_LOCALITY_LENGTH)
    pincode = String(required=True, max_length=MAX_PINCODE_LENGTH)

    def one_line(self) -> str:
        return f"{self.address1}, {self.city}, {self.state} - {self.pincode}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderLine:
    """A purchased product with the price it was sold at."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=MAX_PRODUCT_NAME_LENGTH)
    price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=1024, default="")

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_number = String(required=True, max_length=40, unique=True)
    user_id = Identifier(required=True)
    customer_name = String(required=True, max_length=MAX_NAME_LENGTH)
    email = String(required=True, max_length=MAX_EMAIL_LENGTH)
    phone = String(required=True, max_length=MAX_PHONE_LENGTH)
    lines = HasMany(OrderLine)
    shipping_address = ValueObject(ShippingAddress)
    subtotal = Integer(required=True, min_value=0)
    tax = Integer(default=0, min_value=0)
    cod_fee = Integer(default=0, min_value=0)
    total = Integer(required=True, min_value=0)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PROCESSING.value)
    gateway_payment_id = String(max_length=255)
    gateway_order_id = String(max_length=255)
    gateway_signature = String(max_length=512)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_is_sum_of_parts(self):
        if self.total != (self.subtotal or 0) + (self.tax or 0) + (self.cod_fee or 0):
            raise ValidationError({"total": ["Total must equal subtotal + tax + COD fee"]})

    # -------------------------------------------------------------------
    # Factory methods
    # -------------------------------------------------------------------
    @classmethod
    def record(
        cls,
        order_number,
        user_id,
        customer_name,
        email,
        phone,
        items_data,
        shipping_address,
        pricing,
        payment_method,
        payment_status,
        gateway_payment_id=None,
        gateway_order_id=None,
        gateway_signature=None,
        created_at=None,
    ):
        """Record an order from checkout data.

        Args:
            order_number: Client-generated order number.
            user_id: The customer placing the order.
            items_data: List of dicts with product_id, product_name, price,
                        quantity, image.
            shipping_address: Dict with address1, address2, city, state, pincode.
            pricing: Dict with subtotal, tax, cod_fee, total.
            gateway_payment_id: Gateway payment id when the payment was captured.
            gateway_order_id: Gateway-side order id reported with the capture.
            gateway_signature: Capture signature, kept for later verification.
        """
        now = datetime.now(UTC)

        order = cls(
            order_number=order_number,
            user_id=user_id,
            customer_name=customer_name,
            email=email,
            phone=phone,
            lines=[
                OrderLine(
                    product_id=item["product_id"],
                    product_name=item["product_name"],
                    price=item["price"],
                    quantity=item["quantity"],
                    image=item.get("image") or "",
                )
                for item in items_data
            ],
            shipping_address=ShippingAddress(
                address1=shipping_address["address1"],
                address2=shipping_address.get("address2") or None,
                city=shipping_address["city"],
                state=shipping_address["state"],
                pincode=shipping_address["pincode"],
            ),
            subtotal=pricing["subtotal"],
            tax=pricing.get("tax", 0),
            cod_fee=pricing.get("cod_fee", 0),
            total=pricing["total"],
            payment_method=PaymentMethod(payment_method).value,
            payment_status=PaymentStatus(payment_status).value,
            gateway_payment_id=gateway_payment_id,
            gateway_order_id=gateway_order_id,
            gateway_signature=gateway_signature,
            created_at=created_at or now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                items=json.dumps(list(items_data)),
                total=float(order.total),
                payment_method=order.payment_method,
                payment_status=order.payment_status,
                gateway_payment_id=gateway_payment_id,
                placed_at=now,
            )
        )
        return order

    @classmethod
    def place(cls, request, order_number, gateway_payment_id=None, gateway_order_id=None, gateway_signature=None):
        """Record an order from a finalized OrderRequest."""
        address = request.shipping_address
        return cls.record(
            order_number=order_number,
            user_id=request.user_id,
            customer_name=request.customer_name,
            email=request.email,
            phone=request.phone,
            items_data=[item.to_snapshot() for item in request.items],
            shipping_address={
                "address1": address.address1,
                "address2": address.address2,
                "city": address.city,
                "state": address.state,
                "pincode": address.pincode,
            },
            pricing={
                "subtotal": request.subtotal,
                "tax": request.tax,
                "cod_fee": request.cod_fee,
                "total": request.total,
            },
            payment_method=request.payment_method,
            payment_status=request.payment_status,
            gateway_payment_id=gateway_payment_id,
            gateway_order_id=gateway_order_id,
            gateway_signature=gateway_signature,
            created_at=request.created_at,
        )

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def update_status(self, new_status):
        """Move the order along its fulfillment lifecycle."""
        target = OrderStatus(new_status)
        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})

        self.status = target.value
        self.updated_at = datetime.now(UTC)

    @property
    def item_count(self) -> int:
        return len(self.lines)

    def snapshot(self) -> dict:
        """Plain dict of the order for emails and confirmation screens."""
        address = self.shipping_address
        return {
            "id": str(self.id),
            "order_number": self.order_number,
            "user_id": str(self.user_id),
            "customer_name": self.customer_name,
            "email": self.email,
            "phone": self.phone,
            "items": [
                {
                    "product_id": str(line.product_id),
                    "product_name": line.product_name,
                    "price": line.price,
                    "quantity": line.quantity,
                    "image": line.image or "",
                }
                for line in self.lines
            ],
            "shipping_address": {
                "address1": address.address1,
                "address2": address.address2 or "",
                "city": address.city,
                "state": address.state,
                "pincode": address.pincode,
            }
            if address
            else None,
            "subtotal": self.subtotal,
            "tax": self.tax,
            "cod_fee": self.cod_fee,
            "total": self.total,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "status": self.status,
            "gateway_payment_id": self.gateway_payment_id,
            "gateway_order_id": self.gateway_order_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
