"""Cart lines and the immutable order request built at checkout."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime

from ordering.checkout.pricing import compute_pricing
from ordering.checkout.validation import CheckoutForm
from ordering.order.order import PaymentStatus
from payments.methods import PaymentMethod


@dataclass(frozen=True)
class CartLine:
    """One product in the session cart. ``unit_price`` is in whole rupees."""

    product_id: str
    name: str
    unit_price: int
    quantity: int
    image_ref: str = ""

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"Cart quantity must be positive, got {self.quantity}")
        if self.unit_price < 0:
            raise ValueError(f"Unit price cannot be negative, got {self.unit_price}")


@dataclass(frozen=True)
class OrderItem:
    product_id: str
    product_name: str
    price: int
    quantity: int
    image: str = ""

    @classmethod
    def from_cart_line(cls, line: CartLine) -> "OrderItem":
        return cls(
            product_id=line.product_id,
            product_name=line.name,
            price=line.unit_price,
            quantity=line.quantity,
            image=line.image_ref or "",
        )

    def to_snapshot(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "price": self.price,
            "quantity": self.quantity,
            "image": self.image,
        }


@dataclass(frozen=True)
class Address:
    address1: str
    city: str
    state: str
    pincode: str
    address2: str = ""

    def one_line(self) -> str:
        return f"{self.address1}, {self.city}, {self.state} - {self.pincode}"


@dataclass(frozen=True)
class OrderRequest:
    customer_name: str
    email: str
    phone: str
    items: tuple[OrderItem, ...]
    shipping_address: Address
    subtotal: int
    tax: int
    cod_fee: int
    total: int
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    user_id: str
    created_at: datetime

    def __post_init__(self):
        if self.total != self.subtotal + self.tax + self.cod_fee:
            raise ValueError(
                f"Order total {self.total} does not match subtotal {self.subtotal}"
                f" + tax {self.tax} + COD fee {self.cod_fee}"
            )

    def with_payment_status(self, payment_status: PaymentStatus) -> "OrderRequest":
        """Copy of the request carrying the final payment status."""
        return replace(self, payment_status=PaymentStatus(payment_status))


def build_order_request(
    form: CheckoutForm,
    cart,
    payment_method: PaymentMethod,
    user_id: str,
    now: datetime | None = None,
) -> OrderRequest:
    """Price the cart and freeze the validated form into an OrderRequest."""
    method = PaymentMethod(payment_method)
    pricing = compute_pricing(cart, method)

    return OrderRequest(
        customer_name=form.customer_name,
        email=form.email.strip(),
        phone=form.phone.strip(),
        items=tuple(OrderItem.from_cart_line(line) for line in cart),
        shipping_address=Address(
            address1=form.address1.strip(),
            address2=(form.address2 or "").strip(),
            city=form.city.strip(),
            state=form.state.strip(),
            pincode=form.pincode.strip(),
        ),
        subtotal=pricing.subtotal,
        tax=pricing.tax,
        cod_fee=pricing.cod_fee,
        total=pricing.total,
        payment_method=method,
        payment_status=PaymentStatus.PENDING,
        user_id=str(user_id),
        created_at=now or datetime.now(UTC),
    )
