"""Order pricing — subtotal, tax, cash-on-delivery fee and total.

Amounts are whole storefront currency units (rupees). Tax is rounded half
up, the way the storefront has always displayed it.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from payments.methods import PaymentMethod, method_fee

TAX_RATE = Decimal("0.05")


@dataclass(frozen=True)
class Pricing:
    subtotal: int
    tax: int
    cod_fee: int
    total: int


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_tax(subtotal: int) -> int:
    return round_half_up(Decimal(subtotal) * TAX_RATE)


def compute_pricing(cart, payment_method: PaymentMethod) -> Pricing:
    """Price a cart (iterable of CartLine) for the chosen payment method."""
    method = PaymentMethod(payment_method)
    subtotal = sum(line.unit_price * line.quantity for line in cart)
    tax = compute_tax(subtotal)
    cod_fee = method_fee(method)  # zero for online payment
    return Pricing(subtotal=subtotal, tax=tax, cod_fee=cod_fee, total=subtotal + tax + cod_fee)
