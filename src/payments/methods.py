"""Payment methods offered at checkout.

Two methods exist: online payment through the hosted gateway widget and
cash on delivery, which carries a fixed surcharge.
"""

from dataclasses import dataclass
from enum import Enum

COD_FEE = 50


class PaymentMethod(Enum):
    ONLINE = "ONLINE"
    COD = "COD"


@dataclass(frozen=True)
class PaymentMethodOption:
    method: PaymentMethod
    name: str
    description: str
    fee: int
    enabled: bool = True


_CATALOGUE = (
    PaymentMethodOption(
        method=PaymentMethod.ONLINE,
        name="Pay Online",
        description="UPI, Cards, Netbanking, Wallets",
        fee=0,
    ),
    PaymentMethodOption(
        method=PaymentMethod.COD,
        name="Cash on Delivery",
        description="Pay when you receive",
        fee=COD_FEE,
    ),
)


def payment_methods() -> list[PaymentMethodOption]:
    """Return the payment methods shown at checkout, in display order."""
    return list(_CATALOGUE)


def method_fee(method: PaymentMethod) -> int:
    """Surcharge added to the order total for the given method."""
    for option in _CATALOGUE:
        if option.method == method:
            return option.fee
    return 0


def calculate_total(subtotal: int, method: PaymentMethod) -> int:
    """Subtotal plus the payment method surcharge (tax not included)."""
    return subtotal + method_fee(PaymentMethod(method))
