"""Payment gateway port (abstract interface).

Models a client-side checkout widget: it is loaded, opened with the amount
and customer details, and later reports exactly one terminal result
through the handlers it was given (success, dismissal or failure).

Swapping between FakeGateway (dev/test) and RelayGateway (hosted widget
relayed through the API) needs no change in the coordinator.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Prefill:
    """Customer contact details pre-populated in the widget."""

    name: str
    email: str
    contact: str


@dataclass(frozen=True)
class CheckoutOptions:
    """Everything the widget needs to open a payment session.

    ``amount`` is always in the currency's minor unit (paise for INR).
    """

    amount: int
    currency: str
    merchant_name: str
    description: str
    reference: str
    prefill: Prefill
    notes: dict = field(default_factory=dict)


@dataclass(frozen=True)
class GatewayHandlers:
    """Terminal callbacks. The gateway invokes exactly one per session.

    ``on_success(payment_id, order_id=None, signature=None)`` receives the
    gateway-side order id and capture signature when the gateway reports them.
    """

    on_success: Callable[..., None]
    on_dismiss: Callable[[], None]
    on_failure: Callable[[str], None]


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def load(self) -> bool:
        """Load/initialize the widget. Returns False when it is unavailable."""
        ...

    @abstractmethod
    def open(self, options: CheckoutOptions, handlers: GatewayHandlers) -> None:
        """Open a payment session. Results arrive later through ``handlers``."""
        ...

    @abstractmethod
    def close(self, reference: str) -> None:
        """Tear down an open session; later callbacks for it are dropped."""
        ...
