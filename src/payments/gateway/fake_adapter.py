"""Configurable fake payment gateway for development and testing.

This adapter simulates the hosted checkout widget without any external
calls. It can be configured at runtime to be unavailable, or to answer
every opened session with a success, a dismissal or a failure. In
``manual`` mode sessions stay open until a test fires a signal through
``succeed()``, ``dismiss()`` or ``fail()``.
"""

from enum import Enum
from uuid import uuid4

from payments.gateway.port import CheckoutOptions, GatewayHandlers, PaymentGateway


class FakeBehaviour(Enum):
    SUCCEED = "succeed"
    DISMISS = "dismiss"
    FAIL = "fail"
    MANUAL = "manual"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.available: bool = True
        self.behaviour: FakeBehaviour = FakeBehaviour.SUCCEED
        self.failure_reason: str = "Card declined"
        self.calls: list[dict] = []
        self.sessions: dict[str, GatewayHandlers] = {}

    def configure(
        self,
        behaviour: FakeBehaviour | str = FakeBehaviour.SUCCEED,
        available: bool = True,
        failure_reason: str = "Card declined",
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.behaviour = FakeBehaviour(behaviour)
        self.available = available
        self.failure_reason = failure_reason

    def load(self) -> bool:
        self.calls.append({"method": "load"})
        return self.available

    def open(self, options: CheckoutOptions, handlers: GatewayHandlers) -> None:
        self.calls.append({"method": "open", "options": options})
        self.sessions[options.reference] = handlers

        if self.behaviour == FakeBehaviour.SUCCEED:
            self.succeed(options.reference)
        elif self.behaviour == FakeBehaviour.DISMISS:
            self.dismiss(options.reference)
        elif self.behaviour == FakeBehaviour.FAIL:
            self.fail(options.reference, self.failure_reason)

    def close(self, reference: str) -> None:
        self.calls.append({"method": "close", "reference": reference})
        self.sessions.pop(reference, None)

    # -------------------------------------------------------------------
    # Signals (manual mode)
    # -------------------------------------------------------------------
    # A session takes one terminal signal; signalling a closed session raises KeyError
    def succeed(
        self,
        reference: str,
        payment_id: str | None = None,
        order_id: str | None = None,
        signature: str | None = None,
    ) -> str:
        payment_id = payment_id or f"pay_fake_{uuid4().hex[:14]}"
        self.sessions.pop(reference).on_success(payment_id, order_id, signature)
        return payment_id

    def dismiss(self, reference: str) -> None:
        self.sessions.pop(reference).on_dismiss()

    def fail(self, reference: str, reason: str | None = None) -> None:
        self.sessions.pop(reference).on_failure(reason or self.failure_reason)

    @property
    def opened(self) -> list[CheckoutOptions]:
        """Options of every session opened so far."""
        return [call["options"] for call in self.calls if call["method"] == "open"]
