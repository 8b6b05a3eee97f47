"""Payment outcome — what happened to the money for one checkout attempt.

Produced once by the PaymentCoordinator and consumed once by the order
placement workflow.
"""

from dataclasses import dataclass
from enum import Enum


class OutcomeKind(Enum):
    DISPATCHED = "Dispatched"  # cash on delivery, nothing captured yet
    CAPTURED = "Captured"
    CANCELLED = "Cancelled"
    FAILED = "Failed"


@dataclass(frozen=True)
class PaymentOutcome:
    kind: OutcomeKind
    gateway_payment_id: str | None = None
    gateway_order_id: str | None = None
    gateway_signature: str | None = None
    reason: str | None = None

    @classmethod
    def dispatched(cls) -> "PaymentOutcome":
        return cls(kind=OutcomeKind.DISPATCHED)

    @classmethod
    def captured(
        cls,
        gateway_payment_id: str,
        gateway_order_id: str | None = None,
        gateway_signature: str | None = None,
    ) -> "PaymentOutcome":
        """A capture, with the gateway order id and signature needed to verify it later."""
        if not gateway_payment_id:
            raise ValueError("A captured payment must carry the gateway payment id")
        return cls(
            kind=OutcomeKind.CAPTURED,
            gateway_payment_id=gateway_payment_id,
            gateway_order_id=gateway_order_id,
            gateway_signature=gateway_signature,
        )

    @classmethod
    def cancelled(cls) -> "PaymentOutcome":
        return cls(kind=OutcomeKind.CANCELLED)

    @classmethod
    def failed(cls, reason: str) -> "PaymentOutcome":
        return cls(kind=OutcomeKind.FAILED, reason=reason or "payment failed")

    @property
    def is_captured(self) -> bool:
        return self.kind == OutcomeKind.CAPTURED

    @property
    def allows_order(self) -> bool:
        """Only captured or cash-on-delivery outcomes lead to an order."""
        return self.kind in (OutcomeKind.CAPTURED, OutcomeKind.DISPATCHED)
