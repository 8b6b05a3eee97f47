"""Order placement workflow — validation, payment, persistence, notifications.

One instance per checkout attempt. States:

    IDLE → VALIDATING → AWAITING_PAYMENT → PERSISTING → NOTIFYING → COMPLETE
    any state except NOTIFYING → FAILED(reason)
    VALIDATING → NEEDS_LOGIN (no identity)

The only suspension point is AWAITING_PAYMENT, while the gateway widget is
open. An order is created only after a CAPTURED or DISPATCHED payment
outcome. Notifications are fired without being awaited and cannot demote a
completed order. Nothing is retried automatically: a payment captured
without a recorded order ends the attempt with a critical failure that the
caller must surface as such.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ValidationError

from notifications.dispatcher import NotificationDispatcher
from notifications.email import NotificationKind
from ordering.checkout import messages
from ordering.checkout.errors import CheckoutClosedError, CheckoutInProgressError, ErrorKind
from ordering.checkout.request import build_order_request
from ordering.checkout.validation import CheckoutForm, FieldError, validate
from ordering.order.numbering import generate_order_number
from ordering.order.order import Order, PaymentStatus
from ordering.order.store import OrderStore
from ordering.settings.gate import SettingsGate
from payments.coordinator import PaymentCoordinator
from payments.gateway.port import Prefill
from payments.methods import PaymentMethod
from payments.outcome import OutcomeKind, PaymentOutcome

logger = structlog.get_logger(__name__)


class CheckoutState(Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    AWAITING_PAYMENT = "Awaiting_Payment"
    PERSISTING = "Persisting"
    NOTIFYING = "Notifying"
    COMPLETE = "Complete"
    FAILED = "Failed"
    NEEDS_LOGIN = "Needs_Login"


class FailureReason(Enum):
    VALIDATION_FAILED = "validation_failed"
    ORDERS_CLOSED = "orders_closed"
    USER_CANCELLED = "user_cancelled"
    PAYMENT_FAILED = "payment_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    CRITICAL_PAYMENT_WITHOUT_ORDER = "critical_payment_without_order"


_IN_FLIGHT_STATES = {
    CheckoutState.VALIDATING,
    CheckoutState.AWAITING_PAYMENT,
    CheckoutState.PERSISTING,
    CheckoutState.NOTIFYING,
}

_ERROR_KINDS = {
    FailureReason.VALIDATION_FAILED: ErrorKind.VALIDATION_ERROR,
    FailureReason.ORDERS_CLOSED: ErrorKind.ORDERS_CLOSED,
    FailureReason.USER_CANCELLED: ErrorKind.PAYMENT_CANCELLED,
    FailureReason.PAYMENT_FAILED: ErrorKind.PAYMENT_FAILED,
    FailureReason.PERSISTENCE_FAILED: ErrorKind.PERSISTENCE_FAILED_NO_PAYMENT,
    FailureReason.CRITICAL_PAYMENT_WITHOUT_ORDER: ErrorKind.PERSISTENCE_FAILED_AFTER_PAYMENT,
}


_FORM_FIELDS = {"customer_name", "address1", "address2", "city", "state", "pincode"}


def _field_error_for(error: ValidationError) -> FieldError:
    """Map fields the Order refused to the form error shown to the customer."""
    fields = set(error.messages)
    if "phone" in fields:
        return FieldError.INVALID_PHONE
    if "email" in fields:
        return FieldError.INVALID_EMAIL
    if fields & _FORM_FIELDS:
        return FieldError.FIELD_TOO_LONG
    return FieldError.INVALID_CART


@dataclass(frozen=True)
class CheckoutResult:
    state: CheckoutState
    order_number: str | None = None
    order: Order | None = None
    failure: FailureReason | None = None
    field_error: FieldError | None = None
    payment_method: PaymentMethod | None = None
    gateway_payment_id: str | None = None
    detail: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state == CheckoutState.COMPLETE

    @property
    def needs_login(self) -> bool:
        return self.state == CheckoutState.NEEDS_LOGIN

    @property
    def error_kind(self) -> ErrorKind | None:
        if self.needs_login:
            return ErrorKind.AUTH_REQUIRED
        return _ERROR_KINDS.get(self.failure)

    @property
    def is_critical(self) -> bool:
        return self.failure == FailureReason.CRITICAL_PAYMENT_WITHOUT_ORDER

    @property
    def message(self) -> str:
        if self.succeeded:
            return messages.order_placed(self.order_number, paid_online=self.payment_method == PaymentMethod.ONLINE)
        if self.needs_login:
            return messages.LOGIN_REQUIRED

        if self.failure == FailureReason.VALIDATION_FAILED:
            return messages.field_error_message(self.field_error)
        if self.failure == FailureReason.ORDERS_CLOSED:
            return messages.ORDERS_CLOSED
        if self.failure == FailureReason.USER_CANCELLED:
            return messages.PAYMENT_CANCELLED
        if self.failure == FailureReason.PAYMENT_FAILED:
            return messages.payment_failed(self.detail)
        if self.failure == FailureReason.PERSISTENCE_FAILED:
            return messages.order_not_saved(self.detail)
        if self.failure == FailureReason.CRITICAL_PAYMENT_WITHOUT_ORDER:
            return messages.payment_taken_order_missing(self.order_number, self.gateway_payment_id)
        return messages.GENERIC_FAILURE

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "order_number": self.order_number,
            "failure": self.failure.value if self.failure else None,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "field_error": self.field_error.value if self.field_error else None,
            "critical": self.is_critical,
            "gateway_payment_id": self.gateway_payment_id,
            "message": self.message,
            "order": self.order.snapshot() if self.order is not None else None,
        }


class OrderPlacementWorkflow:
    def __init__(
        self,
        coordinator: PaymentCoordinator | None = None,
        orders: OrderStore | None = None,
        dispatcher: NotificationDispatcher | None = None,
        gate: SettingsGate | None = None,
        order_numbers=generate_order_number,
    ):
        self.coordinator = coordinator or PaymentCoordinator()
        self.orders = orders or OrderStore()
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.gate = gate
        self._order_numbers = order_numbers

        self.state = CheckoutState.IDLE
        self.order_number: str | None = None
        self.result: CheckoutResult | None = None
        # Set while the workflow is suspended on the payment gateway
        self.suspended = asyncio.Event()

    @property
    def in_flight(self) -> bool:
        """True while a submission is running; the UI must block resubmission."""
        return self.state in _IN_FLIGHT_STATES

    def _transition(self, state: CheckoutState) -> None:
        logger.debug("Checkout state change", order_number=self.order_number, source=self.state.value, target=state.value)
        self.state = state

    def _ensure_submittable(self) -> None:
        if self.in_flight:
            raise CheckoutInProgressError("Checkout is already in progress")
        if self.state == CheckoutState.COMPLETE:
            raise CheckoutClosedError("Order already placed for this checkout")
        if self.result is not None and self.result.is_critical:
            raise CheckoutClosedError("Payment was taken but the order was not recorded; contact support")

    async def submit(self, form: CheckoutForm, cart, payment_method: PaymentMethod, identity) -> CheckoutResult:
        """Run one checkout attempt to a terminal state and return its result."""
        self._ensure_submittable()
        self.result = None
        self.order_number = None
        self.suspended.clear()
        cart = tuple(cart)
        method = PaymentMethod(payment_method)

        self._transition(CheckoutState.VALIDATING)
        if not identity:
            self._transition(CheckoutState.NEEDS_LOGIN)
            return self._finish(CheckoutResult(state=CheckoutState.NEEDS_LOGIN, payment_method=method))

        if self.gate is not None and not self.gate.is_accepting_orders():
            return self._fail(FailureReason.ORDERS_CLOSED, method)

        validation = validate(form, identity)
        if not validation.ok:
            return self._fail(FailureReason.VALIDATION_FAILED, method, field_error=validation.error)
        if not cart:
            return self._fail(FailureReason.VALIDATION_FAILED, method, field_error=FieldError.EMPTY_CART)

        request = build_order_request(form, cart, method, identity)
        self.order_number = self._order_numbers()

        with structlog.contextvars.bound_contextvars(order_number=self.order_number):
            try:
                self.orders.check(request, self.order_number)
            except ValidationError as e:
                logger.info("Order details refused before payment", fields=sorted(e.messages))
                return self._fail(FailureReason.VALIDATION_FAILED, method, field_error=_field_error_for(e))
            return await self._pay_and_record(request)

    async def _pay_and_record(self, request) -> CheckoutResult:
        method = request.payment_method
        self._transition(CheckoutState.AWAITING_PAYMENT)
        try:
            outcome = await self.coordinator.pay(
                method,
                request.total,
                Prefill(name=request.customer_name, email=request.email, contact=request.phone),
                self.order_number,
                notes={"address": request.shipping_address.one_line()},
                on_open=self.suspended.set,
            )
        except asyncio.CancelledError:
            self._fail(FailureReason.USER_CANCELLED, method)
            raise
        except Exception as e:
            logger.error("Payment coordinator raised", error=str(e))
            outcome = PaymentOutcome.failed(str(e))
        finally:
            self.suspended.clear()

        if outcome.kind == OutcomeKind.CANCELLED:
            logger.info("Payment cancelled by customer")
            return self._fail(FailureReason.USER_CANCELLED, method)
        if outcome.kind == OutcomeKind.FAILED:
            logger.warning("Payment failed", reason=outcome.reason)
            return self._fail(FailureReason.PAYMENT_FAILED, method, detail=outcome.reason)

        self._transition(CheckoutState.PERSISTING)
        payment_status = PaymentStatus.PAID if outcome.is_captured else PaymentStatus.PENDING
        try:
            order = self.orders.create(
                request.with_payment_status(payment_status),
                self.order_number,
                gateway_payment_id=outcome.gateway_payment_id,
                gateway_order_id=outcome.gateway_order_id,
                gateway_signature=outcome.gateway_signature,
            )
        except Exception as e:
            if outcome.is_captured:
                logger.critical(
                    "Payment captured but order was not recorded",
                    gateway_payment_id=outcome.gateway_payment_id,
                    total=request.total,
                    user_id=request.user_id,
                    error=str(e),
                )
                return self._fail(
                    FailureReason.CRITICAL_PAYMENT_WITHOUT_ORDER,
                    method,
                    gateway_payment_id=outcome.gateway_payment_id,
                    detail=str(e),
                )
            return self._fail(FailureReason.PERSISTENCE_FAILED, method, detail=str(e))

        self._transition(CheckoutState.NOTIFYING)
        self._notify(order)

        self._transition(CheckoutState.COMPLETE)
        logger.info("Checkout complete", total=order.total, payment_method=method.value)
        return self._finish(
            CheckoutResult(
                state=CheckoutState.COMPLETE,
                order_number=self.order_number,
                order=order,
                payment_method=method,
                gateway_payment_id=outcome.gateway_payment_id,
            )
        )

    def _notify(self, order: Order) -> None:
        try:
            snapshot = order.snapshot()
            self.dispatcher.fire_and_forget(NotificationKind.ORDER_CONFIRMATION, snapshot)
            self.dispatcher.fire_and_forget(NotificationKind.ADMIN_NOTIFICATION, snapshot)
        except Exception as e:
            logger.error("Order notifications could not be scheduled", error=str(e))

    def abandon(self) -> bool:
        """Customer left checkout: cancel the payment in flight, if any."""
        if self.state != CheckoutState.AWAITING_PAYMENT or self.order_number is None:
            return False
        return self.coordinator.abandon(self.order_number)

    def _fail(self, reason: FailureReason, method: PaymentMethod, **details) -> CheckoutResult:
        self._transition(CheckoutState.FAILED)
        return self._finish(
            CheckoutResult(
                state=CheckoutState.FAILED,
                order_number=self.order_number,
                failure=reason,
                payment_method=method,
                **details,
            )
        )

    def _finish(self, result: CheckoutResult) -> CheckoutResult:
        self.result = result
        return result
