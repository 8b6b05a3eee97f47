"""FastAPI routes for the storefront — checkout, orders and settings."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from ordering.api.schemas import (
    CheckoutRequest,
    CheckoutResponse,
    ConfirmationResponse,
    PaymentFailureRequest,
    PaymentMethodResponse,
    PaymentSuccessRequest,
    SettingsResponse,
    UpdateOrderStatusRequest,
    UpdateSettingsRequest,
)
from ordering.checkout.request import CartLine
from ordering.checkout.sessions import CheckoutSessions
from ordering.checkout.validation import CheckoutForm
from ordering.checkout.workflow import CheckoutResult, CheckoutState, FailureReason
from ordering.order.status import update_order_status
from ordering.views.confirmation import confirmation_view
from ordering.views.history import order_history
from payments.gateway import get_gateway
from payments.gateway.relay_adapter import RelayGateway, UnknownPaymentSessionError
from payments.methods import payment_methods

_sessions: CheckoutSessions | None = None


def get_sessions() -> CheckoutSessions:
    global _sessions
    if _sessions is None:
        _sessions = CheckoutSessions()
    return _sessions


def reset_sessions() -> None:
    global _sessions
    _sessions = None


_FAILURE_STATUS_CODES = {
    FailureReason.VALIDATION_FAILED: 422,
    FailureReason.ORDERS_CLOSED: 409,
    FailureReason.USER_CANCELLED: 409,
    FailureReason.PAYMENT_FAILED: 402,
    FailureReason.PERSISTENCE_FAILED: 503,
    FailureReason.CRITICAL_PAYMENT_WITHOUT_ORDER: 500,
}


def _checkout_response(result: CheckoutResult | None, workflow=None, gateway_options=None) -> JSONResponse:
    if result is None:
        # Still suspended on the payment gateway
        body = CheckoutResponse(
            state=workflow.state.value,
            order_number=workflow.order_number,
            message="Awaiting payment",
            gateway_options=gateway_options,
        )
        return JSONResponse(status_code=202, content=body.model_dump())

    if result.state == CheckoutState.COMPLETE:
        status_code = 201
    elif result.state == CheckoutState.NEEDS_LOGIN:
        status_code = 401
    else:
        status_code = _FAILURE_STATUS_CODES.get(result.failure, 400)
    return JSONResponse(status_code=status_code, content=CheckoutResponse(**result.to_dict()).model_dump())


def _widget_options(order_number: str) -> dict | None:
    gateway = get_gateway()
    if isinstance(gateway, RelayGateway) and gateway.has_session(order_number):
        return gateway.widget_options(order_number)
    return None


def _relay_gateway() -> RelayGateway:
    gateway = get_gateway()
    if not isinstance(gateway, RelayGateway):
        raise HTTPException(status_code=409, detail="Payment callbacks are only relayed for the hosted gateway")
    return gateway


def _session_or_404(order_number: str):
    session = get_sessions().get(order_number)
    if session is None:
        raise HTTPException(status_code=404, detail=f"No checkout found for order {order_number}")
    return session


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.get("/payment-methods", response_model=list[PaymentMethodResponse])
async def list_payment_methods() -> list[PaymentMethodResponse]:
    return [
        PaymentMethodResponse(
            id=option.method.value,
            name=option.name,
            description=option.description,
            fee=option.fee,
            enabled=option.enabled,
        )
        for option in payment_methods()
    ]


@checkout_router.post("")
async def place_order(body: CheckoutRequest) -> JSONResponse:
    form = CheckoutForm(**body.form.model_dump())
    cart = [CartLine(**line.model_dump()) for line in body.cart]

    workflow, task = await get_sessions().start(form, cart, body.payment_method, body.user_id)
    if task.done():
        return _checkout_response(task.result())
    return _checkout_response(None, workflow, gateway_options=_widget_options(workflow.order_number))


@checkout_router.get("/{order_number}")
async def get_checkout(order_number: str) -> JSONResponse:
    workflow, task = _session_or_404(order_number)
    if task.done():
        return _checkout_response(task.result())
    return _checkout_response(None, workflow, gateway_options=_widget_options(order_number))


@checkout_router.delete("/{order_number}")
async def abandon_checkout(order_number: str) -> JSONResponse:
    _session_or_404(order_number)
    result = await get_sessions().abandon(order_number)
    return _checkout_response(result)


@checkout_router.post("/{order_number}/payment/success")
async def payment_succeeded(order_number: str, body: PaymentSuccessRequest) -> JSONResponse:
    _session_or_404(order_number)
    try:
        _relay_gateway().signal_success(order_number, body.payment_id, body.order_id, body.signature)
    except UnknownPaymentSessionError:
        raise HTTPException(status_code=404, detail=f"No open payment session for order {order_number}") from None
    return _checkout_response(await get_sessions().result(order_number))


@checkout_router.post("/{order_number}/payment/dismiss")
async def payment_dismissed(order_number: str) -> JSONResponse:
    _session_or_404(order_number)
    try:
        _relay_gateway().signal_dismiss(order_number)
    except UnknownPaymentSessionError:
        raise HTTPException(status_code=404, detail=f"No open payment session for order {order_number}") from None
    return _checkout_response(await get_sessions().result(order_number))


@checkout_router.post("/{order_number}/payment/failure")
async def payment_failed(order_number: str, body: PaymentFailureRequest) -> JSONResponse:
    _session_or_404(order_number)
    try:
        _relay_gateway().signal_failure(order_number, body.reason)
    except UnknownPaymentSessionError:
        raise HTTPException(status_code=404, detail=f"No open payment session for order {order_number}") from None
    return _checkout_response(await get_sessions().result(order_number))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("")
async def list_orders(user_id: str, status: str | None = None, search: str | None = None) -> list[dict]:
    orders = order_history(user_id, status=status, search=search, store=get_sessions().orders)
    return [order.snapshot() for order in orders]


@order_router.get("/{order_number}/confirmation", response_model=ConfirmationResponse)
async def get_confirmation(order_number: str) -> ConfirmationResponse:
    order = get_sessions().orders.get_by_order_number(order_number)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_number} not found")
    view = confirmation_view(order)
    return ConfirmationResponse(**asdict(view))


@order_router.put("/{order_number}/status")
async def change_order_status(order_number: str, body: UpdateOrderStatusRequest) -> dict:
    sessions = get_sessions()
    try:
        order = update_order_status(order_number, body.status, store=sessions.orders, dispatcher=sessions.dispatcher)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail=f"Order {order_number} not found") from None
    except (ValidationError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    return order.snapshot()


# ---------------------------------------------------------------------------
# Settings Router
# ---------------------------------------------------------------------------
settings_router = APIRouter(prefix="/settings", tags=["settings"])


@settings_router.get("", response_model=SettingsResponse)
async def get_settings() -> SettingsResponse:
    return SettingsResponse(**get_sessions().gate.store.get().to_view())


@settings_router.put("", response_model=SettingsResponse)
async def update_settings(body: UpdateSettingsRequest) -> SettingsResponse:
    settings = get_sessions().gate.store.set(
        accepting_orders=body.accepting_orders,
        maintenance_mode=body.maintenance_mode,
    )
    return SettingsResponse(**settings.to_view())
