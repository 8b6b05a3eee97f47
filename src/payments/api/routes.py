"""FastAPI routes for the Payments context — gateway inspection and test controls."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from payments.api.schemas import ConfigureGatewayRequest, GatewayConfigResponse, WidgetOptionsResponse
from payments.gateway import get_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.relay_adapter import RelayGateway, UnknownPaymentSessionError
from shared.config import get_config

payment_router = APIRouter(prefix="/payments", tags=["payments"])


@payment_router.get("/gateway", response_model=GatewayConfigResponse)
async def describe_gateway() -> GatewayConfigResponse:
    gateway = get_gateway()
    if isinstance(gateway, FakeGateway):
        return GatewayConfigResponse(
            gateway=type(gateway).__name__,
            behaviour=gateway.behaviour.value,
            available=gateway.available,
            failure_reason=gateway.failure_reason,
        )
    return GatewayConfigResponse(gateway=type(gateway).__name__, available=gateway.load())


@payment_router.get("/sessions/{order_number}", response_model=WidgetOptionsResponse)
async def get_widget_options(order_number: str) -> WidgetOptionsResponse:
    """Options the browser needs to open the payment widget for an order."""
    gateway = get_gateway()
    if isinstance(gateway, RelayGateway):
        try:
            return WidgetOptionsResponse(**gateway.widget_options(order_number))
        except UnknownPaymentSessionError:
            pass
    elif isinstance(gateway, FakeGateway):
        for options in gateway.opened:
            if options.reference == order_number and order_number in gateway.sessions:
                return WidgetOptionsResponse(**asdict(options))
    raise HTTPException(status_code=404, detail=f"No open payment session for order {order_number}")


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only).

    This endpoint is only available when PROTEAN_ENV is not 'production'.
    It allows switching between success, dismissal, failure and manual
    signalling for manual API testing.
    """
    if get_config().is_production:
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        behaviour=body.behaviour,
        available=body.available,
        failure_reason=body.failure_reason,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        behaviour=gateway.behaviour.value,
        available=gateway.available,
        failure_reason=gateway.failure_reason,
    )
