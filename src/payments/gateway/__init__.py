"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- RelayGateway when a gateway key is configured (hosted browser widget)
- FakeGateway otherwise, for development and testing
"""

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway
from payments.gateway.relay_adapter import RelayGateway
from shared.config import get_config

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, building it from config on first use."""
    global _current_gateway
    if _current_gateway is None:
        key_id = get_config().gateway_key_id
        _current_gateway = RelayGateway(key_id) if key_id else FakeGateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
