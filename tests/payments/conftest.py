import pytest
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.relay_adapter import RelayGateway


@pytest.fixture()
def gateway():
    gateway = FakeGateway()
    set_gateway(gateway)
    return gateway


@pytest.fixture()
def relay_gateway():
    gateway = RelayGateway("rzp_test_key")
    set_gateway(gateway)
    return gateway
