import pytest
from notifications.channel import set_channel
from notifications.channel.fake_function import FakeFunctionAdapter
from ordering.checkout.request import CartLine
from ordering.checkout.validation import CheckoutForm
from ordering.settings.gate import SettingsStore
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from ordering.api.routes import reset_sessions
        from protean import current_domain

        reset_sessions()

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        for _, broker in current_domain.brokers.items():
            broker._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture()
def gateway():
    gateway = FakeGateway()
    set_gateway(gateway)
    return gateway


@pytest.fixture()
def email_channel():
    channel = FakeFunctionAdapter()
    set_channel(channel)
    return channel


@pytest.fixture()
def open_store():
    """Settings with the store accepting orders."""
    store = SettingsStore()
    store.set(accepting_orders=True)
    return store


@pytest.fixture()
def checkout_form():
    return CheckoutForm(
        first_name="Asha",
        last_name="Rao",
        email="asha@example.com",
        phone="9876543210",
        address1="12 Residency Road",
        address2="Near Lal Chowk",
        city="Srinagar",
        pincode="190001",
        state="Jammu and Kashmir",
    )


@pytest.fixture()
def cart():
    """Two grams of saffron at ₹1000: subtotal 2000, tax 100."""
    return [CartLine(product_id="saffron-1g", name="Kashmiri Saffron 1g", unit_price=1000, quantity=2)]
