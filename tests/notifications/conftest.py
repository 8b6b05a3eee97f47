import pytest
from notifications.channel import set_channel
from notifications.channel.fake_function import FakeFunctionAdapter


@pytest.fixture()
def email_channel():
    channel = FakeFunctionAdapter()
    set_channel(channel)
    return channel


@pytest.fixture()
def order_data():
    return {
        "order_number": "VK1700000000000-ABC123",
        "customer_name": "Asha Rao",
        "email": "asha@example.com",
        "total": 2150,
        "status": "Processing",
        "items": [{"product_name": "Kashmiri Saffron 1g", "price": 1000, "quantity": 2}],
    }
