import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from ordering.api.routes import checkout_router, order_router, settings_router
from payments.gateway import set_gateway
from payments.gateway.relay_adapter import RelayGateway


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(settings_router)
    # One event loop for the whole test so suspended checkouts survive between requests
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def relay_gateway():
    gateway = RelayGateway("rzp_test_key")
    set_gateway(gateway)
    return gateway


@pytest.fixture()
def store_open(client):
    response = client.put("/settings", json={"accepting_orders": True})
    assert response.status_code == 200


@pytest.fixture()
def checkout_payload():
    def _payload(payment_method="COD", user_id="user-001", **form_overrides):
        form = {
            "first_name": "Asha",
            "last_name": "Rao",
            "email": "asha@example.com",
            "phone": "9876543210",
            "address1": "12 Residency Road",
            "address2": "",
            "city": "Srinagar",
            "pincode": "190001",
            "state": "Jammu and Kashmir",
        }
        form.update(form_overrides)
        return {
            "user_id": user_id,
            "form": form,
            "cart": [{"product_id": "saffron-1g", "name": "Kashmiri Saffron 1g", "unit_price": 1000, "quantity": 2}],
            "payment_method": payment_method,
        }

    return _payload
