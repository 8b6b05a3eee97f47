"""Integration tests for the checkout API via TestClient."""

from payments.gateway.fake_adapter import FakeBehaviour


class TestPaymentMethods:
    def test_lists_both_methods(self, client):
        response = client.get("/checkout/payment-methods")

        assert response.status_code == 200
        methods = {m["id"]: m for m in response.json()}
        assert set(methods) == {"ONLINE", "COD"}
        assert methods["COD"]["fee"] == 50
        assert methods["ONLINE"]["fee"] == 0


class TestCashOnDeliveryCheckout:
    def test_order_placed(self, client, store_open, checkout_payload):
        response = client.post("/checkout", json=checkout_payload("COD"))

        assert response.status_code == 201
        data = response.json()
        assert data["state"] == "Complete"
        assert data["order"]["total"] == 2150
        assert data["order"]["payment_status"] == "Pending"
        assert data["message"] == f"Order placed successfully! Order ID: {data['order_number']}"

    def test_result_can_be_fetched_again(self, client, store_open, checkout_payload):
        order_number = client.post("/checkout", json=checkout_payload("COD")).json()["order_number"]

        response = client.get(f"/checkout/{order_number}")

        assert response.status_code == 201
        assert response.json()["order_number"] == order_number

    def test_store_closed_by_default(self, client, checkout_payload):
        response = client.post("/checkout", json=checkout_payload("COD"))

        assert response.status_code == 409
        assert response.json()["error_kind"] == "ORDERS_CLOSED"
        assert client.get("/orders", params={"user_id": "user-001"}).json() == []

    def test_anonymous_customer(self, client, store_open, checkout_payload):
        response = client.post("/checkout", json=checkout_payload("COD", user_id=None))

        assert response.status_code == 401
        assert response.json()["error_kind"] == "AUTH_REQUIRED"

    def test_invalid_form(self, client, store_open, checkout_payload):
        response = client.post("/checkout", json=checkout_payload("COD", email="asha.example.com"))

        assert response.status_code == 422
        data = response.json()
        assert data["field_error"] == "INVALID_EMAIL"
        assert data["message"] == "Please enter a valid email address"

    def test_unknown_payment_method(self, client, store_open, checkout_payload):
        assert client.post("/checkout", json=checkout_payload("CHEQUE")).status_code == 422


class TestOnlineCheckout:
    def test_awaits_payment_then_records_order(self, client, store_open, relay_gateway, checkout_payload):
        response = client.post("/checkout", json=checkout_payload("ONLINE"))

        assert response.status_code == 202
        data = response.json()
        order_number = data["order_number"]
        assert data["state"] == "Awaiting_Payment"
        assert data["gateway_options"]["key"] == "rzp_test_key"
        assert data["gateway_options"]["amount"] == 210000
        assert client.get("/orders", params={"user_id": "user-001"}).json() == []

        response = client.post(f"/checkout/{order_number}/payment/success", json={"payment_id": "pay_abc123"})

        assert response.status_code == 201
        order = response.json()["order"]
        assert order["payment_status"] == "Paid"
        assert order["gateway_payment_id"] == "pay_abc123"
        assert len(client.get("/orders", params={"user_id": "user-001"}).json()) == 1

    def test_success_callback_keeps_gateway_order_id(self, client, store_open, relay_gateway, checkout_payload):
        order_number = client.post("/checkout", json=checkout_payload("ONLINE")).json()["order_number"]

        response = client.post(
            f"/checkout/{order_number}/payment/success",
            json={"payment_id": "pay_abc123", "order_id": "order_rzp_9", "signature": "sig_abc"},
        )

        assert response.status_code == 201
        order = response.json()["order"]
        assert order["gateway_order_id"] == "order_rzp_9"
        assert "gateway_signature" not in order

    def test_pending_checkout_can_be_polled(self, client, store_open, relay_gateway, checkout_payload):
        order_number = client.post("/checkout", json=checkout_payload("ONLINE")).json()["order_number"]

        response = client.get(f"/checkout/{order_number}")

        assert response.status_code == 202
        assert response.json()["gateway_options"]["reference"] == order_number
        client.delete(f"/checkout/{order_number}")

    def test_dismissed(self, client, store_open, relay_gateway, checkout_payload):
        order_number = client.post("/checkout", json=checkout_payload("ONLINE")).json()["order_number"]

        response = client.post(f"/checkout/{order_number}/payment/dismiss")

        assert response.status_code == 409
        assert response.json()["message"] == "Payment cancelled"
        assert client.get("/orders", params={"user_id": "user-001"}).json() == []

    def test_failed(self, client, store_open, relay_gateway, checkout_payload):
        order_number = client.post("/checkout", json=checkout_payload("ONLINE")).json()["order_number"]

        response = client.post(f"/checkout/{order_number}/payment/failure", json={"reason": "Card declined"})

        assert response.status_code == 402
        assert response.json()["error_kind"] == "PAYMENT_FAILED"
        assert "Card declined" in response.json()["message"]

    def test_abandoned(self, client, store_open, relay_gateway, checkout_payload):
        order_number = client.post("/checkout", json=checkout_payload("ONLINE")).json()["order_number"]

        response = client.delete(f"/checkout/{order_number}")

        assert response.status_code == 409
        assert response.json()["failure"] == "user_cancelled"
        assert relay_gateway.has_session(order_number) is False

    def test_second_callback_is_refused(self, client, store_open, relay_gateway, checkout_payload):
        order_number = client.post("/checkout", json=checkout_payload("ONLINE")).json()["order_number"]
        client.post(f"/checkout/{order_number}/payment/success", json={"payment_id": "pay_abc123"})

        response = client.post(f"/checkout/{order_number}/payment/dismiss")

        assert response.status_code == 404

    def test_unknown_checkout(self, client, relay_gateway):
        response = client.post("/checkout/VK404/payment/success", json={"payment_id": "pay_abc123"})
        assert response.status_code == 404

    def test_fake_gateway_settles_inside_the_request(self, client, store_open, gateway, checkout_payload):
        response = client.post("/checkout", json=checkout_payload("ONLINE"))

        assert response.status_code == 201
        assert response.json()["order"]["payment_status"] == "Paid"

    def test_callbacks_need_the_hosted_gateway(self, client, store_open, gateway, checkout_payload):
        gateway.configure(behaviour=FakeBehaviour.DISMISS)
        order_number = client.post("/checkout", json=checkout_payload("ONLINE")).json()["order_number"]

        response = client.post(f"/checkout/{order_number}/payment/success", json={"payment_id": "pay_abc123"})

        assert response.status_code == 409
