"""Tests for staff order status updates and the status email."""

import pytest
from notifications.dispatcher import NotificationDispatcher
from ordering.checkout.request import build_order_request
from ordering.order.order import OrderStatus
from ordering.order.status import UpdateOrderStatus, update_order_status
from ordering.order.store import OrderStore
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def order(checkout_form, cart):
    request = build_order_request(checkout_form, cart, "COD", "user-001")
    return OrderStore().create(request, "VK1000")


class TestUpdateOrderStatus:
    def test_status_is_saved(self, order):
        update_order_status("VK1000", "Confirmed")

        assert OrderStore().get_by_order_number("VK1000").status == OrderStatus.CONFIRMED.value

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            update_order_status("VK404", "Confirmed")

    def test_invalid_transition_is_not_saved(self, order):
        with pytest.raises(ValidationError):
            update_order_status("VK1000", "Delivered")

        assert OrderStore().get_by_order_number("VK1000").status == OrderStatus.PROCESSING.value

    @pytest.mark.asyncio
    async def test_customer_is_emailed(self, order, email_channel):
        dispatcher = NotificationDispatcher()

        update_order_status("VK1000", "Shipped", dispatcher=dispatcher)
        await dispatcher.drain()

        updates = email_channel.of_type("status_update")
        assert len(updates) == 1
        assert updates[0]["body"]["orderData"]["status"] == "Shipped"

    def test_email_outside_event_loop_is_dropped(self, order, email_channel):
        order = update_order_status("VK1000", "Confirmed", dispatcher=NotificationDispatcher())

        assert order.status == OrderStatus.CONFIRMED.value
        assert email_channel.executions == []


class TestUpdateOrderStatusCommand:
    def test_processing_moves_the_order(self, order):
        current_domain.process(UpdateOrderStatus(order_number="VK1000", status="Shipped"), asynchronous=False)

        assert OrderStore().get_by_order_number("VK1000").status == OrderStatus.SHIPPED.value

    def test_unknown_order(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(UpdateOrderStatus(order_number="VK404", status="Shipped"), asynchronous=False)
