"""Tests for fire-and-forget notification dispatch."""

import pytest
from notifications.dispatcher import NotificationDispatcher
from notifications.email import EmailService, NotificationKind


class ExplodingEmailService(EmailService):
    def send(self, kind, order_data):
        raise RuntimeError("template missing")


@pytest.mark.asyncio
class TestFireAndForget:
    async def test_returns_before_sending(self, email_channel, order_data):
        dispatcher = NotificationDispatcher()

        dispatcher.fire_and_forget(NotificationKind.ORDER_CONFIRMATION, order_data)

        assert dispatcher.pending == 1
        assert email_channel.executions == []
        await dispatcher.drain()
        assert dispatcher.pending == 0
        assert len(email_channel.of_type("order_confirmation")) == 1

    async def test_sends_a_copy_of_the_snapshot(self, email_channel, order_data):
        dispatcher = NotificationDispatcher()

        dispatcher.fire_and_forget("status_update", order_data)
        order_data["status"] = "Shipped"
        await dispatcher.drain()

        assert email_channel.executions[0]["body"]["orderData"]["status"] == "Processing"

    async def test_delivery_failure_is_contained(self, email_channel, order_data):
        email_channel.configure(should_succeed=False, raise_errors=True)
        dispatcher = NotificationDispatcher()

        dispatcher.fire_and_forget(NotificationKind.ADMIN_NOTIFICATION, order_data)
        await dispatcher.drain()

        assert dispatcher.pending == 0

    async def test_crashing_service_is_contained(self, order_data):
        dispatcher = NotificationDispatcher(email_service=ExplodingEmailService())

        dispatcher.fire_and_forget(NotificationKind.ORDER_CONFIRMATION, order_data)
        await dispatcher.drain()

        assert dispatcher.pending == 0

    async def test_one_failure_does_not_stop_the_other(self, email_channel, order_data):
        dispatcher = NotificationDispatcher()
        email_channel.configure(should_succeed=False)

        dispatcher.fire_and_forget(NotificationKind.ORDER_CONFIRMATION, order_data)
        await dispatcher.drain()
        email_channel.configure(should_succeed=True)
        dispatcher.fire_and_forget(NotificationKind.ADMIN_NOTIFICATION, order_data)
        await dispatcher.drain()

        assert [e["body"]["type"] for e in email_channel.executions] == ["admin_notification"]


class TestWithoutEventLoop:
    def test_scheduling_outside_a_loop_is_dropped(self, email_channel, order_data):
        dispatcher = NotificationDispatcher()

        dispatcher.fire_and_forget(NotificationKind.ORDER_CONFIRMATION, order_data)

        assert dispatcher.pending == 0
        assert email_channel.executions == []

    def test_unknown_kind_is_dropped(self, order_data):
        dispatcher = NotificationDispatcher()

        dispatcher.fire_and_forget("carrier_pigeon", order_data)

        assert dispatcher.pending == 0
