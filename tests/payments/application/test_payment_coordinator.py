"""Tests for the payment coordinator — COD dispatch and the online suspension."""

import asyncio
from decimal import Decimal

import pytest
from payments.coordinator import GATEWAY_UNAVAILABLE, PaymentCoordinator, to_minor_units
from payments.gateway.fake_adapter import FakeBehaviour
from payments.gateway.port import GatewayHandlers, PaymentGateway, Prefill
from payments.methods import PaymentMethod
from payments.outcome import OutcomeKind
from shared.config import StorefrontConfig, set_config

CUSTOMER = Prefill(name="Asha Rao", email="asha@example.com", contact="9876543210")


class RecordingGateway(PaymentGateway):
    """Keeps the handlers so tests can fire any sequence of signals."""

    def __init__(self, load_error=None, open_error=None):
        self.load_error = load_error
        self.open_error = open_error
        self.handlers: GatewayHandlers | None = None
        self.closed: list[str] = []

    def load(self):
        if self.load_error:
            raise self.load_error
        return True

    def open(self, options, handlers):
        if self.open_error:
            raise self.open_error
        self.handlers = handlers

    def close(self, reference):
        self.closed.append(reference)


async def _start(coordinator, amount=2100, order_number="VK1"):
    """Begin an online payment and wait until the coordinator is suspended."""
    opened = asyncio.Event()
    task = asyncio.create_task(
        coordinator.pay(PaymentMethod.ONLINE, amount, CUSTOMER, order_number, on_open=opened.set)
    )
    await asyncio.wait_for(opened.wait(), timeout=1)
    return task


class TestMinorUnits:
    def test_rupees_to_paise(self):
        assert to_minor_units(2150) == 215000

    def test_fractional_amounts_round_half_up(self):
        assert to_minor_units(Decimal("10.005")) == 1001
        assert to_minor_units(0.105) == 11


@pytest.mark.asyncio
class TestCashOnDelivery:
    async def test_dispatched_without_gateway(self, gateway):
        outcome = await PaymentCoordinator().pay(PaymentMethod.COD, 2150, CUSTOMER, "VK1")

        assert outcome.kind == OutcomeKind.DISPATCHED
        assert gateway.calls == []


@pytest.mark.asyncio
class TestOnlinePayment:
    async def test_success_is_captured(self, gateway):
        outcome = await PaymentCoordinator().pay(PaymentMethod.ONLINE, 2100, CUSTOMER, "VK1")

        assert outcome.kind == OutcomeKind.CAPTURED
        assert outcome.gateway_payment_id.startswith("pay_fake_")

    async def test_widget_options(self, gateway):
        await PaymentCoordinator().pay(PaymentMethod.ONLINE, 2150, CUSTOMER, "VK1", notes={"address": "Srinagar"})

        options = gateway.opened[0]
        assert options.amount == 215000
        assert options.currency == "INR"
        assert options.merchant_name == "Vadi-e-Kashmir"
        assert options.description == "Order #VK1"
        assert options.reference == "VK1"
        assert options.prefill == CUSTOMER
        assert options.notes == {"address": "Srinagar", "orderNumber": "VK1"}

    async def test_currency_and_merchant_from_config(self, gateway):
        set_config(StorefrontConfig(currency="USD", merchant_name="Test Shop", environment="test"))

        await PaymentCoordinator().pay(PaymentMethod.ONLINE, 10, CUSTOMER, "VK1")

        assert gateway.opened[0].currency == "USD"
        assert gateway.opened[0].merchant_name == "Test Shop"

    async def test_dismiss_is_cancelled(self, gateway):
        gateway.configure(behaviour=FakeBehaviour.DISMISS)

        outcome = await PaymentCoordinator().pay(PaymentMethod.ONLINE, 2100, CUSTOMER, "VK1")

        assert outcome.kind == OutcomeKind.CANCELLED

    async def test_failure_carries_reason(self, gateway):
        gateway.configure(behaviour=FakeBehaviour.FAIL, failure_reason="Insufficient funds")

        outcome = await PaymentCoordinator().pay(PaymentMethod.ONLINE, 2100, CUSTOMER, "VK1")

        assert outcome.kind == OutcomeKind.FAILED
        assert outcome.reason == "Insufficient funds"

    async def test_unavailable_gateway(self, gateway):
        gateway.configure(available=False)

        outcome = await PaymentCoordinator().pay(PaymentMethod.ONLINE, 2100, CUSTOMER, "VK1")

        assert outcome.kind == OutcomeKind.FAILED
        assert outcome.reason == GATEWAY_UNAVAILABLE
        assert gateway.opened == []

    async def test_gateway_that_fails_to_load(self):
        coordinator = PaymentCoordinator(gateway=RecordingGateway(load_error=ConnectionError("script blocked")))

        outcome = await coordinator.pay(PaymentMethod.ONLINE, 2100, CUSTOMER, "VK1")

        assert outcome.reason == GATEWAY_UNAVAILABLE

    async def test_gateway_that_fails_to_open(self):
        coordinator = PaymentCoordinator(gateway=RecordingGateway(open_error=RuntimeError("widget crashed")))

        outcome = await coordinator.pay(PaymentMethod.ONLINE, 2100, CUSTOMER, "VK1")

        assert outcome.reason == GATEWAY_UNAVAILABLE
        assert coordinator.is_pending("VK1") is False

    async def test_success_without_payment_id_is_a_failure(self):
        gateway = RecordingGateway()
        coordinator = PaymentCoordinator(gateway=gateway)
        task = await _start(coordinator)

        gateway.handlers.on_success("")
        outcome = await asyncio.wait_for(task, timeout=1)

        assert outcome.kind == OutcomeKind.FAILED


@pytest.mark.asyncio
class TestSuspension:
    async def test_pending_until_signal(self, gateway):
        gateway.configure(behaviour=FakeBehaviour.MANUAL)
        coordinator = PaymentCoordinator()
        task = await _start(coordinator)

        assert coordinator.is_pending("VK1")
        assert not task.done()

        gateway.succeed("VK1", payment_id="pay_abc123")
        outcome = await asyncio.wait_for(task, timeout=1)

        assert outcome.gateway_payment_id == "pay_abc123"
        assert coordinator.is_pending("VK1") is False

    async def test_capture_keeps_gateway_order_id_and_signature(self, gateway):
        gateway.configure(behaviour=FakeBehaviour.MANUAL)
        coordinator = PaymentCoordinator()
        task = await _start(coordinator)

        gateway.succeed("VK1", payment_id="pay_abc123", order_id="order_rzp_1", signature="sig_abc")
        outcome = await asyncio.wait_for(task, timeout=1)

        assert outcome.gateway_order_id == "order_rzp_1"
        assert outcome.gateway_signature == "sig_abc"

    async def test_first_signal_wins(self):
        gateway = RecordingGateway()
        coordinator = PaymentCoordinator(gateway=gateway)
        task = await _start(coordinator)

        gateway.handlers.on_success("pay_first")
        gateway.handlers.on_dismiss()
        gateway.handlers.on_failure("late failure")
        outcome = await asyncio.wait_for(task, timeout=1)

        assert outcome.kind == OutcomeKind.CAPTURED
        assert outcome.gateway_payment_id == "pay_first"

    async def test_signal_from_another_thread(self, gateway):
        gateway.configure(behaviour=FakeBehaviour.MANUAL)
        coordinator = PaymentCoordinator()
        task = await _start(coordinator)

        await asyncio.to_thread(gateway.succeed, "VK1", "pay_thread")
        outcome = await asyncio.wait_for(task, timeout=1)

        assert outcome.gateway_payment_id == "pay_thread"

    async def test_abandon_settles_as_cancelled(self):
        gateway = RecordingGateway()
        coordinator = PaymentCoordinator(gateway=gateway)
        task = await _start(coordinator)

        assert coordinator.abandon("VK1") is True
        outcome = await asyncio.wait_for(task, timeout=1)

        assert outcome.kind == OutcomeKind.CANCELLED
        assert gateway.closed == ["VK1"]

    async def test_capture_after_abandon_is_not_reported(self):
        gateway = RecordingGateway()
        coordinator = PaymentCoordinator(gateway=gateway)
        task = await _start(coordinator)
        coordinator.abandon("VK1")

        gateway.handlers.on_success("pay_late")
        outcome = await asyncio.wait_for(task, timeout=1)
        await asyncio.sleep(0)

        assert outcome.kind == OutcomeKind.CANCELLED

    async def test_abandon_unknown_order(self):
        assert PaymentCoordinator(gateway=RecordingGateway()).abandon("VK404") is False

    async def test_cancelling_the_caller_closes_the_session(self):
        gateway = RecordingGateway()
        coordinator = PaymentCoordinator(gateway=gateway)
        task = await _start(coordinator)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert gateway.closed == ["VK1"]
        assert coordinator.is_pending("VK1") is False
