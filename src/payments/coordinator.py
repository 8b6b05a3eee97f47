"""Payment coordinator — one interface over online and cash-on-delivery payment.

Cash on delivery settles synchronously: nothing is captured, the order is
simply dispatched. Online payment opens the gateway widget and suspends the
caller on a future until the widget reports exactly one terminal signal:

    on_success(payment_id) → CAPTURED(payment_id)
    on_dismiss()           → CANCELLED
    on_failure(reason)     → FAILED(reason)

The coordinator never persists anything. It only reports what happened to
the money.
"""

import asyncio
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal

import structlog

from payments.gateway import get_gateway
from payments.gateway.port import CheckoutOptions, GatewayHandlers, PaymentGateway, Prefill
from payments.methods import PaymentMethod
from payments.outcome import PaymentOutcome
from shared.config import get_config

logger = structlog.get_logger(__name__)

GATEWAY_UNAVAILABLE = "gateway unavailable"
MINOR_UNITS_PER_UNIT = 100


def to_minor_units(amount) -> int:
    """Convert a storefront amount (rupees) to the gateway's minor unit (paise)."""
    minor = (Decimal(str(amount)) * MINOR_UNITS_PER_UNIT).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(minor)


class PaymentCoordinator:
    def __init__(
        self,
        gateway: PaymentGateway | None = None,
        currency: str | None = None,
        merchant_name: str | None = None,
    ) -> None:
        self._gateway = gateway
        self._currency = currency
        self._merchant_name = merchant_name
        self._pending: dict[str, tuple[PaymentGateway, asyncio.Future]] = {}

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway or get_gateway()

    def is_pending(self, order_number: str) -> bool:
        return order_number in self._pending

    async def pay(
        self,
        method: PaymentMethod,
        amount: int,
        customer: Prefill,
        order_number: str,
        notes: dict | None = None,
        on_open: Callable[[], None] | None = None,
    ) -> PaymentOutcome:
        """Settle ``amount`` (already including any surcharge) with ``method``.

        ``on_open`` is called once the gateway session is open and the
        coordinator is about to suspend.
        """
        method = PaymentMethod(method)
        if method == PaymentMethod.COD:
            logger.info("Cash on delivery selected, no capture step", order_number=order_number, amount=amount)
            return PaymentOutcome.dispatched()

        return await self._pay_online(amount, customer, order_number, notes or {}, on_open)

    async def _pay_online(self, amount, customer, order_number, notes, on_open) -> PaymentOutcome:
        gateway = self.gateway

        try:
            loaded = gateway.load()
        except Exception as e:
            logger.error("Payment gateway failed to load", order_number=order_number, error=str(e))
            loaded = False
        if not loaded:
            return PaymentOutcome.failed(GATEWAY_UNAVAILABLE)

        config = get_config()
        options = CheckoutOptions(
            amount=to_minor_units(amount),
            currency=self._currency or config.currency,
            merchant_name=self._merchant_name or config.merchant_name,
            description=f"Order #{order_number}",
            reference=order_number,
            prefill=customer,
            notes={**notes, "orderNumber": order_number},
        )

        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def resolve(outcome: PaymentOutcome) -> None:
            if future.done():
                if outcome.is_captured:
                    logger.error(
                        "Payment captured after the session was settled, reconcile manually",
                        order_number=order_number,
                        gateway_payment_id=outcome.gateway_payment_id,
                    )
                else:
                    logger.warning(
                        "Ignoring payment signal for settled session",
                        order_number=order_number,
                        outcome=outcome.kind.value,
                    )
                return
            future.set_result(outcome)

        def signal(outcome: PaymentOutcome) -> None:
            # Widget callbacks may arrive on another thread
            loop.call_soon_threadsafe(resolve, outcome)

        def on_success(payment_id: str, order_id: str | None = None, signature: str | None = None) -> None:
            if payment_id:
                signal(PaymentOutcome.captured(payment_id, gateway_order_id=order_id, gateway_signature=signature))
            else:
                signal(PaymentOutcome.failed("gateway reported success without a payment id"))

        handlers = GatewayHandlers(
            on_success=on_success,
            on_dismiss=lambda: signal(PaymentOutcome.cancelled()),
            on_failure=lambda reason: signal(PaymentOutcome.failed(reason)),
        )

        self._pending[order_number] = (gateway, future)
        try:
            try:
                gateway.open(options, handlers)
            except Exception as e:
                logger.error("Payment gateway failed to open", order_number=order_number, error=str(e))
                return PaymentOutcome.failed(GATEWAY_UNAVAILABLE)

            # Let signals fired from inside open() settle before reporting a suspension
            await asyncio.sleep(0)
            if not future.done():
                logger.info("Awaiting payment confirmation", order_number=order_number, amount_minor=options.amount)
                if on_open is not None:
                    on_open()

            try:
                return await future
            except asyncio.CancelledError:
                gateway.close(order_number)
                raise
        finally:
            self._pending.pop(order_number, None)

    def abandon(self, order_number: str) -> bool:
        """Close the gateway session for ``order_number`` and settle it as cancelled.

        Returns False when no payment is in flight for that order.
        """
        pending = self._pending.get(order_number)
        if pending is None:
            return False

        gateway, future = pending
        gateway.close(order_number)
        if not future.done():
            future.set_result(PaymentOutcome.cancelled())
        logger.info("Payment abandoned by caller", order_number=order_number)
        return True
