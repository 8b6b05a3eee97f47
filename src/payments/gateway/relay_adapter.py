"""Hosted checkout relay gateway.

The real payment widget runs in the customer's browser. This adapter keeps
the server-side half of each session: ``open()`` records the widget options
for the browser to fetch, and the widget's terminal callbacks are relayed
back through the payments API, which calls ``signal_success()``,
``signal_dismiss()`` or ``signal_failure()``.
"""

from dataclasses import asdict
from threading import Lock

import structlog

from payments.gateway.port import CheckoutOptions, GatewayHandlers, PaymentGateway

logger = structlog.get_logger(__name__)


class UnknownPaymentSessionError(KeyError):
    """No open payment session exists for the given order reference."""


class RelayGateway(PaymentGateway):
    """Gateway adapter that relays browser widget callbacks."""

    def __init__(self, key_id: str | None) -> None:
        self.key_id = key_id
        self._sessions: dict[str, tuple[CheckoutOptions, GatewayHandlers]] = {}
        self._lock = Lock()

    def load(self) -> bool:
        if not self.key_id:
            logger.warning("Payment gateway key is not configured")
            return False
        return True

    def open(self, options: CheckoutOptions, handlers: GatewayHandlers) -> None:
        with self._lock:
            self._sessions[options.reference] = (options, handlers)
        logger.info("Payment session opened", reference=options.reference, amount=options.amount)

    def close(self, reference: str) -> None:
        with self._lock:
            self._sessions.pop(reference, None)

    def widget_options(self, reference: str) -> dict:
        """Options the browser passes to the widget for an open session."""
        options, _ = self._get(reference)
        return {"key": self.key_id, **asdict(options)}

    def has_session(self, reference: str) -> bool:
        with self._lock:
            return reference in self._sessions

    # -------------------------------------------------------------------
    # Relayed widget callbacks
    # -------------------------------------------------------------------
    def signal_success(
        self,
        reference: str,
        payment_id: str,
        order_id: str | None = None,
        signature: str | None = None,
    ) -> None:
        _, handlers = self._take(reference)
        handlers.on_success(payment_id, order_id, signature)

    def signal_dismiss(self, reference: str) -> None:
        _, handlers = self._take(reference)
        handlers.on_dismiss()

    def signal_failure(self, reference: str, reason: str) -> None:
        _, handlers = self._take(reference)
        handlers.on_failure(reason)

    def _get(self, reference: str) -> tuple[CheckoutOptions, GatewayHandlers]:
        with self._lock:
            try:
                return self._sessions[reference]
            except KeyError:
                raise UnknownPaymentSessionError(reference) from None

    def _take(self, reference: str) -> tuple[CheckoutOptions, GatewayHandlers]:
        # A session accepts a single terminal callback
        with self._lock:
            try:
                return self._sessions.pop(reference)
            except KeyError:
                raise UnknownPaymentSessionError(reference) from None
