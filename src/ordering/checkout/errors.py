"""Checkout error taxonomy and exceptions."""

from enum import Enum


class ErrorKind(Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"  # customer fixes the form
    AUTH_REQUIRED = "AUTH_REQUIRED"  # customer logs in
    ORDERS_CLOSED = "ORDERS_CLOSED"  # store is not accepting orders
    PAYMENT_CANCELLED = "PAYMENT_CANCELLED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    PERSISTENCE_FAILED_NO_PAYMENT = "PERSISTENCE_FAILED_NO_PAYMENT"  # no money moved, safe to retry
    PERSISTENCE_FAILED_AFTER_PAYMENT = "PERSISTENCE_FAILED_AFTER_PAYMENT"  # money moved, never auto-retry
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"  # logged only

    @property
    def is_critical(self) -> bool:
        return self is ErrorKind.PERSISTENCE_FAILED_AFTER_PAYMENT


class CheckoutError(Exception):
    """Base class for checkout workflow errors."""


class CheckoutInProgressError(CheckoutError):
    """The workflow is already running; resubmission must wait."""


class CheckoutClosedError(CheckoutError):
    """The workflow reached a final state and cannot be submitted again."""


class OrderPersistenceError(CheckoutError):
    """The order store could not record the order."""
