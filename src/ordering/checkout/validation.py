"""Checkout form validation.

Rules run in a fixed order and the first failure wins, so the customer is
told about one problem at a time, top of the form first. The email check is
deliberately weak (non-empty and contains ``@``). Lengths are capped at what
an order can store, checked last.
"""

from dataclasses import dataclass, fields
from enum import Enum

from ordering.order.order import (
    MAX_ADDRESS_LENGTH,
    MAX_EMAIL_LENGTH,
    MAX_LOCALITY_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_PINCODE_LENGTH,
)


class FieldError(Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    MISSING_NAME = "MISSING_NAME"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_PHONE = "INVALID_PHONE"
    MISSING_ADDRESS = "MISSING_ADDRESS"
    INCOMPLETE_ADDRESS = "INCOMPLETE_ADDRESS"
    FIELD_TOO_LONG = "FIELD_TOO_LONG"
    EMPTY_CART = "EMPTY_CART"
    INVALID_CART = "INVALID_CART"


MIN_PHONE_LENGTH = 10


@dataclass
class CheckoutForm:
    """Shipping details typed in by the customer, edited one field at a time."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    pincode: str = ""
    state: str = ""

    def update(self, field_name: str, value: str) -> None:
        if field_name not in {f.name for f in fields(self)}:
            raise AttributeError(f"Unknown checkout field: {field_name}")
        setattr(self, field_name, value)

    @property
    def customer_name(self) -> str:
        return f"{self.first_name.strip()} {self.last_name.strip()}"


@dataclass(frozen=True)
class ValidationResult:
    error: FieldError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _filled(value) -> bool:
    return bool(value and str(value).strip())


def _limited_values(form: CheckoutForm):
    yield form.customer_name, MAX_NAME_LENGTH
    yield form.address1.strip(), MAX_ADDRESS_LENGTH
    yield (form.address2 or "").strip(), MAX_ADDRESS_LENGTH
    yield form.city.strip(), MAX_LOCALITY_LENGTH
    yield form.state.strip(), MAX_LOCALITY_LENGTH
    yield form.pincode.strip(), MAX_PINCODE_LENGTH


def validate(form: CheckoutForm, identity) -> ValidationResult:
    """Check the form for ``identity`` (an opaque user id, or None when anonymous)."""
    if not _filled(identity):
        return ValidationResult(FieldError.UNAUTHENTICATED)
    if not (_filled(form.first_name) and _filled(form.last_name)):
        return ValidationResult(FieldError.MISSING_NAME)
    if not _filled(form.email) or "@" not in form.email or len(form.email.strip()) > MAX_EMAIL_LENGTH:
        return ValidationResult(FieldError.INVALID_EMAIL)
    if not _filled(form.phone) or not MIN_PHONE_LENGTH <= len(form.phone.strip()) <= MAX_PHONE_LENGTH:
        return ValidationResult(FieldError.INVALID_PHONE)
    if not _filled(form.address1):
        return ValidationResult(FieldError.MISSING_ADDRESS)
    if not (_filled(form.city) and _filled(form.pincode) and _filled(form.state)):
        return ValidationResult(FieldError.INCOMPLETE_ADDRESS)
    if any(len(value) > limit for value, limit in _limited_values(form)):
        return ValidationResult(FieldError.FIELD_TOO_LONG)
    return ValidationResult()
