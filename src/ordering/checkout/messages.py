"""Customer-facing wording for checkout results.

The critical case (payment taken, order not recorded) has its own wording
so it can never be mistaken for an ordinary failure.
"""

from ordering.checkout.validation import FieldError

LOGIN_REQUIRED = "Please login to place an order"
ORDERS_CLOSED = "We are not accepting orders right now. Please check back soon."
PAYMENT_CANCELLED = "Payment cancelled"
GENERIC_FAILURE = "An error occurred while placing the order"

FIELD_ERROR_MESSAGES = {
    FieldError.UNAUTHENTICATED: LOGIN_REQUIRED,
    FieldError.MISSING_NAME: "Please enter your full name",
    FieldError.INVALID_EMAIL: "Please enter a valid email address",
    FieldError.INVALID_PHONE: "Please enter a valid phone number",
    FieldError.MISSING_ADDRESS: "Please enter your address",
    FieldError.INCOMPLETE_ADDRESS: "Please complete your address details",
    FieldError.FIELD_TOO_LONG: "Some of your details are too long. Please shorten them",
    FieldError.EMPTY_CART: "Your cart is empty",
    FieldError.INVALID_CART: "Some items in your cart cannot be ordered. Please review your cart",
}


def field_error_message(error: FieldError) -> str:
    return FIELD_ERROR_MESSAGES.get(error, GENERIC_FAILURE)


def payment_failed(reason: str | None) -> str:
    if reason:
        return f"Payment failed: {reason}. Please try again or choose Cash on Delivery."
    return "Payment failed. Please try again or choose Cash on Delivery."


def order_not_saved(detail: str | None) -> str:
    return f"Failed to place order: {detail or 'Please try again.'}"


def payment_taken_order_missing(order_number: str | None, gateway_payment_id: str | None) -> str:
    return (
        "Payment received but order creation failed. Contact support "
        f"with payment reference {gateway_payment_id or 'unknown'} (order {order_number or 'unknown'}). "
        "Please do not pay again."
    )


def order_placed(order_number: str, paid_online: bool) -> str:
    if paid_online:
        return f"Payment successful! Order placed. Order ID: {order_number}"
    return f"Order placed successfully! Order ID: {order_number}"
