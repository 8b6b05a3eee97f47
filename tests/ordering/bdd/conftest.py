"""Shared BDD fixtures and step definitions for checkout and orders."""

import pytest
from ordering.checkout.request import CartLine, build_order_request
from ordering.checkout.validation import CheckoutForm
from ordering.order.order import Order
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


def _completed_form():
    return CheckoutForm(
        first_name="Asha",
        last_name="Rao",
        email="asha@example.com",
        phone="9876543210",
        address1="12 Residency Road",
        address2="Near Lal Chowk",
        city="Srinagar",
        pincode="190001",
        state="Jammu and Kashmir",
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a completed checkout form", target_fixture="form")
def completed_form():
    return _completed_form()


@given(parsers.parse('a placed order in status "{status}"'), target_fixture="order")
def placed_order(status):
    cart = [CartLine(product_id="saffron-1g", name="Kashmiri Saffron 1g", unit_price=1000, quantity=1)]
    request = build_order_request(_completed_form(), cart, "COD", "user-001")
    order = Order.place(request, "VK1700000000000-ABC123")
    order.status = status
    order._events.clear()
    return order


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the change is refused")
def change_refused(error):
    assert error["exc"] is not None
    assert isinstance(error["exc"], ValidationError)
