"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer) — separate from the
internal checkout types.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class CheckoutFormSchema(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address1: str = ""
    address2: str = ""
    city: str = ""
    pincode: str = ""
    state: str = ""


class CartLineSchema(BaseModel):
    product_id: str
    name: str
    unit_price: int = Field(ge=0)
    quantity: int = Field(ge=1)
    image_ref: str = ""


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    user_id: str | None = None
    form: CheckoutFormSchema
    cart: list[CartLineSchema]
    payment_method: str = Field(pattern="^(ONLINE|COD)$")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-001",
                    "form": {
                        "first_name": "Asha",
                        "last_name": "Rao",
                        "email": "asha@example.com",
                        "phone": "9876543210",
                        "address1": "12 Residency Road",
                        "city": "Srinagar",
                        "pincode": "190001",
                        "state": "Jammu and Kashmir",
                    },
                    "cart": [{"product_id": "saffron-1g", "name": "Saffron 1g", "unit_price": 1000, "quantity": 2}],
                    "payment_method": "COD",
                }
            ]
        }
    }


class PaymentSuccessRequest(BaseModel):
    payment_id: str = Field(min_length=1)
    order_id: str | None = None
    signature: str | None = None


class PaymentFailureRequest(BaseModel):
    reason: str = "Payment failed"


class CheckoutResponse(BaseModel):
    state: str
    order_number: str | None = None
    failure: str | None = None
    error_kind: str | None = None
    field_error: str | None = None
    critical: bool = False
    gateway_payment_id: str | None = None
    message: str
    order: dict | None = None
    gateway_options: dict | None = None


class PaymentMethodResponse(BaseModel):
    id: str
    name: str
    description: str
    fee: int
    enabled: bool


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class UpdateOrderStatusRequest(BaseModel):
    status: str


class ConfirmationResponse(BaseModel):
    order_number: str
    greeting_name: str
    item_count: int
    payment_label: str
    total: int
    shipping_address: str
    email: str


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
class UpdateSettingsRequest(BaseModel):
    accepting_orders: bool | None = None
    maintenance_mode: bool | None = None


class SettingsResponse(BaseModel):
    accepting_orders: bool
    maintenance_mode: bool
    updated_at: str | None = None
