"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A checkout completed and the order was recorded."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line dicts
    total = Float(required=True)
    payment_method = String(required=True)
    payment_status = String(required=True)
    gateway_payment_id = String()
    placed_at = DateTime(required=True)
