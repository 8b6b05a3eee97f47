"""Email triggers — order emails delivered by the hosted email function.

Each trigger executes the function asynchronously with a JSON body of the
form ``{"type": <kind>, "orderData": <order snapshot>}`` and reports the
result as ``{"success": True, "execution_id": ...}`` or
``{"success": False, "error": ...}``. Triggers never raise.
"""

import json
from enum import Enum

import structlog

from notifications.channel import get_channel
from shared.config import get_config

logger = structlog.get_logger(__name__)


class NotificationKind(Enum):
    ORDER_CONFIRMATION = "order_confirmation"
    STATUS_UPDATE = "status_update"
    ADMIN_NOTIFICATION = "admin_notification"


class EmailService:
    def __init__(self, channel=None, function_id: str | None = None):
        self._channel = channel
        self._function_id = function_id

    @property
    def function_id(self) -> str:
        return self._function_id or get_config().email_function_id

    def send(self, kind: NotificationKind, order_data: dict) -> dict:
        kind = NotificationKind(kind)
        channel = self._channel or get_channel()
        body = json.dumps({"type": kind.value, "orderData": order_data}, default=str)

        try:
            result = channel.create_execution(self.function_id, body, asynchronous=True)
        except Exception as e:
            logger.error("Email trigger failed", kind=kind.value, error=str(e))
            return {"success": False, "error": str(e)}

        if result.get("status") == "failed":
            error = result.get("error", "Unknown function error")
            logger.error("Email trigger failed", kind=kind.value, error=error)
            return {"success": False, "error": error}

        logger.info(
            "Email triggered",
            kind=kind.value,
            execution_id=result.get("execution_id"),
            order_number=order_data.get("order_number"),
        )
        return {"success": True, "execution_id": result.get("execution_id")}

    def send_order_confirmation(self, order_data: dict) -> dict:
        return self.send(NotificationKind.ORDER_CONFIRMATION, order_data)

    def send_status_update(self, order_data: dict) -> dict:
        return self.send(NotificationKind.STATUS_UPDATE, order_data)

    def notify_admin(self, order_data: dict) -> dict:
        return self.send(NotificationKind.ADMIN_NOTIFICATION, order_data)

    def send_new_order_emails(self, order_data: dict) -> dict:
        """Customer confirmation plus the admin notification for a new order."""
        return {
            "customer_email": self.send_order_confirmation(order_data),
            "admin_email": self.notify_admin(order_data),
        }
