"""AppSettings aggregate — storefront-wide switches.

A single record (identifier ``app_settings``) holds the flags that gate
checkout. It is created lazily with conservative defaults: a fresh store
does not accept orders until an operator opens it.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, String

from ordering.domain import ordering

SETTINGS_ID = "app_settings"


@ordering.aggregate
class AppSettings:
    settings_id = String(identifier=True, required=True, max_length=50)
    accepting_orders = Boolean(default=False)
    maintenance_mode = Boolean(default=False)
    updated_at = DateTime()

    @classmethod
    def create_default(cls):
        return cls(
            settings_id=SETTINGS_ID,
            accepting_orders=False,
            maintenance_mode=False,
            updated_at=datetime.now(UTC),
        )

    def update(self, accepting_orders=None, maintenance_mode=None):
        """Apply a partial update. Pass None to keep a flag unchanged."""
        if accepting_orders is not None:
            self.accepting_orders = bool(accepting_orders)
        if maintenance_mode is not None:
            self.maintenance_mode = bool(maintenance_mode)
        self.updated_at = datetime.now(UTC)

    def to_view(self) -> dict:
        return {
            "accepting_orders": self.accepting_orders,
            "maintenance_mode": self.maintenance_mode,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
