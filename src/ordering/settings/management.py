"""Store settings management — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.settings.settings import SETTINGS_ID, AppSettings

logger = structlog.get_logger(__name__)


@ordering.command(part_of="AppSettings")
class InitializeSettings:
    """Create the settings record with its closed-store defaults."""

    settings_id = String(max_length=50, default=SETTINGS_ID)


@ordering.command(part_of="AppSettings")
class UpdateSettings:
    """Flip store switches. Unset flags keep their current value."""

    settings_id = String(max_length=50, default=SETTINGS_ID)
    accepting_orders = Boolean()
    maintenance_mode = Boolean()


@ordering.command_handler(part_of=AppSettings)
class AppSettingsHandler:
    @handle(InitializeSettings)
    def initialize(self, command):
        self._get_or_create()

    @handle(UpdateSettings)
    def update(self, command):
        settings = self._get_or_create()
        settings.update(
            accepting_orders=command.accepting_orders,
            maintenance_mode=command.maintenance_mode,
        )
        current_domain.repository_for(AppSettings).add(settings)

    def _get_or_create(self) -> AppSettings:
        repo = current_domain.repository_for(AppSettings)
        try:
            return repo.get(SETTINGS_ID)
        except ObjectNotFoundError:
            settings = AppSettings.create_default()
            repo.add(settings)
            logger.info("Initialized default app settings", accepting_orders=settings.accepting_orders)
            return settings
