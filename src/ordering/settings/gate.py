"""Settings store and the checkout gate built on it.

The gate fails closed: if the settings cannot be read, the store is
treated as not accepting orders.
"""

import structlog
from protean.domain import Domain
from protean.exceptions import ObjectNotFoundError

from ordering.domain import ordering
from ordering.settings.management import InitializeSettings, UpdateSettings
from ordering.settings.settings import SETTINGS_ID, AppSettings

logger = structlog.get_logger(__name__)


class SettingsStore:
    def __init__(self, domain: Domain = ordering):
        self._domain = domain

    def get(self) -> AppSettings:
        """Return the settings record, creating it with defaults on first read."""
        with self._domain.domain_context():
            repo = self._domain.repository_for(AppSettings)
            try:
                return repo.get(SETTINGS_ID)
            except ObjectNotFoundError:
                self._domain.process(InitializeSettings(), asynchronous=False)
                return repo.get(SETTINGS_ID)

    def set(self, accepting_orders=None, maintenance_mode=None) -> AppSettings:
        """Update the given flags and return the stored record."""
        with self._domain.domain_context():
            self._domain.process(
                UpdateSettings(accepting_orders=accepting_orders, maintenance_mode=maintenance_mode),
                asynchronous=False,
            )
            settings = self._domain.repository_for(AppSettings).get(SETTINGS_ID)
        logger.info(
            "App settings updated",
            accepting_orders=settings.accepting_orders,
            maintenance_mode=settings.maintenance_mode,
        )
        return settings


class SettingsGate:
    def __init__(self, store: SettingsStore | None = None):
        self.store = store or SettingsStore()

    def is_accepting_orders(self) -> bool:
        try:
            settings = self.store.get()
        except Exception as e:
            logger.error("Could not read app settings, refusing orders", error=str(e))
            return False
        return bool(settings.accepting_orders)
