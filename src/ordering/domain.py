"""Ordering bounded context — checkout, order history and confirmation.

Holds the Order aggregate (CQRS), the storefront settings singleton and
the order placement workflow that sequences validation, payment,
persistence and notifications.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
