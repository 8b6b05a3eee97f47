"""Fire-and-forget notification dispatch.

Notifications run as detached asyncio tasks so the caller never waits on
them. The blocking function call runs in a worker thread. Failures are
logged here and never propagate to the caller.
"""

import asyncio

import structlog

from notifications.email import EmailService, NotificationKind

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Schedules order emails without blocking or failing the caller."""

    def __init__(self, email_service: EmailService | None = None):
        self.email_service = email_service or EmailService()
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def fire_and_forget(self, kind: NotificationKind, order_snapshot: dict) -> None:
        """Schedule one email of ``kind`` for ``order_snapshot`` and return at once."""
        try:
            kind = NotificationKind(kind)
            task = asyncio.get_running_loop().create_task(self._send(kind, dict(order_snapshot)))
        except Exception as e:
            logger.error("Could not schedule notification", kind=str(kind), error=str(e))
            return

        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    async def _send(self, kind: NotificationKind, order_snapshot: dict) -> dict:
        result = await asyncio.to_thread(self.email_service.send, kind, order_snapshot)
        if not result.get("success"):
            logger.warning(
                "Notification not delivered",
                kind=kind.value,
                order_number=order_snapshot.get("order_number"),
                error=result.get("error"),
            )
        return result

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Notification task crashed", error=str(exc))

    async def drain(self) -> None:
        """Wait for every scheduled notification (shutdown and tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
