"""Checkout sessions — workflows running behind the HTTP API.

An online checkout outlives the request that started it: the workflow stays
suspended until the browser relays the widget's callback. Sessions are kept
by order number so later requests can resume, inspect or abandon them.
A finished session stays readable for ``retention`` seconds and is then
dropped; sessions still waiting on payment are never dropped.
"""

import asyncio
import time
from functools import partial

import structlog

from notifications.dispatcher import NotificationDispatcher
from ordering.checkout.workflow import CheckoutResult, OrderPlacementWorkflow
from ordering.order.store import OrderStore
from ordering.settings.gate import SettingsGate
from payments.coordinator import PaymentCoordinator

logger = structlog.get_logger(__name__)

FINISHED_RETENTION_SECONDS = 300


class CheckoutSessions:
    def __init__(
        self,
        coordinator: PaymentCoordinator | None = None,
        orders: OrderStore | None = None,
        dispatcher: NotificationDispatcher | None = None,
        gate: SettingsGate | None = None,
        retention: float = FINISHED_RETENTION_SECONDS,
        clock=time.monotonic,
    ):
        self.coordinator = coordinator or PaymentCoordinator()
        self.orders = orders or OrderStore()
        self.dispatcher = dispatcher or NotificationDispatcher()
        self.gate = gate or SettingsGate()
        self.retention = retention
        self._clock = clock
        self._sessions: dict[str, tuple[OrderPlacementWorkflow, asyncio.Task]] = {}
        self._finished_at: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def new_workflow(self) -> OrderPlacementWorkflow:
        return OrderPlacementWorkflow(
            coordinator=self.coordinator,
            orders=self.orders,
            dispatcher=self.dispatcher,
            gate=self.gate,
        )

    async def start(self, form, cart, payment_method, identity) -> tuple[OrderPlacementWorkflow, asyncio.Task]:
        """Submit a checkout and return once it has finished or is waiting on payment."""
        self.prune()
        workflow = self.new_workflow()
        task = asyncio.create_task(workflow.submit(form, cart, payment_method, identity))
        suspended = asyncio.create_task(workflow.suspended.wait())

        await asyncio.wait({task, suspended}, return_when=asyncio.FIRST_COMPLETED)
        if not suspended.done():
            suspended.cancel()

        if workflow.order_number is not None:
            self._track(workflow.order_number, workflow, task)
        return workflow, task

    def _track(self, order_number: str, workflow: OrderPlacementWorkflow, task: asyncio.Task) -> None:
        self._sessions[order_number] = (workflow, task)
        if task.done():
            self._finished_at[order_number] = self._clock()
        else:
            task.add_done_callback(partial(self._mark_finished, order_number))

    def _mark_finished(self, order_number: str, task: asyncio.Task) -> None:
        if order_number in self._sessions:
            self._finished_at.setdefault(order_number, self._clock())

    def prune(self) -> int:
        """Drop finished sessions older than the retention window; return how many went."""
        cutoff = self._clock() - self.retention
        expired = [number for number, finished_at in self._finished_at.items() if finished_at <= cutoff]
        for order_number in expired:
            self.forget(order_number)
        if expired:
            logger.debug("Dropped finished checkout sessions", count=len(expired))
        return len(expired)

    def get(self, order_number: str) -> tuple[OrderPlacementWorkflow, asyncio.Task] | None:
        self.prune()
        return self._sessions.get(order_number)

    async def result(self, order_number: str) -> CheckoutResult:
        """Wait for the checkout to reach a terminal state."""
        _, task = self._sessions[order_number]
        return await asyncio.shield(task)

    async def abandon(self, order_number: str) -> CheckoutResult:
        workflow, task = self._sessions[order_number]
        if workflow.abandon():
            logger.info("Checkout abandoned", order_number=order_number)
        return await asyncio.shield(task)

    def forget(self, order_number: str) -> None:
        self._sessions.pop(order_number, None)
        self._finished_at.pop(order_number, None)

    def clear(self) -> None:
        self._sessions.clear()
        self._finished_at.clear()
