"""
Notification Dispatcher

Hands External Notifier calls to a background consumer so the request that
produced them never waits on chat delivery. Services only enqueue; the
consumer logs every outcome and contains every failure.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from team_planner.services.notifier import ExternalNotifier, SwapNotice, UserContact

logger = logging.getLogger(__name__)


@dataclass
class DeliveryJob:
    label: str
    send: Callable[..., Awaitable[bool]]
    args: Tuple[Any, ...] = field(default_factory=tuple)


class NotificationDispatcher:
    """Single-consumer queue in front of an ExternalNotifier."""

    def __init__(self, notifier: ExternalNotifier, maxsize: int = 0):
        self.notifier = notifier
        self._queue: "asyncio.Queue[Optional[DeliveryJob]]" = asyncio.Queue(maxsize=maxsize)
        self._worker: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        if self.is_running:
            return
        self._worker = asyncio.create_task(self._consume(), name="notification-dispatcher")
        logger.info(f"Notification dispatcher started ({type(self.notifier).__name__})")

    async def stop(self) -> None:
        """Drain queued jobs, then stop the consumer and close the notifier."""
        if self.is_running:
            await self._queue.put(None)
            await self._worker
        self._worker = None
        await self.notifier.close()
        logger.info("Notification dispatcher stopped")

    async def join(self) -> None:
        await self._queue.join()

    def enqueue(self, label: str, send: Callable[..., Awaitable[bool]], *args: Any) -> bool:
        try:
            self._queue.put_nowait(DeliveryJob(label, send, args))
        except asyncio.QueueFull:
            logger.warning(f"Notification queue full, dropping {label}")
            return False
        return True

    # Typed helpers used by the services

    def enqueue_swap_request(self, swap: SwapNotice, requester: UserContact, target: UserContact) -> bool:
        return self.enqueue(
            f"swap_request:{swap.id}",
            self.notifier.send_swap_request_notification,
            swap, requester, target,
        )

    def enqueue_swap_response(self, swap: SwapNotice, action: str) -> bool:
        return self.enqueue(
            f"swap_response:{swap.id}",
            self.notifier.send_swap_response_notification,
            swap, action,
        )

    def enqueue_schedule_update(self, user: UserContact, changes: List[Tuple[str, str]]) -> bool:
        return self.enqueue(
            f"schedule_update:{user.id}",
            self.notifier.send_schedule_update_notification,
            user, changes,
        )

    async def _consume(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                if job is None:
                    return
                await self._deliver(job)
            finally:
                self._queue.task_done()

    async def _deliver(self, job: DeliveryJob) -> None:
        try:
            delivered = await job.send(*job.args)
        except Exception:
            logger.exception(f"External notification {job.label} failed")
            return
        if delivered:
            logger.info(f"External notification {job.label} delivered")
        else:
            logger.warning(f"External notification {job.label} not delivered")
