"""Fire-and-forget audit emission.

Delivery runs as a task on the caller's event loop; the decision path never
awaits it and sink failures never reach the caller.
"""

import asyncio
import logging
from typing import Optional, Set

from ..entities.audit_event import AuditEvent
from ..entities.protocols import AuditSink

logger = logging.getLogger(__name__)


class AuditEmitter:
    """Forwards audit events to an AuditSink without blocking.

    At most ``max_pending`` deliveries are in flight; beyond that events are
    dropped with a warning rather than applying backpressure to decisions.
    """

    def __init__(self, sink: AuditSink, enabled: bool = True, max_pending: int = 1000):
        self.sink = sink
        self.enabled = enabled
        self.max_pending = max_pending
        self._pending: Set["asyncio.Task[None]"] = set()
        self.delivered = 0
        self.failed = 0
        self.dropped = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def emit(self, event: AuditEvent) -> Optional["asyncio.Task[None]"]:
        """Schedule delivery of ``event`` and return immediately.

        Returns the delivery task, or None when nothing was scheduled.
        """
        if not self.enabled:
            return None

        if len(self._pending) >= self.max_pending:
            self.dropped += 1
            logger.warning(
                f"Audit backlog full ({self.max_pending}); dropping {event.event_type.value} "
                f"event for user {event.user_id} on {event.permission}"
            )
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.dropped += 1
            logger.error(f"No running event loop; dropping audit event for user {event.user_id}")
            return None

        task = loop.create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, event: AuditEvent) -> None:
        try:
            await self.sink.write(event)
        except Exception as e:
            self.failed += 1
            logger.error(
                f"Audit delivery failed for user {event.user_id} "
                f"permission {event.permission} ({event.event_type.value}): {e}"
            )
            return
        self.delivered += 1

    async def drain(self) -> None:
        """Wait for every scheduled delivery to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
