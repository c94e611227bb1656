"""
Ticket Deletion Scheduler
=========================

Deferred, cancellable channel deletion keyed by channel id.

Author: حَـــــنَّـــــا
"""

import asyncio
from typing import TYPE_CHECKING, Dict, Optional

from shopdesk.core.logger import logger
from shopdesk.utils.async_utils import create_safe_task
from .errors import PlatformCallError
from .models import TicketState

if TYPE_CHECKING:
    from shopdesk.core.database import DatabaseManager
    from .platform import TicketPlatform


class DeletionScheduler:
    """Holds one pending deletion task per ticket channel."""

    def __init__(self, platform: "TicketPlatform", db: "DatabaseManager") -> None:
        self.platform = platform
        self.db = db
        self._tasks: Dict[int, asyncio.Task] = {}

    def task_for(self, channel_id: int) -> Optional[asyncio.Task]:
        return self._tasks.get(channel_id)

    def is_scheduled(self, channel_id: int) -> bool:
        task = self._tasks.get(channel_id)
        return task is not None and not task.done()

    def schedule(self, channel_id: int, delay: float) -> asyncio.Task:
        """Delete the channel after `delay` seconds. Re-scheduling keeps the first task."""
        existing = self._tasks.get(channel_id)
        if existing is not None and not existing.done():
            return existing

        task = create_safe_task(self._delete_after(channel_id, delay), f"Ticket Deletion {channel_id}")
        self._tasks[channel_id] = task
        task.add_done_callback(lambda t: self._forget(channel_id, t))

        logger.debug("Ticket Deletion Scheduled", [
            ("Channel", str(channel_id)),
            ("Delay", f"{delay}s"),
        ])
        return task

    def cancel(self, channel_id: int) -> bool:
        """Cancel a pending deletion. Returns False if none was pending."""
        task = self._tasks.pop(channel_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.info("Ticket Deletion Cancelled", [("Channel", str(channel_id))])
        return True

    async def shutdown(self) -> None:
        """Cancel every pending deletion and wait for the tasks to finish."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def _forget(self, channel_id: int, task: asyncio.Task) -> None:
        if self._tasks.get(channel_id) is task:
            del self._tasks[channel_id]

    async def _delete_after(self, channel_id: int, delay: float) -> None:
        await asyncio.sleep(delay)

        # CLOSED once the delete is issued, whatever its outcome
        self.db.set_ticket_state(channel_id, TicketState.CLOSED.value)
        try:
            await self.platform.delete_channel(channel_id)
        except PlatformCallError as e:
            logger.error("Ticket Channel Delete Failed", [
                ("Channel", str(channel_id)),
                ("Error", (e.detail or e.user_message)[:100]),
            ])
            return

        logger.tree("Ticket Channel Deleted", [
            ("Channel", str(channel_id)),
        ], emoji="🗑️")


__all__ = [
    "DeletionScheduler",
]
