"""
ShopDesk - Async Utilities
==========================

Utilities for handling async operations with proper error logging.

Usage:
    from shopdesk.utils.async_utils import create_safe_task

    # Instead of:
    asyncio.create_task(self._delete_later(channel_id))

    # Use:
    create_safe_task(self._delete_later(channel_id), "Ticket Deletion")

Author: حَـــــنَّـــــا
"""

import asyncio
from typing import Coroutine, Any

from shopdesk.core.logger import logger


# =============================================================================
# Safe Background Tasks
# =============================================================================

def create_safe_task(
    coro: Coroutine[Any, Any, Any],
    name: str = "Background Task",
) -> asyncio.Task:
    """
    Create a background task with automatic error logging.

    Unlike raw asyncio.create_task(), this catches and logs any exceptions
    instead of letting them silently disappear. Cancellation still
    propagates so callers can observe task.cancelled().

    Args:
        coro: The coroutine to run as a background task.
        name: Name for logging purposes.

    Returns:
        The created asyncio.Task.
    """
    async def wrapped():
        try:
            await coro
        except asyncio.CancelledError:
            logger.debug("Background Task Cancelled", [("Task", name)])
            raise
        except Exception as e:
            logger.error("Background Task Failed", [
                ("Task", name),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:200]),
            ])

    return asyncio.create_task(wrapped(), name=name)


__all__ = [
    "create_safe_task",
]
