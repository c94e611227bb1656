"""
Ticket Transcript Collectors
============================

Backward-paginated history retrieval for transcripts.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING, List

from shopdesk.core.logger import logger
from ..constants import MESSAGE_HISTORY_PAGE_SIZE
from ..errors import PlatformCallError, PrerequisiteFetchError
from ..models import TranscriptMessage

if TYPE_CHECKING:
    from ..platform import TicketPlatform


async def fetch_all_messages(
    platform: "TicketPlatform",
    channel_id: int,
    page_size: int = MESSAGE_HISTORY_PAGE_SIZE,
) -> List[TranscriptMessage]:
    """
    Collect a channel's full history, oldest first.

    DESIGN:
        Pages are requested newest-first, each strictly older than the
        oldest message of the previous page. Pagination stops on the first
        empty page, so N messages take ceil(N / page_size) + 1 calls.
        A failed call after the first one ends pagination with what was
        collected so far.

    Raises:
        PrerequisiteFetchError: If the first page cannot be fetched.
    """
    collected: List[TranscriptMessage] = []
    before = None
    calls = 0

    while True:
        calls += 1
        try:
            page = await platform.fetch_message_page(channel_id, limit=page_size, before=before)
        except PlatformCallError as e:
            if before is None:
                raise PrerequisiteFetchError(
                    "Could not read this ticket's history, the ticket was left open.",
                    detail=str(e),
                ) from e
            logger.warning("Transcript Pagination Stopped", [
                ("Channel", str(channel_id)),
                ("Collected", str(len(collected))),
                ("Error", str(e)[:100]),
            ])
            break

        if not page:
            break

        collected.extend(page)
        before = page[-1].message_id

    collected.reverse()

    logger.debug("Transcript Messages Collected", [
        ("Channel", str(channel_id)),
        ("Messages", str(len(collected))),
        ("Fetch Calls", str(calls)),
    ])

    return collected


__all__ = [
    "fetch_all_messages",
]
