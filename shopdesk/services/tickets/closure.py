"""
Ticket Closure Coordinator
==========================

Owns the close lifecycle: OPEN -> PENDING_CLOSE_CONFIRMATION -> CLOSING -> CLOSED.

DESIGN:
    Every transition for a ticket runs under that ticket's asyncio.Lock, so
    two clicks on Close post one prompt and a confirm cannot race a cancel.
    The lock is held through finalization; different tickets never share a
    lock. Finalization is history fetch -> render -> archive fan-out ->
    deletion notice -> deferred delete. Only the history fetch can abort it.

Author: حَـــــنَّـــــا
"""

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Dict, Optional

from shopdesk.core.config import Config
from shopdesk.core.logger import logger

from .archive import ArchiveDispatcher, build_archive_targets
from .embeds import build_close_prompt_embed, build_closed_embed
from .errors import (
    DeliveryFailure,
    NotATicketError,
    PlatformCallError,
    PrerequisiteFetchError,
    TicketError,
)
from .models import ArchiveReport, Ticket, TicketState
from .scheduler import DeletionScheduler
from .transcript import fetch_all_messages, render_transcript
from .views import CloseConfirmView

if TYPE_CHECKING:
    from shopdesk.core.database import DatabaseManager
    from .platform import TicketPlatform


class ClosureCoordinator:
    """Serializes close requests per ticket and runs finalization."""

    def __init__(
        self,
        platform: "TicketPlatform",
        db: "DatabaseManager",
        config: Config,
        archive: ArchiveDispatcher,
        scheduler: DeletionScheduler,
    ) -> None:
        self.platform = platform
        self.db = db
        self.config = config
        self.archive = archive
        self.scheduler = scheduler
        self._locks: Dict[int, asyncio.Lock] = {}

    # =========================================================================
    # Helpers
    # =========================================================================

    def lock_for(self, channel_id: int) -> asyncio.Lock:
        lock = self._locks.get(channel_id)
        if lock is None:
            lock = self._locks[channel_id] = asyncio.Lock()
        return lock

    def discard_lock(self, channel_id: int) -> None:
        """Drop an idle lock. A held lock stays until its holder releases it."""
        lock = self._locks.get(channel_id)
        if lock is not None and not lock.locked():
            del self._locks[channel_id]

    @asynccontextmanager
    async def _ticket_lock(self, channel_id: int) -> AsyncIterator[None]:
        """Hold a ticket's lock. Locks of closing, closed or unknown tickets are dropped on release."""
        lock = self.lock_for(channel_id)
        try:
            async with lock:
                yield
        finally:
            record = self.db.get_ticket(channel_id)
            if record is None or record["state"] in (TicketState.CLOSING.value, TicketState.CLOSED.value):
                if self._locks.get(channel_id) is lock:
                    self.discard_lock(channel_id)

    def _load(self, channel_id: int) -> Ticket:
        record = self.db.get_ticket(channel_id)
        if record is None:
            raise NotATicketError(detail=f"channel {channel_id} has no ticket record")
        return Ticket.from_record(record)

    def _set_state(self, ticket: Ticket, state: TicketState) -> None:
        self.db.set_ticket_state(ticket.channel_id, state.value)
        ticket.state = state

    # =========================================================================
    # Transitions
    # =========================================================================

    async def request_close(self, channel_id: int, requested_by: int) -> bool:
        """
        Post a Confirm / Cancel prompt.

        Returns:
            True if a prompt was posted, False if one is already pending.

        Raises:
            NotATicketError: The channel is not a ticket.
            TicketError: The ticket is already closing or closed.
            DeliveryFailure: The prompt could not be posted (state reverted).
        """
        async with self._ticket_lock(channel_id):
            ticket = self._load(channel_id)
            if ticket.state in (TicketState.CLOSING, TicketState.CLOSED):
                raise TicketError("This ticket is already being closed.")
            if ticket.state != TicketState.OPEN:
                logger.debug("Close Request Ignored", [
                    ("Channel", str(channel_id)),
                    ("State", ticket.state.value),
                ])
                return False

            self._set_state(ticket, TicketState.PENDING_CLOSE_CONFIRMATION)
            try:
                await self.platform.send_message(
                    channel_id,
                    embed=build_close_prompt_embed(requested_by),
                    view=CloseConfirmView(),
                )
            except PlatformCallError as e:
                self._set_state(ticket, TicketState.OPEN)
                raise DeliveryFailure("Could not post the close confirmation.", detail=str(e)) from e

            logger.tree("Close Requested", [
                ("Channel", ticket.channel_name),
                ("Requested By", str(requested_by)),
            ], emoji="🔒")
            return True

    async def cancel_close(self, channel_id: int, cancelled_by: int) -> bool:
        """PENDING_CLOSE_CONFIRMATION -> OPEN. Any other state is a no-op."""
        async with self._ticket_lock(channel_id):
            ticket = self._load(channel_id)
            if ticket.state != TicketState.PENDING_CLOSE_CONFIRMATION:
                return False

            self._set_state(ticket, TicketState.OPEN)
            logger.tree("Close Cancelled", [
                ("Channel", ticket.channel_name),
                ("Cancelled By", str(cancelled_by)),
            ], emoji="↩️")
            return True

    async def confirm_close(self, channel_id: int, closed_by: int) -> Optional[ArchiveReport]:
        """
        Close a ticket that is OPEN or awaiting confirmation.

        Returns:
            The archive report, or None if the ticket was already closing.

        Raises:
            NotATicketError: The channel is not a ticket.
            PrerequisiteFetchError: History could not be read (ticket reopened).
        """
        async with self._ticket_lock(channel_id):
            ticket = self._load(channel_id)
            if ticket.state not in (TicketState.OPEN, TicketState.PENDING_CLOSE_CONFIRMATION):
                return None

            self._set_state(ticket, TicketState.CLOSING)
            return await self._finalize(ticket, closed_by)

    # =========================================================================
    # Finalization
    # =========================================================================

    async def _finalize(self, ticket: Ticket, closed_by: int) -> ArchiveReport:
        channel_id = ticket.channel_id

        try:
            messages = await fetch_all_messages(self.platform, channel_id)
        except PrerequisiteFetchError:
            self._set_state(ticket, TicketState.OPEN)
            logger.warning("Ticket Close Aborted", [
                ("Channel", ticket.channel_name),
                ("Reason", "History unavailable"),
            ])
            raise

        self.db.mark_ticket_closed(channel_id, closed_by, TicketState.CLOSING.value)

        delay = self.config.ticket_delete_delay
        try:
            channel_name = await self.platform.get_channel_name(channel_id) or ticket.channel_name
            document = render_transcript(channel_name, messages)
            embed = build_closed_embed(ticket, channel_name, closed_by)

            targets = build_archive_targets(ticket.owner_id, channel_id, self.config.transcript_channel_id)
            report = await self.archive.dispatch(targets, document, embed)

            try:
                await self.platform.send_message(
                    channel_id,
                    f"✅ Ticket will be deleted in {delay} seconds.",
                )
            except PlatformCallError as e:
                logger.warning("Deletion Notice Failed", [
                    ("Channel", channel_name),
                    ("Error", (e.detail or e.user_message)[:100]),
                ])
        finally:
            # A CLOSING ticket is always deleted, whatever happened to the transcript
            self.scheduler.schedule(channel_id, delay)

        logger.tree("Ticket Closed", [
            ("Channel", channel_name),
            ("Display ID", ticket.display_id),
            ("Closed By", str(closed_by)),
            ("Messages", str(len(messages))),
            ("Delete In", f"{delay}s"),
        ], emoji="🔒")

        return report


__all__ = [
    "ClosureCoordinator",
]
