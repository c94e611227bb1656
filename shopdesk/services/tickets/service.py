"""
Ticket Service
==============

Core service logic for the ticket system.

Author: حَـــــنَّـــــا
"""

import random
from typing import TYPE_CHECKING, Mapping, Optional

from shopdesk.core.config import Config, get_config
from shopdesk.core.database import DatabaseManager, get_db
from shopdesk.core.logger import logger

from .archive import ArchiveDispatcher
from .closure import ClosureCoordinator
from .completion import CompletionMarker
from .errors import NotATicketError, PlatformCallError, DeliveryFailure, TicketError, ValidationError
from .factory import TicketFactory, clean_channel_name
from .models import ArchiveReport, RequestType, Ticket, TicketState
from .permissions import build_member_grant
from .platform import DiscordTicketPlatform, TicketPlatform
from .scheduler import DeletionScheduler

if TYPE_CHECKING:
    from shopdesk.bot import ShopDeskBot


class TicketService:
    """
    Service for managing shop and support tickets.

    DESIGN:
        Tickets are private text channels under one of two categories, each
        backed by a row in the tickets table. The service wires the
        lifecycle components to one TicketPlatform and is the single entry
        point for views, modals and commands.
    """

    def __init__(
        self,
        bot: Optional["ShopDeskBot"] = None,
        *,
        platform: Optional[TicketPlatform] = None,
        db: Optional[DatabaseManager] = None,
        config: Optional[Config] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.bot = bot
        self.config = config or get_config()
        self.db = db or get_db()
        self.platform = platform or DiscordTicketPlatform(bot)

        self.factory = TicketFactory(self.platform, self.db, self.config, rng=rng)
        self.archive = ArchiveDispatcher(self.platform)
        self.scheduler = DeletionScheduler(self.platform, self.db)
        self.closure = ClosureCoordinator(
            self.platform, self.db, self.config, self.archive, self.scheduler,
        )
        self.completion = CompletionMarker(self.platform, self.db, self.config)

        logger.tree("Ticket Service Initialized", [
            ("Purchase Category", str(self.config.purchase_category_id)),
            ("Support Category", str(self.config.support_category_id)),
            ("Transcript Channel", str(self.config.transcript_channel_id or "None")),
        ], emoji="🎫")

    # =========================================================================
    # Lookup
    # =========================================================================

    def get_ticket(self, channel_id: int) -> Optional[Ticket]:
        record = self.db.get_ticket(channel_id)
        return Ticket.from_record(record) if record else None

    def is_ticket(self, channel_id: int) -> bool:
        return self.db.get_ticket(channel_id) is not None

    def _require_active(self, channel_id: int) -> Ticket:
        ticket = self.get_ticket(channel_id)
        if ticket is None:
            raise NotATicketError(detail=f"channel {channel_id} has no ticket record")
        if ticket.state in (TicketState.CLOSING, TicketState.CLOSED):
            raise TicketError("This ticket is already being closed.")
        return ticket

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def open_ticket(
        self,
        guild_id: int,
        owner_id: int,
        owner_name: str,
        request_type: RequestType,
        fields: Mapping[str, Optional[str]],
    ) -> Ticket:
        return await self.factory.create(guild_id, owner_id, owner_name, request_type, fields)

    async def request_close(self, channel_id: int, requested_by: int) -> bool:
        return await self.closure.request_close(channel_id, requested_by)

    async def confirm_close(self, channel_id: int, closed_by: int) -> Optional[ArchiveReport]:
        return await self.closure.confirm_close(channel_id, closed_by)

    async def cancel_close(self, channel_id: int, cancelled_by: int) -> bool:
        return await self.closure.cancel_close(channel_id, cancelled_by)

    async def mark_done(self, channel_id: int, marked_by: int) -> str:
        return await self.completion.mark_done(channel_id, marked_by)

    # =========================================================================
    # Staff Operations
    # =========================================================================

    async def add_member(self, channel_id: int, member_id: int, added_by: int) -> None:
        """
        Give a member view, send and history access to a ticket.

        Raises:
            NotATicketError: The channel is not a ticket.
            DeliveryFailure: Discord rejected the permission change.
        """
        ticket = self._require_active(channel_id)
        try:
            await self.platform.set_member_grant(channel_id, build_member_grant(member_id))
        except PlatformCallError as e:
            raise DeliveryFailure("Could not add that member to the ticket.", detail=str(e)) from e

        logger.tree("Ticket Member Added", [
            ("Channel", ticket.channel_name),
            ("Member", str(member_id)),
            ("Added By", str(added_by)),
        ], emoji="➕")

    async def rename(self, channel_id: int, raw_name: str, renamed_by: int) -> str:
        """
        Rename a ticket channel using the channel-name cleaning rule.

        Raises:
            ValidationError: Nothing usable is left after cleaning.
        """
        ticket = self._require_active(channel_id)
        name = clean_channel_name(raw_name)
        if not name:
            raise ValidationError("Use letters or numbers for the new name.")

        try:
            await self.platform.rename_channel(channel_id, name)
        except PlatformCallError as e:
            raise DeliveryFailure("Could not rename the ticket channel.", detail=str(e)) from e
        self.db.update_ticket_name(channel_id, name)

        logger.tree("Ticket Renamed", [
            ("From", ticket.channel_name),
            ("To", name),
            ("By", str(renamed_by)),
        ], emoji="✏️")
        return name

    # =========================================================================
    # Startup / Shutdown
    # =========================================================================

    async def recover_pending_deletions(self) -> int:
        """
        Re-schedule deletion of tickets that were CLOSING when the bot stopped.

        Tickets awaiting confirmation are left pending; their buttons still work.

        Returns:
            Number of deletions scheduled.
        """
        closing = self.db.get_tickets_by_state(TicketState.CLOSING.value)
        for record in closing:
            self.scheduler.schedule(record["channel_id"], self.config.ticket_delete_delay)

        pending = self.db.get_tickets_by_state(TicketState.PENDING_CLOSE_CONFIRMATION.value)
        logger.tree("Ticket Recovery", [
            ("Deletions Rescheduled", str(len(closing))),
            ("Pending Confirmations", str(len(pending))),
        ], emoji="♻️")
        return len(closing)

    async def handle_channel_deleted(self, channel_id: int) -> bool:
        """
        Forget a ticket whose channel was deleted outside the close flow.

        Returns:
            True if a ticket record was removed.
        """
        ticket = self.get_ticket(channel_id)
        if ticket is None or ticket.state in (TicketState.CLOSING, TicketState.CLOSED):
            return False

        self.scheduler.cancel(channel_id)
        self.db.delete_ticket(channel_id)
        self.closure.discard_lock(channel_id)
        logger.tree("Ticket Channel Removed Externally", [
            ("Channel", ticket.channel_name),
            ("State", ticket.state.value),
        ], emoji="🗑️")
        return True

    async def stop(self) -> None:
        """Cancel pending deletions. CLOSING tickets are recovered on next start."""
        await self.scheduler.shutdown()
        logger.debug("Ticket Service Stopped")


__all__ = [
    "TicketService",
]
