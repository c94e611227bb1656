"""
Ticket Completion Marker
========================

Tags a ticket as done without closing it.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

from shopdesk.core.config import Config
from shopdesk.core.logger import logger

from .constants import DONE_PREFIX, MAX_CHANNEL_NAME_LENGTH
from .embeds import build_done_embed
from .errors import NotATicketError, PlatformCallError, TicketError
from .models import Ticket, TicketState

if TYPE_CHECKING:
    from shopdesk.core.database import DatabaseManager
    from .platform import TicketPlatform


def done_channel_name(name: str) -> str:
    """done-<name> cut to Discord's limit. Already-done names are kept."""
    if name.startswith(DONE_PREFIX):
        return name
    return f"{DONE_PREFIX}{name}"[:MAX_CHANNEL_NAME_LENGTH]


class CompletionMarker:
    """Grants the customer role, renames to done-<name> and posts a notice."""

    def __init__(self, platform: "TicketPlatform", db: "DatabaseManager", config: Config) -> None:
        self.platform = platform
        self.db = db
        self.config = config

    async def mark_done(self, channel_id: int, marked_by: int) -> str:
        """
        Mark a ticket done.

        Returns:
            The channel name after marking.

        Raises:
            NotATicketError: The channel is not a ticket.
            TicketError: The ticket is already closing.
        """
        record = self.db.get_ticket(channel_id)
        if record is None:
            raise NotATicketError(detail=f"channel {channel_id} has no ticket record")
        ticket = Ticket.from_record(record)
        if ticket.state in (TicketState.CLOSING, TicketState.CLOSED):
            raise TicketError("This ticket is already being closed.")

        # -----------------------------------------------------------------
        # Customer role (best-effort)
        # -----------------------------------------------------------------
        if self.config.customer_role_id:
            try:
                await self.platform.grant_role(ticket.guild_id, ticket.owner_id, self.config.customer_role_id)
            except PlatformCallError as e:
                logger.warning("Customer Role Grant Failed", [
                    ("Owner", str(ticket.owner_id)),
                    ("Error", (e.detail or e.user_message)[:100]),
                ])
        else:
            logger.info("Customer role not configured, skipping grant", [
                ("Channel", str(channel_id)),
            ])

        # -----------------------------------------------------------------
        # Rename
        # -----------------------------------------------------------------
        current = await self.platform.get_channel_name(channel_id) or ticket.channel_name
        new_name = done_channel_name(current)
        if new_name != current:
            try:
                await self.platform.rename_channel(channel_id, new_name)
            except PlatformCallError as e:
                logger.warning("Ticket Done Rename Failed", [
                    ("Channel", current),
                    ("Error", (e.detail or e.user_message)[:100]),
                ])
                new_name = current
            else:
                self.db.update_ticket_name(channel_id, new_name)

        # -----------------------------------------------------------------
        # Notice
        # -----------------------------------------------------------------
        try:
            await self.platform.send_message(channel_id, embed=build_done_embed(ticket.owner_id))
        except PlatformCallError as e:
            logger.warning("Completion Notice Failed", [
                ("Channel", new_name),
                ("Error", (e.detail or e.user_message)[:100]),
            ])

        logger.tree("Ticket Marked Done", [
            ("Channel", new_name),
            ("Owner", str(ticket.owner_id)),
            ("Marked By", str(marked_by)),
        ], emoji="✅")

        return new_name


__all__ = [
    "done_channel_name",
    "CompletionMarker",
]
