"""
ShopDesk - Database Ticket Operations Module
============================================

Ticket record persistence. The lifecycle engine owns the state machine;
these methods only store what it decides.

Author: حَـــــنَّـــــا
"""

import time
from typing import Optional, List, TYPE_CHECKING

from shopdesk.core.logger import logger
from shopdesk.core.database.models import TicketRecord

if TYPE_CHECKING:
    from shopdesk.core.database.manager import DatabaseManager


class TicketsMixin:
    """Mixin for ticket database operations."""

    def create_ticket(
        self: "DatabaseManager",
        channel_id: int,
        guild_id: int,
        owner_id: int,
        request_type: str,
        category_id: int,
        channel_name: str,
        display_id: str,
        state: str = "open",
        created_at: Optional[float] = None,
    ) -> None:
        """Create a new ticket record.

        Args:
            channel_id: Channel the ticket lives in.
            guild_id: Guild ID.
            owner_id: Member who opened the ticket.
            request_type: "purchase" or "support".
            category_id: Category the channel was created under.
            channel_name: Derived channel name.
            display_id: Human-facing id (#GX1234 / #SUP1234).
            state: Initial lifecycle state.
            created_at: Creation timestamp (defaults to now).
        """
        self.execute(
            """INSERT INTO tickets (
                channel_id, guild_id, owner_id, request_type, category_id,
                channel_name, display_id, state, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                channel_id, guild_id, owner_id, request_type, category_id,
                channel_name, display_id, state,
                created_at if created_at is not None else time.time(),
            )
        )
        logger.debug("Ticket Record Stored", [
            ("Channel ID", str(channel_id)),
            ("Display ID", display_id),
        ])

    def get_ticket(self: "DatabaseManager", channel_id: int) -> Optional[TicketRecord]:
        """Get a ticket by its channel ID."""
        row = self.fetchone("SELECT * FROM tickets WHERE channel_id = ?", (channel_id,))
        return dict(row) if row else None

    def set_ticket_state(self: "DatabaseManager", channel_id: int, state: str) -> bool:
        """Persist a lifecycle state. Returns False if the ticket is unknown."""
        cursor = self.execute(
            "UPDATE tickets SET state = ? WHERE channel_id = ?",
            (state, channel_id)
        )
        return cursor.rowcount > 0

    def update_ticket_name(self: "DatabaseManager", channel_id: int, channel_name: str) -> bool:
        """Store a channel rename."""
        cursor = self.execute(
            "UPDATE tickets SET channel_name = ? WHERE channel_id = ?",
            (channel_name, channel_id)
        )
        return cursor.rowcount > 0

    def mark_ticket_closed(
        self: "DatabaseManager",
        channel_id: int,
        closed_by: Optional[int],
        state: str = "closing",
    ) -> bool:
        """Record who closed the ticket and when."""
        cursor = self.execute(
            """UPDATE tickets SET state = ?, closed_by = ?, closed_at = ?
               WHERE channel_id = ?""",
            (state, closed_by, time.time(), channel_id)
        )
        return cursor.rowcount > 0

    def get_tickets_by_state(self: "DatabaseManager", state: str) -> List[TicketRecord]:
        """Get all tickets in a lifecycle state, oldest first."""
        rows = self.fetchall(
            "SELECT * FROM tickets WHERE state = ? ORDER BY created_at ASC",
            (state,)
        )
        return [dict(row) for row in rows]

    def delete_ticket(self: "DatabaseManager", channel_id: int) -> bool:
        """Remove a ticket record."""
        cursor = self.execute("DELETE FROM tickets WHERE channel_id = ?", (channel_id,))
        return cursor.rowcount > 0


__all__ = ["TicketsMixin"]
