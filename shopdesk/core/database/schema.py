"""
ShopDesk - Database Schema Module
=================================

Table definitions and migrations.

Author: حَـــــنَّـــــا
"""

import sqlite3
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shopdesk.core.database.manager import DatabaseManager


class SchemaMixin:
    """Mixin for database schema initialization."""

    def _init_tables(self: "DatabaseManager") -> None:
        """
        Initialize all database tables.

        DESIGN: Tables are created if not exist, allowing safe restarts.
        Indexes added for frequently queried columns.
        """
        conn = self._ensure_connection()
        cursor = conn.cursor()

        # -----------------------------------------------------------------
        # Tickets Table
        # DESIGN: Keyed by channel id, one row per provisioned channel
        # -----------------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS tickets (
                channel_id INTEGER PRIMARY KEY,
                guild_id INTEGER NOT NULL,
                owner_id INTEGER NOT NULL,
                request_type TEXT NOT NULL,
                category_id INTEGER NOT NULL,
                channel_name TEXT NOT NULL,
                display_id TEXT NOT NULL,
                state TEXT NOT NULL DEFAULT 'open',
                created_at REAL NOT NULL,
                closed_by INTEGER,
                closed_at REAL
            )
        """)
        for col in [
            "closed_by INTEGER",
            "closed_at REAL",
        ]:
            try:
                cursor.execute(f"ALTER TABLE tickets ADD COLUMN {col}")
            except sqlite3.OperationalError:
                pass  # Column already exists
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_tickets_owner ON tickets(owner_id, guild_id)"
        )
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_tickets_state ON tickets(state)"
        )

        conn.commit()


__all__ = ["SchemaMixin"]
