"""
ShopDesk - Database Module
==========================

Centralized database management for ShopDesk.

Author: حَـــــنَّـــــا
"""

from shopdesk.core.database.manager import (
    DatabaseManager,
    get_db,
    DATA_DIR,
    DB_PATH,
)
from shopdesk.core.database.models import TicketRecord

__all__ = [
    "DatabaseManager",
    "get_db",
    "DATA_DIR",
    "DB_PATH",
    "TicketRecord",
]
