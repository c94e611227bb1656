"""
ShopDesk - Centralized Constants
================================

All magic numbers and constants are defined here for maintainability.
Import from this module instead of hardcoding values.

Author: حَـــــنَّـــــا
"""

# =============================================================================
# Database Constants
# =============================================================================

DB_CONNECTION_TIMEOUT = 30.0          # sqlite3.connect timeout (seconds)
SQLITE_BUSY_TIMEOUT = 5000            # PRAGMA busy_timeout (milliseconds)

# =============================================================================
# Timeout Constants (in seconds)
# =============================================================================

TICKET_DELETE_DELAY = 5               # Default delay between deletion notice and delete

# =============================================================================
# Discord Limits
# =============================================================================

MESSAGE_HISTORY_PAGE_SIZE = 100       # Max messages per history request
MAX_CHANNEL_NAME_LENGTH = 100         # Discord channel name limit
EMBED_FIELD_MAX_LENGTH = 1024         # Embed field value limit
MODAL_FIELD_MAX_LENGTH = 1000         # Intake text field limit


__all__ = [
    "DB_CONNECTION_TIMEOUT",
    "SQLITE_BUSY_TIMEOUT",
    "TICKET_DELETE_DELAY",
    "MESSAGE_HISTORY_PAGE_SIZE",
    "MAX_CHANNEL_NAME_LENGTH",
    "EMBED_FIELD_MAX_LENGTH",
    "MODAL_FIELD_MAX_LENGTH",
]
