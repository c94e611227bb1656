"""
ShopDesk - Discord HTTP Error Utilities
=======================================

Logging helpers for Discord API failures.

discord.py already waits out 429 responses inside its HTTP client, so ticket
operations make a single attempt and only need consistent failure logging.

Usage:
    from shopdesk.utils.discord_rate_limit import log_http_error

    try:
        await channel.delete()
    except discord.HTTPException as e:
        log_http_error(e, "Delete Ticket Channel", [("Channel", str(channel.id))])

Author: حَـــــنَّـــــا
"""

from typing import Optional

import discord

from shopdesk.core.logger import logger


# HTTP status code descriptions for logging
HTTP_STATUS_DESCRIPTIONS = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    429: "Rate Limited",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
}


# =============================================================================
# Logging Helper
# =============================================================================

def log_http_error(
    e: discord.HTTPException,
    operation: str,
    context: Optional[list] = None,
) -> None:
    """
    Log a Discord HTTPException with comprehensive details.

    Args:
        e: The HTTPException that occurred
        operation: Description of what operation failed
        context: Additional context tuples for logging [(key, value), ...]
    """
    status_desc = HTTP_STATUS_DESCRIPTIONS.get(e.status, "Unknown")

    log_items = [
        ("Status", f"{e.status} ({status_desc})"),
        ("Error", str(e.text) if getattr(e, "text", None) else str(e)),
    ]

    if context:
        log_items.extend(context)

    # Use warning for recoverable statuses, error for others
    if e.status == 429:
        logger.warning(f"🚦 {operation} Rate Limited", log_items)
    elif e.status == 403:
        logger.warning(f"🚫 {operation} Forbidden", log_items)
    elif e.status == 404:
        logger.warning(f"❓ {operation} Not Found", log_items)
    else:
        logger.error(f"❌ {operation} Failed", log_items)


__all__ = [
    "HTTP_STATUS_DESCRIPTIONS",
    "log_http_error",
]
