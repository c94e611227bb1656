"""
ShopDesk - Error Handler
========================

Categorized error logging for failures that escape a command or view.

Features:
- Error categorization (Discord, Network, Database, Ticket)
- Recovery suggestions in the log line
- Critical error file dump with traceback

Author: حَـــــنَّـــــا
"""

import json
import sqlite3
import sys
import traceback
from datetime import datetime
from typing import Dict, Any

import discord

from shopdesk.core.logger import LOGS_DIR, logger
from shopdesk.services.tickets.errors import TicketError


class ErrorHandler:
    """Error handling with categorization and recovery hints."""

    ERROR_CATEGORIES = {
        "ticket": (TicketError,),
        "discord": (discord.Forbidden, discord.NotFound, discord.HTTPException),
        "network": (ConnectionError, TimeoutError),
        "database": (sqlite3.Error,),
    }

    SUGGESTIONS = {
        discord.Forbidden: "Check bot permissions on the ticket categories",
        discord.NotFound: "Resource not found - check configured IDs",
        discord.HTTPException: "Discord API issue - the action was not retried",
        ConnectionError: "Network connection issue - check connectivity",
        TimeoutError: "Request timed out",
        sqlite3.OperationalError: "Database locked or unreadable - check data directory",
        TicketError: "Workflow rejected the request - see the user message",
    }

    @classmethod
    def categorize_error(cls, e: BaseException) -> str:
        """Return the category name for an exception."""
        for category, error_types in cls.ERROR_CATEGORIES.items():
            if isinstance(e, error_types):
                return category
        return "general"

    @classmethod
    def get_recovery_suggestion(cls, e: BaseException) -> str:
        """Return the first matching recovery hint."""
        for error_type, suggestion in cls.SUGGESTIONS.items():
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: BaseException, location: str, critical: bool = False, **context: Any) -> None:
        """
        Handle an error with full context.

        Args:
            e: The exception
            location: Where the error occurred
            critical: Whether this error stops execution
            **context: Additional context (user, channel, ...)
        """
        category = cls.categorize_error(e)
        details = [
            ("Location", location),
            ("Category", category),
            ("Type", type(e).__name__),
            ("Error", str(e)[:200]),
            ("Recovery", cls.get_recovery_suggestion(e)),
        ]
        details.extend((str(k), str(v)) for k, v in context.items())

        if critical:
            logger.error("💥 Critical Error", details)
            cls._store_critical_error(e, location, context)
        else:
            logger.warning("Unhandled Error", details)

    @staticmethod
    def _store_critical_error(e: BaseException, location: str, context: Dict[str, Any]) -> None:
        """Dump a critical error with its traceback to logs/errors."""
        payload = {
            "timestamp": datetime.now().isoformat(),
            "location": location,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "traceback": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            "python_version": sys.version,
            "context": context,
        }

        error_dir = LOGS_DIR / "errors"
        try:
            error_dir.mkdir(exist_ok=True, parents=True)
            error_file = error_dir / f"error_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
            with open(error_file, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, default=str)
        except OSError as save_error:
            logger.warning("Failed To Save Error Details", [("Error", str(save_error))])
            return

        logger.info(f"Critical error saved to {error_file}")


__all__ = [
    "ErrorHandler",
]
