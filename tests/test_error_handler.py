"""
ShopDesk - Error Handler Tests
==============================

Tests for error categorization and recovery hints.
"""

import sqlite3
from unittest.mock import MagicMock

import discord

from shopdesk.services.tickets.errors import PlatformCallError, ValidationError
from shopdesk.utils.error_handler import ErrorHandler


class TestCategorizeError:
    """Tests for ErrorHandler.categorize_error()."""

    def test_ticket_errors(self):
        """Test workflow errors are categorized as ticket."""
        assert ErrorHandler.categorize_error(ValidationError()) == "ticket"
        assert ErrorHandler.categorize_error(PlatformCallError("Send", 403)) == "ticket"

    def test_discord_errors(self):
        """Test discord.py HTTP errors are categorized as discord."""
        error = discord.HTTPException(MagicMock(status=500, reason="Error"), "boom")
        assert ErrorHandler.categorize_error(error) == "discord"

    def test_database_errors(self):
        """Test sqlite errors are categorized as database."""
        assert ErrorHandler.categorize_error(sqlite3.OperationalError("locked")) == "database"

    def test_general(self):
        """Test anything else is general."""
        assert ErrorHandler.categorize_error(KeyError("x")) == "general"


class TestRecoverySuggestion:
    """Tests for ErrorHandler.get_recovery_suggestion()."""

    def test_known_error(self):
        """Test a known type gets its hint."""
        assert "timed out" in ErrorHandler.get_recovery_suggestion(TimeoutError())

    def test_unknown_error(self):
        """Test unknown types get the generic hint."""
        assert "Unexpected" in ErrorHandler.get_recovery_suggestion(KeyError("x"))

    def test_handle_non_critical(self):
        """Test non-critical errors are logged without a dump."""
        ErrorHandler.handle(ValueError("bad"), location="test", channel="5000")
