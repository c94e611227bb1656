"""
ShopDesk - Ticket Command Tests
===============================

Tests for the staff command cog with mocked contexts.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from shopdesk.services.tickets.errors import NotATicketError, TicketError


@pytest.fixture
def cog(config):
    """TicketsCog bound to a mocked bot and the test config."""
    from shopdesk.commands.tickets import TicketsCog

    bot = MagicMock()
    bot.ticket_service = MagicMock()
    with patch("shopdesk.commands.tickets.get_config", return_value=config):
        return TicketsCog(bot)


@pytest.fixture
def ctx(config):
    mock = MagicMock()
    mock.guild = MagicMock()
    mock.channel.id = 5000
    mock.author = SimpleNamespace(id=111222333, roles=[SimpleNamespace(id=config.support_role_id)])
    mock.reply = AsyncMock()
    return mock


class TestCogCheck:
    """Tests for the support-team gate."""

    @pytest.mark.asyncio
    async def test_support_member_allowed(self, cog, ctx):
        """Test support role holders pass."""
        assert await cog.cog_check(ctx) is True

    @pytest.mark.asyncio
    async def test_regular_member_denied(self, cog, ctx):
        """Test members without the role are refused."""
        ctx.author = SimpleNamespace(id=1, roles=[])
        assert await cog.cog_check(ctx) is False

    @pytest.mark.asyncio
    async def test_dm_denied(self, cog, ctx):
        """Test commands are refused outside a guild."""
        ctx.guild = None
        assert await cog.cog_check(ctx) is False


class TestPrefixCommands:
    """Tests for prefix command callbacks."""

    @pytest.mark.asyncio
    async def test_close_already_pending(self, cog, ctx):
        """Test a second ,close reports the pending prompt."""
        cog.bot.ticket_service.request_close = AsyncMock(return_value=False)

        await cog.close_prompt.callback(cog, ctx)

        cog.bot.ticket_service.request_close.assert_awaited_once_with(5000, 111222333)
        assert "already pending" in ctx.reply.call_args[0][0]

    @pytest.mark.asyncio
    async def test_close_on_closing_ticket(self, cog, ctx):
        """Test ,close on a closing ticket says so instead of reporting a pending prompt."""
        cog.bot.ticket_service.request_close = AsyncMock(
            side_effect=TicketError("This ticket is already being closed."),
        )

        await cog.close_prompt.callback(cog, ctx)

        assert ctx.reply.call_args[0][0] == "❌ This ticket is already being closed."

    @pytest.mark.asyncio
    async def test_done_outside_ticket(self, cog, ctx):
        """Test ,done outside a ticket replies with the error."""
        cog.bot.ticket_service.mark_done = AsyncMock(side_effect=NotATicketError())

        await cog.done.callback(cog, ctx)

        assert ctx.reply.call_args[0][0] == "❌ This command can only be used inside a ticket."

    @pytest.mark.asyncio
    async def test_rename_reports_new_name(self, cog, ctx):
        """Test ,rename echoes the cleaned name."""
        cog.bot.ticket_service.rename = AsyncMock(return_value="vip")

        await cog.rename.callback(cog, ctx, name="V.I.P")

        cog.bot.ticket_service.rename.assert_awaited_once_with(5000, "V.I.P", 111222333)
        assert "`vip`" in ctx.reply.call_args[0][0]

    @pytest.mark.asyncio
    async def test_add_member(self, cog, ctx):
        """Test ,add grants the mentioned member."""
        cog.bot.ticket_service.add_member = AsyncMock()
        member = MagicMock(id=555, mention="<@555>")

        await cog.add.callback(cog, ctx, member)

        cog.bot.ticket_service.add_member.assert_awaited_once_with(5000, 555, 111222333)
        assert "<@555>" in ctx.reply.call_args[0][0]
