"""
ShopDesk - Button & Modal Interaction Tests
===========================================

Tests for ticket button callbacks and modal submissions.
Uses mocked Discord interactions.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from shopdesk.services.tickets.constants import (
    CLOSE_BUTTON_ID,
    CLOSE_CANCEL_ID,
    CLOSE_CONFIRM_ID,
    PANEL_PURCHASE_ID,
    PANEL_SUPPORT_ID,
)
from shopdesk.services.tickets.errors import NotATicketError, ValidationError
from shopdesk.services.tickets.modals import PurchaseTicketModal, SupportTicketModal
from shopdesk.services.tickets.models import RequestType
from shopdesk.services.tickets.views import CloseConfirmView, TicketCloseView, TicketPanelView
from shopdesk.utils.interaction import safe_defer, safe_respond


@pytest.fixture
def interaction():
    """Mocked interaction inside a ticket channel."""
    mock = MagicMock()
    mock.channel_id = 5000
    mock.guild_id = 987654321
    mock.user.id = 111222333
    mock.user.name = "staff"
    mock.response.is_done = MagicMock(return_value=False)
    mock.response.send_message = AsyncMock()
    mock.response.send_modal = AsyncMock()
    mock.response.defer = AsyncMock()
    mock.response.edit_message = AsyncMock()
    mock.followup.send = AsyncMock()
    mock.client.ticket_service = MagicMock()
    return mock


def _http_error(status=500):
    response = MagicMock(status=status, reason="Error")
    return discord.HTTPException(response, "boom")


# =============================================================================
# Safe Respond
# =============================================================================

class TestSafeRespond:
    """Tests for the interaction reply helpers."""

    @pytest.mark.asyncio
    async def test_first_reply(self, interaction):
        """Test the first reply goes through response.send_message."""
        assert await safe_respond(interaction, "hi") is True
        interaction.response.send_message.assert_awaited_once_with(content="hi", ephemeral=True)

    @pytest.mark.asyncio
    async def test_followup_after_defer(self, interaction):
        """Test later replies use the followup webhook."""
        interaction.response.is_done.return_value = True
        await safe_respond(interaction, "later")
        interaction.followup.send.assert_awaited_once_with(content="later", ephemeral=True)

    @pytest.mark.asyncio
    async def test_expired_interaction(self, interaction):
        """Test a rejected reply returns False instead of raising."""
        interaction.response.send_message.side_effect = _http_error(404)
        assert await safe_respond(interaction, "hi") is False

    @pytest.mark.asyncio
    async def test_defer_once(self, interaction):
        """Test deferring an answered interaction is skipped."""
        assert await safe_defer(interaction) is True
        interaction.response.is_done.return_value = True
        assert await safe_defer(interaction) is False
        interaction.response.defer.assert_awaited_once()


# =============================================================================
# Persistent Views
# =============================================================================

class TestPersistentViews:
    """Tests for view persistence."""

    @pytest.mark.asyncio
    async def test_fixed_custom_ids(self):
        """Test every button has a fixed custom id and no timeout."""
        expected = {
            TicketPanelView: {PANEL_PURCHASE_ID, PANEL_SUPPORT_ID},
            TicketCloseView: {CLOSE_BUTTON_ID},
            CloseConfirmView: {CLOSE_CONFIRM_ID, CLOSE_CANCEL_ID},
        }
        for view_cls, custom_ids in expected.items():
            view = view_cls()
            assert view.timeout is None
            assert view.is_persistent()
            assert {item.custom_id for item in view.children} == custom_ids

    @pytest.mark.asyncio
    async def test_setup_ticket_views(self):
        """Test all three views are registered with the bot."""
        from shopdesk.services.tickets import setup_ticket_views

        bot = MagicMock()
        setup_ticket_views(bot)

        registered = [call.args[0] for call in bot.add_view.call_args_list]
        assert [type(v) for v in registered] == [TicketPanelView, TicketCloseView, CloseConfirmView]


# =============================================================================
# Button Callbacks
# =============================================================================

class TestTicketButtons:
    """Tests for ticket button callbacks."""

    @pytest.mark.asyncio
    async def test_panel_opens_purchase_modal(self, interaction):
        """Test the Purchase button opens the purchase form."""
        view = TicketPanelView()
        await view.purchase.callback(interaction)

        modal = interaction.response.send_modal.call_args[0][0]
        assert isinstance(modal, PurchaseTicketModal)

    @pytest.mark.asyncio
    async def test_panel_opens_support_modal(self, interaction):
        """Test the Support button opens the support form."""
        view = TicketPanelView()
        await view.support.callback(interaction)

        modal = interaction.response.send_modal.call_args[0][0]
        assert isinstance(modal, SupportTicketModal)

    @pytest.mark.asyncio
    async def test_close_button_requests_close(self, interaction):
        """Test the close button asks the service for a prompt."""
        service = interaction.client.ticket_service
        service.request_close = AsyncMock(return_value=True)

        view = TicketCloseView()
        await view.close.callback(interaction)

        service.request_close.assert_awaited_once_with(5000, 111222333)
        assert "confirm" in interaction.response.send_message.call_args[1]["content"].lower()

    @pytest.mark.asyncio
    async def test_close_button_outside_ticket(self, interaction):
        """Test the close button reports a non-ticket channel."""
        service = interaction.client.ticket_service
        service.request_close = AsyncMock(side_effect=NotATicketError())

        view = TicketCloseView()
        await view.close.callback(interaction)

        content = interaction.response.send_message.call_args[1]["content"]
        assert content.startswith("❌")
        assert "inside a ticket" in content

    @pytest.mark.asyncio
    async def test_service_unavailable(self, interaction):
        """Test buttons reply when the service is not attached."""
        interaction.client = MagicMock(spec=[])

        view = TicketCloseView()
        await view.close.callback(interaction)

        content = interaction.response.send_message.call_args[1]["content"]
        assert "not available" in content

    @pytest.mark.asyncio
    async def test_confirm_defers_then_closes(self, interaction):
        """Test confirm defers before finalizing and reports via followup."""
        interaction.response.is_done.side_effect = [False, True]
        service = interaction.client.ticket_service
        service.confirm_close = AsyncMock(return_value=MagicMock())

        view = CloseConfirmView()
        await view.confirm.callback(interaction)

        interaction.response.defer.assert_awaited_once()
        service.confirm_close.assert_awaited_once_with(5000, 111222333)
        assert "closed" in interaction.followup.send.call_args[1]["content"].lower()

    @pytest.mark.asyncio
    async def test_confirm_already_closing(self, interaction):
        """Test a second confirm reports the ticket is already closing."""
        interaction.response.is_done.side_effect = [False, True]
        service = interaction.client.ticket_service
        service.confirm_close = AsyncMock(return_value=None)

        view = CloseConfirmView()
        await view.confirm.callback(interaction)

        assert "already closing" in interaction.followup.send.call_args[1]["content"]

    @pytest.mark.asyncio
    async def test_cancel_edits_prompt(self, interaction):
        """Test cancel replaces the prompt."""
        service = interaction.client.ticket_service
        service.cancel_close = AsyncMock(return_value=True)

        view = CloseConfirmView()
        await view.cancel.callback(interaction)

        interaction.response.edit_message.assert_awaited_once_with(
            content="↩️ Close cancelled.", embed=None, view=None,
        )

    @pytest.mark.asyncio
    async def test_cancel_without_pending(self, interaction):
        """Test cancel with nothing pending leaves the message alone."""
        service = interaction.client.ticket_service
        service.cancel_close = AsyncMock(return_value=False)

        view = CloseConfirmView()
        await view.cancel.callback(interaction)

        interaction.response.edit_message.assert_not_awaited()
        assert "no pending" in interaction.response.send_message.call_args[1]["content"].lower()


# =============================================================================
# Modal Submissions
# =============================================================================

class TestIntakeModals:
    """Tests for intake modal submission."""

    @pytest.mark.asyncio
    async def test_purchase_submit(self, interaction):
        """Test a submitted form opens a ticket for the submitter."""
        interaction.response.is_done.return_value = True
        service = interaction.client.ticket_service
        service.open_ticket = AsyncMock(return_value=MagicMock(channel_id=5001))

        modal = PurchaseTicketModal()
        fields = {"product": "Gift Card", "payment": "PayPal", "details": ""}
        with patch.object(modal, "intake_fields", return_value=fields):
            await modal.on_submit(interaction)

        interaction.response.defer.assert_awaited_once_with(ephemeral=True, thinking=True)
        service.open_ticket.assert_awaited_once_with(
            guild_id=987654321,
            owner_id=111222333,
            owner_name="staff",
            request_type=RequestType.PURCHASE,
            fields=fields,
        )
        assert "<#5001>" in interaction.followup.send.call_args[1]["content"]

    @pytest.mark.asyncio
    async def test_support_submit_rejected(self, interaction):
        """Test a rejected intake is shown to the submitter."""
        interaction.response.is_done.return_value = True
        service = interaction.client.ticket_service
        service.open_ticket = AsyncMock(side_effect=ValidationError("The concern field cannot be empty."))

        modal = SupportTicketModal()
        with patch.object(modal, "intake_fields", return_value={"concern": ""}):
            await modal.on_submit(interaction)

        content = interaction.followup.send.call_args[1]["content"]
        assert content == "❌ The concern field cannot be empty."

    @pytest.mark.asyncio
    async def test_submit_outside_guild(self, interaction):
        """Test submissions without a guild are refused."""
        interaction.guild_id = None

        modal = SupportTicketModal()
        await modal.on_submit(interaction)

        interaction.response.defer.assert_not_awaited()
        assert "not available" in interaction.response.send_message.call_args[1]["content"]
