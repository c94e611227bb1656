"""
Ticket System Views
===================

Persistent views for the ticket panel, the close button and the
close confirmation prompt.

DESIGN:
    Every view uses timeout=None and fixed custom ids, and is registered
    with bot.add_view() at startup, so buttons keep working after a
    restart. Callbacks resolve the ticket from interaction.channel_id.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING, Optional

import discord

from shopdesk.core.logger import logger
from shopdesk.utils.interaction import safe_defer, safe_respond

from .constants import (
    CLOSE_BUTTON_ID,
    CLOSE_CANCEL_ID,
    CLOSE_CONFIRM_ID,
    PANEL_PURCHASE_ID,
    PANEL_SUPPORT_ID,
)
from .errors import TicketError
from .modals import PurchaseTicketModal, SupportTicketModal

if TYPE_CHECKING:
    from .service import TicketService


async def _get_service(interaction: discord.Interaction) -> Optional["TicketService"]:
    service = getattr(interaction.client, "ticket_service", None)
    if service is None:
        await safe_respond(interaction, "Ticket system is not available.")
    return service


# =============================================================================
# Ticket Panel View
# =============================================================================

class TicketPanelView(discord.ui.View):
    """Purchase / Support buttons posted by /sendpanel."""

    def __init__(self) -> None:
        super().__init__(timeout=None)

    @discord.ui.button(
        label="Purchase",
        emoji="🛒",
        style=discord.ButtonStyle.success,
        custom_id=PANEL_PURCHASE_ID,
    )
    async def purchase(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        logger.tree("Ticket Panel Clicked", [
            ("User", f"{interaction.user.name} ({interaction.user.id})"),
            ("Type", "purchase"),
        ], emoji="🎫")
        await interaction.response.send_modal(PurchaseTicketModal())

    @discord.ui.button(
        label="Support",
        emoji="🆘",
        style=discord.ButtonStyle.primary,
        custom_id=PANEL_SUPPORT_ID,
    )
    async def support(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        logger.tree("Ticket Panel Clicked", [
            ("User", f"{interaction.user.name} ({interaction.user.id})"),
            ("Type", "support"),
        ], emoji="🎫")
        await interaction.response.send_modal(SupportTicketModal())


# =============================================================================
# Close Button View
# =============================================================================

class TicketCloseView(discord.ui.View):
    """Close button attached to a ticket's opening message."""

    def __init__(self) -> None:
        super().__init__(timeout=None)

    @discord.ui.button(
        label="Close Ticket",
        emoji="🔒",
        style=discord.ButtonStyle.danger,
        custom_id=CLOSE_BUTTON_ID,
    )
    async def close(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        service = await _get_service(interaction)
        if service is None:
            return

        try:
            posted = await service.request_close(interaction.channel_id, interaction.user.id)
        except TicketError as e:
            await safe_respond(interaction, f"❌ {e.user_message}")
            return

        if posted:
            await safe_respond(interaction, "Close requested, confirm below.")
        else:
            await safe_respond(interaction, "This ticket already has a pending close request.")


# =============================================================================
# Close Confirmation View
# =============================================================================

class CloseConfirmView(discord.ui.View):
    """Confirm / Cancel prompt for a pending close."""

    def __init__(self) -> None:
        super().__init__(timeout=None)

    @discord.ui.button(
        label="Confirm",
        emoji="✅",
        style=discord.ButtonStyle.danger,
        custom_id=CLOSE_CONFIRM_ID,
    )
    async def confirm(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        service = await _get_service(interaction)
        if service is None:
            return

        # Finalization outlives the 3 second response window
        await safe_defer(interaction)
        try:
            report = await service.confirm_close(interaction.channel_id, interaction.user.id)
        except TicketError as e:
            await safe_respond(interaction, f"❌ {e.user_message}")
            return

        if report is None:
            await safe_respond(interaction, "This ticket is already closing.")
        else:
            await safe_respond(interaction, "🔒 Ticket closed, transcript sent.")

    @discord.ui.button(
        label="Cancel",
        emoji="✖️",
        style=discord.ButtonStyle.secondary,
        custom_id=CLOSE_CANCEL_ID,
    )
    async def cancel(self, interaction: discord.Interaction, button: discord.ui.Button) -> None:
        service = await _get_service(interaction)
        if service is None:
            return

        try:
            cancelled = await service.cancel_close(interaction.channel_id, interaction.user.id)
        except TicketError as e:
            await safe_respond(interaction, f"❌ {e.user_message}")
            return

        if not cancelled:
            await safe_respond(interaction, "There is no pending close request.")
            return

        try:
            await interaction.response.edit_message(content="↩️ Close cancelled.", embed=None, view=None)
        except discord.HTTPException:
            await safe_respond(interaction, "↩️ Close cancelled.")


__all__ = [
    "TicketPanelView",
    "TicketCloseView",
    "CloseConfirmView",
]
