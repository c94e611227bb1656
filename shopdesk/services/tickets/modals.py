"""
Ticket System Modals
====================

Intake forms opened from the ticket panel.

Author: حَـــــنَّـــــا
"""

from typing import Dict

import discord

from shopdesk.core.constants import MODAL_FIELD_MAX_LENGTH
from shopdesk.core.logger import logger
from shopdesk.utils.interaction import safe_respond

from .errors import TicketError
from .models import RequestType


# =============================================================================
# Base Intake Modal
# =============================================================================

class TicketIntakeModal(discord.ui.Modal):
    """Shared submit handling for the intake forms."""

    request_type: RequestType

    def intake_fields(self) -> Dict[str, str]:
        raise NotImplementedError

    async def on_submit(self, interaction: discord.Interaction) -> None:
        """Handle modal submission."""
        service = getattr(interaction.client, "ticket_service", None)
        if service is None or interaction.guild_id is None:
            await safe_respond(interaction, "Ticket system is not available.")
            return

        await interaction.response.defer(ephemeral=True, thinking=True)

        try:
            ticket = await service.open_ticket(
                guild_id=interaction.guild_id,
                owner_id=interaction.user.id,
                owner_name=interaction.user.name,
                request_type=self.request_type,
                fields=self.intake_fields(),
            )
        except TicketError as e:
            logger.warning("Ticket Creation Rejected", [
                ("User", f"{interaction.user.name} ({interaction.user.id})"),
                ("Type", self.request_type.value),
                ("Reason", e.detail or e.user_message),
            ])
            await safe_respond(interaction, f"❌ {e.user_message}")
            return

        await safe_respond(interaction, f"✅ Ticket created: <#{ticket.channel_id}>")

    async def on_error(self, interaction: discord.Interaction, error: Exception) -> None:
        """Handle modal errors."""
        logger.error("Ticket Modal Error", [
            ("User", f"{interaction.user} ({interaction.user.id})"),
            ("Type", self.request_type.value),
            ("Error", str(error)[:200]),
        ])
        await safe_respond(interaction, "❌ Something went wrong while opening your ticket.")


# =============================================================================
# Purchase Modal
# =============================================================================

class PurchaseTicketModal(TicketIntakeModal, title="Purchase Ticket"):
    """Product, payment method and optional details."""

    request_type = RequestType.PURCHASE

    def __init__(self) -> None:
        super().__init__()

        self.product = discord.ui.TextInput(
            label="Product",
            style=discord.TextStyle.short,
            placeholder="What would you like to buy?",
            required=True,
            max_length=100,
        )
        self.add_item(self.product)

        self.payment = discord.ui.TextInput(
            label="Payment Method",
            style=discord.TextStyle.short,
            placeholder="PayPal, crypto, ...",
            required=True,
            max_length=100,
        )
        self.add_item(self.payment)

        self.details = discord.ui.TextInput(
            label="Details",
            style=discord.TextStyle.paragraph,
            placeholder="Anything else we should know? (optional)",
            required=False,
            max_length=MODAL_FIELD_MAX_LENGTH,
        )
        self.add_item(self.details)

    def intake_fields(self) -> Dict[str, str]:
        return {
            "product": self.product.value,
            "payment": self.payment.value,
            "details": self.details.value,
        }


# =============================================================================
# Support Modal
# =============================================================================

class SupportTicketModal(TicketIntakeModal, title="Support Ticket"):
    """Single free-text concern."""

    request_type = RequestType.SUPPORT

    def __init__(self) -> None:
        super().__init__()

        self.concern = discord.ui.TextInput(
            label="Concern",
            style=discord.TextStyle.paragraph,
            placeholder="Describe what you need help with...",
            required=True,
            max_length=MODAL_FIELD_MAX_LENGTH,
        )
        self.add_item(self.concern)

    def intake_fields(self) -> Dict[str, str]:
        return {"concern": self.concern.value}


__all__ = [
    "TicketIntakeModal",
    "PurchaseTicketModal",
    "SupportTicketModal",
]
