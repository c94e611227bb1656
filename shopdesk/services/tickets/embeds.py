"""
Ticket System Embeds
====================

Embed builder functions for the ticket system.

Author: حَـــــنَّـــــا
"""

from datetime import datetime
from typing import Dict, Optional

import discord

from shopdesk.core.config import EmbedColors, NY_TZ
from shopdesk.core.constants import EMBED_FIELD_MAX_LENGTH

from .constants import REQUEST_TYPES
from .models import RequestType, Ticket


FOOTER_TEXT = "ShopDesk"

# Intake field -> embed field label
FIELD_LABELS = {
    "product": "Product",
    "payment": "Payment Method",
    "details": "Details",
    "concern": "Concern",
}


def _clip(value: str, limit: int = EMBED_FIELD_MAX_LENGTH) -> str:
    return value if len(value) <= limit else value[:limit - 3] + "..."


# =============================================================================
# Panel Embed
# =============================================================================

def build_panel_embed() -> discord.Embed:
    """Build the ticket panel shown above the Purchase / Support buttons."""
    embed = discord.Embed(
        title="🎫 Open a Ticket",
        description=(
            "🛒 **Purchase** - buy a product from the shop\n"
            "🆘 **Support** - get help with an order or question\n\n"
            "Press a button below and fill in the form."
        ),
        color=EmbedColors.TICKET,
    )
    embed.set_footer(text=FOOTER_TEXT)
    return embed


# =============================================================================
# Opening Embed
# =============================================================================

def build_opening_embed(ticket: Ticket, fields: Dict[str, str]) -> discord.Embed:
    """Build the summary posted as the first message of a new ticket."""
    info = REQUEST_TYPES[ticket.request_type.value]
    title = (
        f"{info['emoji']} Shop Ticket Opened"
        if ticket.request_type == RequestType.PURCHASE
        else f"{info['emoji']} Support Ticket"
    )

    embed = discord.Embed(
        title=title,
        description=f"Welcome <@{ticket.owner_id}>, the team will be with you shortly.",
        color=info["color"],
    )
    for name, value in fields.items():
        embed.add_field(name=FIELD_LABELS.get(name, name.title()), value=_clip(value), inline=False)
    embed.add_field(name="Ticket ID", value=f"`{ticket.display_id}`", inline=True)
    embed.add_field(name="Opened By", value=f"<@{ticket.owner_id}>", inline=True)
    embed.set_footer(text=FOOTER_TEXT)
    return embed


# =============================================================================
# Close Embeds
# =============================================================================

def build_close_prompt_embed(requested_by: int) -> discord.Embed:
    """Build the confirm / cancel prompt."""
    return discord.Embed(
        title="🔒 Close Ticket?",
        description=(
            f"<@{requested_by}> asked to close this ticket.\n"
            "A transcript will be sent before the channel is deleted."
        ),
        color=EmbedColors.WARNING,
    )


def build_closed_embed(
    ticket: Ticket,
    channel_name: str,
    closed_by: Optional[int],
    closed_at: Optional[datetime] = None,
) -> discord.Embed:
    """Build the "Ticket Closed" embed delivered alongside the transcript."""
    embed = discord.Embed(
        title="🔒 Ticket Closed",
        color=EmbedColors.RED,
        timestamp=closed_at or datetime.now(NY_TZ),
    )
    embed.add_field(name="Category", value=ticket.request_type.display_name, inline=True)
    embed.add_field(name="Channel Name", value=channel_name, inline=True)
    embed.add_field(
        name="Closed By",
        value=f"<@{closed_by}>" if closed_by else "Unknown",
        inline=True,
    )
    embed.add_field(name="Ticket ID", value=f"`{ticket.display_id}`", inline=True)
    embed.set_footer(text=FOOTER_TEXT)
    return embed


# =============================================================================
# Done Embed
# =============================================================================

def build_done_embed(owner_id: int) -> discord.Embed:
    """Build the completion notice."""
    embed = discord.Embed(
        title="✅ Deal Completed",
        description=f"Thanks For The Deal <@{owner_id}>",
        color=EmbedColors.SUCCESS,
    )
    embed.set_footer(text=FOOTER_TEXT)
    return embed


__all__ = [
    "FOOTER_TEXT",
    "build_panel_embed",
    "build_opening_embed",
    "build_close_prompt_embed",
    "build_closed_embed",
    "build_done_embed",
]
