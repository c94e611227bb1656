"""
ShopDesk - Interaction Utilities
================================

Shared helpers for Discord interaction handling.

Provides safe_respond() to eliminate repetitive try-except blocks
around interaction.response.is_done() checks.

Author: حَـــــنَّـــــا
"""

from typing import Any, Optional

import discord

from shopdesk.core.logger import logger


async def safe_respond(
    interaction: discord.Interaction,
    content: Optional[str] = None,
    *,
    embed: Optional[discord.Embed] = None,
    view: Optional[discord.ui.View] = None,
    ephemeral: bool = True,
) -> bool:
    """
    Safely respond to an interaction, handling is_done() checks.

    Uses response.send_message() for the first reply and followup.send()
    once the interaction has been responded to or deferred.

    Returns:
        True if the reply was sent, False if Discord rejected it.
    """
    kwargs: dict[str, Any] = {"ephemeral": ephemeral}
    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed
    if view is not None:
        kwargs["view"] = view

    try:
        if not interaction.response.is_done():
            await interaction.response.send_message(**kwargs)
        else:
            await interaction.followup.send(**kwargs)
        return True
    except discord.HTTPException as e:
        # Expected for expired interactions
        logger.debug("safe_respond failed", [
            ("Status", str(e.status)),
            ("Error", str(e)[:50]),
        ])
        return False


async def safe_defer(
    interaction: discord.Interaction,
    *,
    ephemeral: bool = True,
    thinking: bool = False,
) -> bool:
    """
    Safely defer an interaction response.

    Returns:
        True if deferred successfully, False if already responded or failed.
    """
    try:
        if interaction.response.is_done():
            return False
        await interaction.response.defer(ephemeral=ephemeral, thinking=thinking)
        return True
    except discord.HTTPException:
        return False


__all__ = [
    "safe_respond",
    "safe_defer",
]
