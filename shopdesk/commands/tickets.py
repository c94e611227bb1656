"""
ShopDesk - Ticket Commands Cog
==============================

Staff commands for working inside ticket channels.

DESIGN:
    Prefix commands (,close ,done ,add ,rename) mirror the shop's existing
    workflow; /close closes without a prompt and /sendpanel posts the intake
    panel. Every command is limited to the support role and OWNER_IDS.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from shopdesk.core.config import get_config, is_support_member
from shopdesk.core.logger import logger
from shopdesk.services.tickets import TicketError, TicketPanelView, build_panel_embed
from shopdesk.utils.discord_rate_limit import log_http_error
from shopdesk.utils.interaction import safe_defer, safe_respond

if TYPE_CHECKING:
    from shopdesk.bot import ShopDeskBot


# =============================================================================
# Tickets Cog
# =============================================================================

class TicketsCog(commands.Cog):
    """
    Ticket staff commands.

    Attributes:
        bot: Reference to the main bot instance.
        config: Bot configuration.
    """

    def __init__(self, bot: "ShopDeskBot") -> None:
        self.bot = bot
        self.config = get_config()

    @property
    def service(self):
        return self.bot.ticket_service

    # =========================================================================
    # Permission Checks
    # =========================================================================

    async def cog_check(self, ctx: commands.Context) -> bool:
        """Prefix commands: support team only, inside a guild."""
        return ctx.guild is not None and is_support_member(ctx.author, self.config)

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        """Slash commands: support team only."""
        return is_support_member(interaction.user, self.config)

    async def cog_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        if isinstance(error, commands.CheckFailure):
            await ctx.reply("❌ Only the support team can use this command.", mention_author=False)
        elif isinstance(error, (commands.MissingRequiredArgument, commands.BadArgument)):
            await ctx.reply(f"❌ Usage: `{ctx.prefix}{ctx.command.qualified_name} {ctx.command.signature}`", mention_author=False)
        else:
            logger.error("Ticket Command Failed", [
                ("Command", str(ctx.command)),
                ("User", f"{ctx.author} ({ctx.author.id})"),
                ("Error", str(error)[:200]),
            ])

    async def cog_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        if isinstance(error, app_commands.CheckFailure):
            await safe_respond(interaction, "❌ Only the support team can use this command.")
            return
        logger.error("Ticket Slash Command Failed", [
            ("Command", interaction.command.name if interaction.command else "Unknown"),
            ("User", f"{interaction.user} ({interaction.user.id})"),
            ("Error", str(error)[:200]),
        ])
        await safe_respond(interaction, "❌ Something went wrong.")

    async def _reply_error(self, ctx: commands.Context, error: TicketError) -> None:
        await ctx.reply(f"❌ {error.user_message}", mention_author=False)

    # =========================================================================
    # Prefix Commands
    # =========================================================================

    @commands.command(name="close")
    async def close_prompt(self, ctx: commands.Context) -> None:
        """Post the Confirm / Cancel close prompt."""
        try:
            posted = await self.service.request_close(ctx.channel.id, ctx.author.id)
        except TicketError as e:
            await self._reply_error(ctx, e)
            return
        if not posted:
            await ctx.reply("A close request is already pending.", mention_author=False)

    @commands.command(name="done")
    async def done(self, ctx: commands.Context) -> None:
        """Mark the ticket done: customer role, done- prefix, thank-you notice."""
        try:
            await self.service.mark_done(ctx.channel.id, ctx.author.id)
        except TicketError as e:
            await self._reply_error(ctx, e)

    @commands.command(name="add")
    async def add(self, ctx: commands.Context, member: discord.Member) -> None:
        """Give a member access to this ticket."""
        try:
            await self.service.add_member(ctx.channel.id, member.id, ctx.author.id)
        except TicketError as e:
            await self._reply_error(ctx, e)
            return
        await ctx.reply(f"✅ Added {member.mention} to the ticket.", mention_author=False)

    @commands.command(name="rename")
    async def rename(self, ctx: commands.Context, *, name: str) -> None:
        """Rename this ticket channel."""
        try:
            new_name = await self.service.rename(ctx.channel.id, name, ctx.author.id)
        except TicketError as e:
            await self._reply_error(ctx, e)
            return
        await ctx.reply(f"✅ Renamed to `{new_name}`.", mention_author=False)

    # =========================================================================
    # Slash Commands
    # =========================================================================

    @app_commands.command(name="close", description="Close this ticket now")
    @app_commands.guild_only()
    async def close_now(self, interaction: discord.Interaction) -> None:
        """Close without a confirmation prompt."""
        await safe_defer(interaction)
        try:
            report = await self.service.confirm_close(interaction.channel_id, interaction.user.id)
        except TicketError as e:
            await safe_respond(interaction, f"❌ {e.user_message}")
            return

        if report is None:
            await safe_respond(interaction, "This ticket is already closing.")
        else:
            await safe_respond(interaction, "🔒 Ticket closed, transcript sent.")

    @app_commands.command(name="sendpanel", description="Post the ticket panel in this channel")
    @app_commands.guild_only()
    async def send_panel(self, interaction: discord.Interaction) -> None:
        """Post the Purchase / Support panel."""
        try:
            await interaction.channel.send(embed=build_panel_embed(), view=TicketPanelView())
        except discord.HTTPException as e:
            log_http_error(e, "Send Ticket Panel", [("Channel", str(interaction.channel_id))])
            await safe_respond(interaction, "❌ Could not post the panel here.")
            return

        logger.tree("Ticket Panel Sent", [
            ("Channel", str(interaction.channel_id)),
            ("By", f"{interaction.user} ({interaction.user.id})"),
        ], emoji="🎫")
        await safe_respond(interaction, "✅ Panel sent.")


# =============================================================================
# Setup
# =============================================================================

async def setup(bot: "ShopDeskBot") -> None:
    """Add the tickets cog to the bot."""
    await bot.add_cog(TicketsCog(bot))


__all__ = ["TicketsCog"]
