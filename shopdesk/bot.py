"""
ShopDesk - Main Bot Class
=========================

Core Discord client for the shop's ticket desk.

Features:
- Ticket panel with purchase and support intake
- Ticket close flow with HTML transcripts
- Prefix and slash commands for the support team

Author: حَـــــنَّـــــا
"""

from datetime import datetime
from typing import Optional

import discord
from discord.ext import commands

from shopdesk.core.logger import logger
from shopdesk.core.config import get_config
from shopdesk.core.database import get_db
from shopdesk.services.tickets import TicketService, setup_ticket_views


# =============================================================================
# ShopDeskBot Class
# =============================================================================

class ShopDeskBot(commands.Bot):
    """
    Main Discord bot class for ShopDesk.

    DESIGN: Central orchestrator that:
    - Holds the ticket service for views, modals and commands
    - Registers persistent views so old buttons keep working
    - Manages bot lifecycle (startup, shutdown)

    SERVICE INITIALIZATION ORDER:
    1. setup_hook (before on_ready):
       - Ticket service creation
       - Persistent view registration
       - Command cog loading
       - Command tree syncing

    2. on_ready:
       - Error webhook
       - Recovery of interrupted deletions
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self) -> None:
        """Initialize the bot with necessary intents and configuration."""
        self.config = get_config()

        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True

        super().__init__(
            command_prefix=self.config.command_prefix,
            intents=intents,
            help_command=None,
        )

        self.db = get_db()
        self.start_time: datetime = datetime.now()
        self.ticket_service: Optional[TicketService] = None

        # Ready state guard
        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Create services, register views, load cogs and sync commands."""
        self.ticket_service = TicketService(self)
        setup_ticket_views(self)

        from shopdesk.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
                logger.info(f"Cog Loaded: {cog.split('.')[-1]}")
            except commands.ExtensionError as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        try:
            synced = await self.tree.sync()
            logger.tree("Commands Synced", [("Count", str(len(synced)))], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        """Finish startup once the guild cache is populated."""
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True

        if not self.user:
            return

        if self.config.error_webhook_url:
            logger.set_webhook(self.config.error_webhook_url)

        recovered = 0
        if self.ticket_service:
            recovered = await self.ticket_service.recover_pending_deletions()

        logger.tree("SHOPDESK READY", [
            ("Name", self.user.name),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
            ("Recovered Deletions", str(recovered)),
        ], emoji="🚀")

    # =========================================================================
    # Events
    # =========================================================================

    async def on_guild_channel_delete(self, channel: discord.abc.GuildChannel) -> None:
        """Drop records of tickets whose channel was deleted by hand."""
        if self.ticket_service:
            await self.ticket_service.handle_channel_deleted(channel.id)

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def shutdown(self) -> None:
        """Graceful shutdown with proper cleanup."""
        logger.info("Initiating Graceful Shutdown")

        if self.ticket_service:
            await self.ticket_service.stop()

        self.db.close()
        await super().close()

        logger.tree("SHUTDOWN COMPLETE", [
            ("Uptime", str(datetime.now() - self.start_time)),
        ], emoji="🛑")

    async def close(self) -> None:
        """Override close to ensure proper shutdown."""
        await self.shutdown()


__all__ = ["ShopDeskBot"]
