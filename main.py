#!/usr/bin/env python3
"""
ShopDesk - Discord Bot Entry Point
==================================

Ticket desk for a Discord shop: purchase and support tickets, HTML
transcripts, and staff commands.

Author: حَـــــنَّـــــا
"""

import asyncio
import sys

from dotenv import load_dotenv

# .env must be loaded before config is read
load_dotenv()

from shopdesk.core.logger import logger
from shopdesk.core.config import ConfigValidationError, validate_and_log_config
from shopdesk.utils.error_handler import ErrorHandler


async def main() -> None:
    """
    Main entry point for ShopDesk.

    Handles the complete bot lifecycle:
    1. Validates environment configuration
    2. Initializes bot instance with proper intents
    3. Establishes connection to Discord API

    Raises:
        SystemExit: If configuration is invalid or the bot fails to start
    """
    try:
        config = validate_and_log_config()
    except ConfigValidationError as e:
        logger.error("Invalid Configuration", [("Error", str(e))])
        logger.error("   Please check your .env file (see .env.example)")
        sys.exit(1)

    from shopdesk.bot import ShopDeskBot

    bot = ShopDeskBot()
    logger.info("🤖 Bot instance created successfully")

    async with bot:
        await bot.start(config.discord_token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user (Ctrl+C)")
    except Exception as e:
        ErrorHandler.handle(e, location="main.__main__", critical=True)
        sys.exit(1)
