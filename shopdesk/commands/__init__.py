"""
ShopDesk - Commands Package
===========================

Command implementations for the ShopDesk bot.
Commands are implemented as discord.py Cogs for modularity.

DESIGN:
    Each command file contains a Cog class with related commands and an
    async setup(bot) function. Cogs are loaded by the bot using
    load_extension() from the COMMAND_COGS list below.

Available Commands:
    ,close / ,done / ,add / ,rename: Ticket staff commands (prefix)
    /close: Close the current ticket immediately (support team)
    /sendpanel: Post the ticket panel (support team)

Author: حَـــــنَّـــــا
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "shopdesk.commands.tickets",
]


__all__ = [
    "COMMAND_COGS",
]
