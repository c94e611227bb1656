"""
ShopDesk - Ticket System
========================

Ticket lifecycle engine: provisioning, closure, transcripts and archival.

Author: حَـــــنَّـــــا
"""

from typing import TYPE_CHECKING

from .service import TicketService
from .views import TicketPanelView, TicketCloseView, CloseConfirmView
from .modals import PurchaseTicketModal, SupportTicketModal
from .embeds import build_panel_embed
from .errors import (
    TicketError,
    ValidationError,
    NotATicketError,
    PrerequisiteFetchError,
    DeliveryFailure,
    PlatformCallError,
)
from .models import RequestType, TicketState, Ticket
from .platform import TicketPlatform, DiscordTicketPlatform

if TYPE_CHECKING:
    from shopdesk.bot import ShopDeskBot


def setup_ticket_views(bot: "ShopDeskBot") -> None:
    """Register persistent ticket views so buttons survive restarts."""
    bot.add_view(TicketPanelView())
    bot.add_view(TicketCloseView())
    bot.add_view(CloseConfirmView())


__all__ = [
    # Service
    "TicketService",
    "setup_ticket_views",
    # Views
    "TicketPanelView",
    "TicketCloseView",
    "CloseConfirmView",
    # Modals
    "PurchaseTicketModal",
    "SupportTicketModal",
    # Embeds
    "build_panel_embed",
    # Errors
    "TicketError",
    "ValidationError",
    "NotATicketError",
    "PrerequisiteFetchError",
    "DeliveryFailure",
    "PlatformCallError",
    # Models
    "RequestType",
    "TicketState",
    "Ticket",
    # Platform
    "TicketPlatform",
    "DiscordTicketPlatform",
]
