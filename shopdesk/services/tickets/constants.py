"""
Ticket System Constants
=======================

Request types, intake fields, naming rules and limits for the ticket system.

Author: حَـــــنَّـــــا
"""

from shopdesk.core.config import EmbedColors
from shopdesk.core.constants import (
    MESSAGE_HISTORY_PAGE_SIZE,
    MAX_CHANNEL_NAME_LENGTH,
    TICKET_DELETE_DELAY,
)


# =============================================================================
# Request Types
# =============================================================================

REQUEST_TYPES = {
    "purchase": {
        "label": "shop",
        "title": "Purchase",
        "emoji": "🛒",
        "display_prefix": "#GX",
        "color": EmbedColors.TICKET,
    },
    "support": {
        "label": "support",
        "title": "Support",
        "emoji": "🆘",
        "display_prefix": "#SUP",
        "color": EmbedColors.TICKET,
    },
}


# =============================================================================
# Intake Fields
# =============================================================================

# (field name, required)
INTAKE_FIELDS = {
    "purchase": (("product", True), ("payment", True), ("details", False)),
    "support": (("concern", True),),
}

DEFAULT_DETAILS = "No details"


# =============================================================================
# Channel Naming
# =============================================================================

CHANNEL_NAME_MAX = 25          # Derived names are cut to this length
DONE_PREFIX = "done-"
DISPLAY_ID_MIN = 1000
DISPLAY_ID_MAX = 9999


# =============================================================================
# Custom IDs (persistent components)
# =============================================================================

PANEL_PURCHASE_ID = "shopdesk:panel:purchase"
PANEL_SUPPORT_ID = "shopdesk:panel:support"
CLOSE_BUTTON_ID = "shopdesk:close"
CLOSE_CONFIRM_ID = "shopdesk:close:confirm"
CLOSE_CANCEL_ID = "shopdesk:close:cancel"


__all__ = [
    "REQUEST_TYPES",
    "INTAKE_FIELDS",
    "DEFAULT_DETAILS",
    "CHANNEL_NAME_MAX",
    "DONE_PREFIX",
    "DISPLAY_ID_MIN",
    "DISPLAY_ID_MAX",
    "PANEL_PURCHASE_ID",
    "PANEL_SUPPORT_ID",
    "CLOSE_BUTTON_ID",
    "CLOSE_CONFIRM_ID",
    "CLOSE_CANCEL_ID",
    "MESSAGE_HISTORY_PAGE_SIZE",
    "MAX_CHANNEL_NAME_LENGTH",
    "TICKET_DELETE_DELAY",
]
