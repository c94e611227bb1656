"""
Ticket Factory
==============

Intake validation, channel-name derivation and channel provisioning.

Author: حَـــــنَّـــــا
"""

import random
import re
import time
from typing import TYPE_CHECKING, Dict, Mapping, Optional

from shopdesk.core.config import Config
from shopdesk.core.logger import logger

from .constants import (
    CHANNEL_NAME_MAX,
    DEFAULT_DETAILS,
    DISPLAY_ID_MAX,
    DISPLAY_ID_MIN,
    INTAKE_FIELDS,
    REQUEST_TYPES,
)
from .embeds import build_opening_embed
from .errors import PlatformCallError, PrerequisiteFetchError, ValidationError
from .models import RequestType, Ticket, TicketState
from .permissions import build_ticket_grants
from .views import TicketCloseView

if TYPE_CHECKING:
    from shopdesk.core.database import DatabaseManager
    from .platform import TicketPlatform


_NAME_STRIP = re.compile(r"[^a-z0-9]")


# =============================================================================
# Naming Helpers
# =============================================================================

def clean_channel_name(value: str) -> str:
    """Lower-case, drop everything outside [a-z0-9], cut to 25 characters."""
    return _NAME_STRIP.sub("", value.lower())[:CHANNEL_NAME_MAX]


def derive_channel_name(request_type: RequestType, fields: Mapping[str, str], username: str) -> str:
    """
    Channel name for a new ticket.

    Purchase tickets are named after the product, falling back to
    shop-<username>; support tickets use support-<username>. Fallbacks are
    cleaned the same way and end at the bare label when nothing survives.
    """
    if request_type == RequestType.PURCHASE:
        name = clean_channel_name(fields.get("product", ""))
        if name:
            return name
    return clean_channel_name(f"{request_type.label}-{username}") or request_type.label


def generate_display_id(request_type: RequestType, rng: Optional[random.Random] = None) -> str:
    """Human-facing ticket id such as #GX1234 or #SUP1234. Not unique."""
    number = (rng or random).randint(DISPLAY_ID_MIN, DISPLAY_ID_MAX)
    return f"{REQUEST_TYPES[request_type.value]['display_prefix']}{number}"


def validate_intake(request_type: RequestType, fields: Mapping[str, Optional[str]]) -> Dict[str, str]:
    """
    Normalize submitted intake fields.

    Raises:
        ValidationError: If a required field is missing or blank.
    """
    cleaned: Dict[str, str] = {}
    for name, required in INTAKE_FIELDS[request_type.value]:
        value = (fields.get(name) or "").strip()
        if not value:
            if required:
                raise ValidationError(
                    f"The {name} field cannot be empty.",
                    detail=f"{request_type.value} intake missing {name}",
                )
            value = DEFAULT_DETAILS
        cleaned[name] = value
    return cleaned


# =============================================================================
# Factory
# =============================================================================

class TicketFactory:
    """Creates ticket channels and their records."""

    def __init__(
        self,
        platform: "TicketPlatform",
        db: "DatabaseManager",
        config: Config,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.platform = platform
        self.db = db
        self.config = config
        self._rng = rng

    def category_for(self, request_type: RequestType) -> int:
        if request_type == RequestType.PURCHASE:
            return self.config.purchase_category_id
        return self.config.support_category_id

    async def create(
        self,
        guild_id: int,
        owner_id: int,
        owner_name: str,
        request_type: RequestType,
        fields: Mapping[str, Optional[str]],
    ) -> Ticket:
        """
        Provision a ticket channel.

        Raises:
            ValidationError: Intake rejected, nothing was created.
            PrerequisiteFetchError: The channel could not be created.
        """
        intake = validate_intake(request_type, fields)
        channel_name = derive_channel_name(request_type, intake, owner_name)
        category_id = self.category_for(request_type)
        grants = build_ticket_grants(guild_id, owner_id, self.config.support_role_id)

        try:
            channel_id = await self.platform.create_channel(channel_name, category_id, grants)
        except PlatformCallError as e:
            raise PrerequisiteFetchError(
                "Could not create your ticket channel, please try again.",
                detail=str(e),
            ) from e

        ticket = Ticket(
            channel_id=channel_id,
            guild_id=guild_id,
            owner_id=owner_id,
            request_type=request_type,
            category_id=category_id,
            channel_name=channel_name,
            display_id=generate_display_id(request_type, self._rng),
            state=TicketState.OPEN,
            created_at=time.time(),
        )
        self.db.create_ticket(
            channel_id=ticket.channel_id,
            guild_id=ticket.guild_id,
            owner_id=ticket.owner_id,
            request_type=ticket.request_type.value,
            category_id=ticket.category_id,
            channel_name=ticket.channel_name,
            display_id=ticket.display_id,
            state=ticket.state.value,
            created_at=ticket.created_at,
        )

        try:
            await self.platform.send_message(
                channel_id,
                f"<@{owner_id}> <@&{self.config.support_role_id}>",
                embed=build_opening_embed(ticket, intake),
                view=TicketCloseView(),
            )
        except PlatformCallError as e:
            logger.warning("Ticket Opening Message Failed", [
                ("Channel", str(channel_id)),
                ("Error", (e.detail or e.user_message)[:100]),
            ])

        logger.tree("Ticket Created", [
            ("Channel", channel_name),
            ("Type", request_type.value),
            ("Display ID", ticket.display_id),
            ("Owner", str(owner_id)),
        ], emoji="🎫")

        return ticket


__all__ = [
    "clean_channel_name",
    "derive_channel_name",
    "generate_display_id",
    "validate_intake",
    "TicketFactory",
]
