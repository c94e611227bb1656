"""
Ticket Platform Adapter
=======================

The messaging surface the ticket lifecycle needs, and its discord.py
implementation.

DESIGN:
    Lifecycle components talk to TicketPlatform only, with plain ids and
    the neutral models from .models. DiscordTicketPlatform turns those into
    discord.py calls and converts every discord.HTTPException into a
    PlatformCallError after logging it.

Author: حَـــــنَّـــــا
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

import discord

from shopdesk.utils.discord_rate_limit import log_http_error
from .errors import PlatformCallError
from .models import PermissionGrant, SubjectKind, TranscriptDocument, TranscriptMessage
from .transcript.html_generator import create_transcript_file

if TYPE_CHECKING:
    from shopdesk.bot import ShopDeskBot


# =============================================================================
# Interface
# =============================================================================

class TicketPlatform(ABC):
    """Operations the ticket lifecycle performs on the messaging platform."""

    @abstractmethod
    async def create_channel(
        self,
        name: str,
        category_id: int,
        grants: Sequence[PermissionGrant],
    ) -> int:
        """Create a text channel under a category and return its id."""

    @abstractmethod
    async def delete_channel(self, channel_id: int) -> None:
        """Delete a channel."""

    @abstractmethod
    async def rename_channel(self, channel_id: int, name: str) -> None:
        """Rename a channel."""

    @abstractmethod
    async def get_channel_name(self, channel_id: int) -> Optional[str]:
        """Current channel name, or None if the channel is unknown."""

    @abstractmethod
    async def set_member_grant(self, channel_id: int, grant: PermissionGrant) -> None:
        """Apply one grant to an existing channel."""

    @abstractmethod
    async def send_message(
        self,
        channel_id: int,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
        view: Optional[discord.ui.View] = None,
        documents: Sequence[TranscriptDocument] = (),
    ) -> None:
        """Post a message to a channel."""

    @abstractmethod
    async def send_direct_message(
        self,
        user_id: int,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
        documents: Sequence[TranscriptDocument] = (),
    ) -> None:
        """Send a direct message to a user."""

    @abstractmethod
    async def fetch_message_page(
        self,
        channel_id: int,
        limit: int,
        before: Optional[int] = None,
    ) -> List[TranscriptMessage]:
        """
        One page of history, newest first.

        Only messages strictly older than `before` are returned when it is
        given. An empty list means the history is exhausted.
        """

    @abstractmethod
    async def grant_role(self, guild_id: int, user_id: int, role_id: int) -> None:
        """Add a role to a guild member."""


# =============================================================================
# discord.py Implementation
# =============================================================================

class DiscordTicketPlatform(TicketPlatform):
    """TicketPlatform backed by a discord.py client."""

    def __init__(self, bot: "ShopDeskBot") -> None:
        self.bot = bot

    # =========================================================================
    # Helpers
    # =========================================================================

    def _failure(self, e: discord.HTTPException, operation: str, context: list) -> PlatformCallError:
        log_http_error(e, operation, context)
        return PlatformCallError(operation, e.status, detail=str(e)[:200])

    async def _resolve_channel(self, channel_id: int) -> Any:
        """Cached channel, falling back to an API fetch."""
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            channel = await self.bot.fetch_channel(channel_id)
        return channel

    @staticmethod
    def _to_overwrite(grant: PermissionGrant) -> discord.PermissionOverwrite:
        values: Dict[str, bool] = {cap.value: True for cap in grant.allow}
        values.update({cap.value: False for cap in grant.deny})
        return discord.PermissionOverwrite(**values)

    @staticmethod
    def _resolve_subject(guild: discord.Guild, grant: PermissionGrant) -> Any:
        if grant.subject_kind == SubjectKind.EVERYONE:
            return guild.default_role
        if grant.subject_kind == SubjectKind.ROLE:
            return guild.get_role(grant.subject_id) or discord.Object(id=grant.subject_id, type=discord.Role)
        return guild.get_member(grant.subject_id) or discord.Object(id=grant.subject_id, type=discord.Member)

    @staticmethod
    def _message_kwargs(
        content: Optional[str],
        embed: Optional[discord.Embed],
        documents: Iterable[TranscriptDocument],
        view: Optional[discord.ui.View] = None,
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if content is not None:
            kwargs["content"] = content
        if embed is not None:
            kwargs["embed"] = embed
        if view is not None:
            kwargs["view"] = view
        # discord.File is consumed on send, build fresh ones per destination
        files = [create_transcript_file(doc) for doc in documents]
        if files:
            kwargs["files"] = files
        return kwargs

    # =========================================================================
    # Channels
    # =========================================================================

    async def create_channel(
        self,
        name: str,
        category_id: int,
        grants: Sequence[PermissionGrant],
    ) -> int:
        context = [("Name", name), ("Category", str(category_id))]
        try:
            category = await self._resolve_channel(category_id)
            if not isinstance(category, discord.CategoryChannel):
                raise PlatformCallError("Create Ticket Channel", detail=f"{category_id} is not a category")

            guild = category.guild
            overwrites = {
                self._resolve_subject(guild, grant): self._to_overwrite(grant)
                for grant in grants
            }
            channel = await guild.create_text_channel(
                name=name,
                category=category,
                overwrites=overwrites,
                reason="Ticket opened",
            )
        except discord.HTTPException as e:
            raise self._failure(e, "Create Ticket Channel", context)
        return channel.id

    async def delete_channel(self, channel_id: int) -> None:
        try:
            channel = await self._resolve_channel(channel_id)
            await channel.delete(reason="Ticket closed")
        except discord.HTTPException as e:
            raise self._failure(e, "Delete Ticket Channel", [("Channel", str(channel_id))])

    async def rename_channel(self, channel_id: int, name: str) -> None:
        try:
            channel = await self._resolve_channel(channel_id)
            await channel.edit(name=name, reason="Ticket renamed")
        except discord.HTTPException as e:
            raise self._failure(e, "Rename Ticket Channel", [
                ("Channel", str(channel_id)),
                ("Name", name),
            ])

    async def get_channel_name(self, channel_id: int) -> Optional[str]:
        channel = self.bot.get_channel(channel_id)
        return getattr(channel, "name", None)

    async def set_member_grant(self, channel_id: int, grant: PermissionGrant) -> None:
        try:
            channel = await self._resolve_channel(channel_id)
            target = self._resolve_subject(channel.guild, grant)
            await channel.set_permissions(
                target,
                overwrite=self._to_overwrite(grant),
                reason="Member added to ticket",
            )
        except discord.HTTPException as e:
            raise self._failure(e, "Add Ticket Member", [
                ("Channel", str(channel_id)),
                ("Subject", str(grant.subject_id)),
            ])

    # =========================================================================
    # Messages
    # =========================================================================

    async def send_message(
        self,
        channel_id: int,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
        view: Optional[discord.ui.View] = None,
        documents: Sequence[TranscriptDocument] = (),
    ) -> None:
        try:
            channel = await self._resolve_channel(channel_id)
            if not isinstance(channel, discord.abc.Messageable):
                raise PlatformCallError("Send Ticket Message", detail=f"{channel_id} cannot receive messages")
            await channel.send(**self._message_kwargs(content, embed, documents, view))
        except discord.HTTPException as e:
            raise self._failure(e, "Send Ticket Message", [("Channel", str(channel_id))])

    async def send_direct_message(
        self,
        user_id: int,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
        documents: Sequence[TranscriptDocument] = (),
    ) -> None:
        try:
            user = self.bot.get_user(user_id) or await self.bot.fetch_user(user_id)
            await user.send(**self._message_kwargs(content, embed, documents))
        except discord.HTTPException as e:
            raise self._failure(e, "Send Ticket DM", [("User", str(user_id))])

    async def fetch_message_page(
        self,
        channel_id: int,
        limit: int,
        before: Optional[int] = None,
    ) -> List[TranscriptMessage]:
        try:
            channel = await self._resolve_channel(channel_id)
            cursor = discord.Object(id=before) if before is not None else None
            return [
                TranscriptMessage(
                    message_id=msg.id,
                    author_id=msg.author.id,
                    author_tag=str(msg.author),
                    created_at=msg.created_at,
                    content=msg.clean_content,
                    attachments=tuple(att.url for att in msg.attachments),
                )
                async for msg in channel.history(limit=limit, before=cursor)
            ]
        except discord.HTTPException as e:
            raise self._failure(e, "Fetch Ticket History", [
                ("Channel", str(channel_id)),
                ("Before", str(before)),
            ])

    # =========================================================================
    # Roles
    # =========================================================================

    async def grant_role(self, guild_id: int, user_id: int, role_id: int) -> None:
        context = [("User", str(user_id)), ("Role", str(role_id))]
        guild = self.bot.get_guild(guild_id)
        if guild is None:
            raise PlatformCallError("Grant Role", detail=f"guild {guild_id} not cached")
        try:
            member = guild.get_member(user_id) or await guild.fetch_member(user_id)
            role = guild.get_role(role_id) or discord.Object(id=role_id)
            await member.add_roles(role, reason="Ticket marked done")
        except discord.HTTPException as e:
            raise self._failure(e, "Grant Role", context)


__all__ = [
    "TicketPlatform",
    "DiscordTicketPlatform",
]
