"""
ShopDesk - Test Fixtures
========================

Shared fixtures for all tests.
"""

import asyncio
import os
import random
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Set, Tuple
from unittest.mock import MagicMock

import pytest

# Set up test environment before importing modules
os.environ.setdefault("SHOPDESK_LOGS_DIR", tempfile.mkdtemp(prefix="shopdesk-logs-"))

from shopdesk.core.config import Config
from shopdesk.services.tickets.errors import PlatformCallError
from shopdesk.services.tickets.models import PermissionGrant, TranscriptDocument, TranscriptMessage
from shopdesk.services.tickets.platform import TicketPlatform


GUILD_ID = 987654321
SUPPORT_ROLE_ID = 200
PURCHASE_CATEGORY_ID = 300
SUPPORT_CATEGORY_ID = 301
TRANSCRIPT_CHANNEL_ID = 400
CUSTOMER_ROLE_ID = 500
OWNER_ID = 123456789
STAFF_ID = 111222333


# =============================================================================
# Fake Platform
# =============================================================================

@dataclass
class SentMessage:
    """A message recorded by FakePlatform."""

    channel_id: int
    content: Optional[str] = None
    embed: object = None
    view: object = None
    documents: Tuple[TranscriptDocument, ...] = ()


@dataclass
class FakePlatform(TicketPlatform):
    """In-memory TicketPlatform that records every call."""

    next_channel_id: int = 5000
    channels: Dict[int, str] = field(default_factory=dict)
    channel_categories: Dict[int, int] = field(default_factory=dict)
    grants: Dict[int, List[PermissionGrant]] = field(default_factory=dict)
    history: Dict[int, List[TranscriptMessage]] = field(default_factory=dict)
    sent: List[SentMessage] = field(default_factory=list)
    direct: List[SentMessage] = field(default_factory=list)
    fetch_calls: List[Tuple[int, int, Optional[int]]] = field(default_factory=list)
    deleted: List[int] = field(default_factory=list)
    renamed: List[Tuple[int, str]] = field(default_factory=list)
    roles_granted: List[Tuple[int, int, int]] = field(default_factory=list)

    # Failure switches
    fail_create: bool = False
    fail_delete: bool = False
    fail_rename: bool = False
    fail_dm: bool = False
    fail_grant_role: bool = False
    fail_member_grant: bool = False
    failing_channels: Set[int] = field(default_factory=set)
    fail_fetch_on_call: Optional[int] = None

    async def create_channel(self, name, category_id, grants) -> int:
        await asyncio.sleep(0)
        if self.fail_create:
            raise PlatformCallError("Create Ticket Channel", 403)
        channel_id = self.next_channel_id
        self.next_channel_id += 1
        self.channels[channel_id] = name
        self.channel_categories[channel_id] = category_id
        self.grants[channel_id] = list(grants)
        return channel_id

    async def delete_channel(self, channel_id: int) -> None:
        await asyncio.sleep(0)
        if self.fail_delete:
            raise PlatformCallError("Delete Ticket Channel", 404)
        self.deleted.append(channel_id)
        self.channels.pop(channel_id, None)

    async def rename_channel(self, channel_id: int, name: str) -> None:
        await asyncio.sleep(0)
        if self.fail_rename:
            raise PlatformCallError("Rename Ticket Channel", 429)
        self.renamed.append((channel_id, name))
        self.channels[channel_id] = name

    async def get_channel_name(self, channel_id: int) -> Optional[str]:
        return self.channels.get(channel_id)

    async def set_member_grant(self, channel_id: int, grant: PermissionGrant) -> None:
        await asyncio.sleep(0)
        if self.fail_member_grant:
            raise PlatformCallError("Add Ticket Member", 403)
        self.grants.setdefault(channel_id, []).append(grant)

    async def send_message(
        self,
        channel_id: int,
        content: Optional[str] = None,
        *,
        embed=None,
        view=None,
        documents: Sequence[TranscriptDocument] = (),
    ) -> None:
        await asyncio.sleep(0)
        if channel_id in self.failing_channels:
            raise PlatformCallError("Send Ticket Message", 403)
        self.sent.append(SentMessage(channel_id, content, embed, view, tuple(documents)))

    async def send_direct_message(
        self,
        user_id: int,
        content: Optional[str] = None,
        *,
        embed=None,
        documents: Sequence[TranscriptDocument] = (),
    ) -> None:
        await asyncio.sleep(0)
        if self.fail_dm:
            raise PlatformCallError("Send Ticket DM", 403)
        self.direct.append(SentMessage(user_id, content, embed, None, tuple(documents)))

    async def fetch_message_page(self, channel_id: int, limit: int, before: Optional[int] = None):
        await asyncio.sleep(0)
        self.fetch_calls.append((channel_id, limit, before))
        if self.fail_fetch_on_call == len(self.fetch_calls):
            raise PlatformCallError("Fetch Ticket History", 500)
        messages = self.history.get(channel_id, [])
        if before is not None:
            messages = [m for m in messages if m.message_id < before]
        return list(reversed(messages))[:limit]

    async def grant_role(self, guild_id: int, user_id: int, role_id: int) -> None:
        await asyncio.sleep(0)
        if self.fail_grant_role:
            raise PlatformCallError("Grant Role", 403)
        self.roles_granted.append((guild_id, user_id, role_id))

    def messages_in(self, channel_id: int) -> List[SentMessage]:
        return [m for m in self.sent if m.channel_id == channel_id]


def make_messages(count: int, start_id: int = 1) -> List[TranscriptMessage]:
    """Oldest-first messages with increasing ids and timestamps."""
    base = datetime(2024, 1, 15, 17, 0, tzinfo=timezone.utc)
    return [
        TranscriptMessage(
            message_id=start_id + i,
            author_id=OWNER_ID if i % 2 == 0 else STAFF_ID,
            author_tag="alice" if i % 2 == 0 else "staff",
            created_at=base + timedelta(minutes=i),
            content=f"message {i}",
        )
        for i in range(count)
    ]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path for testing."""
    return tmp_path / "test_shopdesk.db"


@pytest.fixture
def test_db(temp_db_path, monkeypatch):
    """Create a fresh test database instance."""
    from shopdesk.core.database import manager as db_module

    # Reset singleton
    db_module.DatabaseManager._instance = None

    # Patch the DB path
    monkeypatch.setattr(db_module, "DB_PATH", temp_db_path)
    monkeypatch.setattr(db_module, "DATA_DIR", temp_db_path.parent)

    db = db_module.DatabaseManager()

    yield db

    db.close()
    db_module.DatabaseManager._instance = None


@pytest.fixture
def config():
    """Fully configured bot settings with an immediate deletion delay."""
    return Config(
        discord_token="test-token",
        support_role_id=SUPPORT_ROLE_ID,
        purchase_category_id=PURCHASE_CATEGORY_ID,
        support_category_id=SUPPORT_CATEGORY_ID,
        transcript_channel_id=TRANSCRIPT_CHANNEL_ID,
        customer_role_id=CUSTOMER_ROLE_ID,
        ticket_delete_delay=0,
        owner_ids={999},
    )


@pytest.fixture
def platform():
    return FakePlatform()


@pytest.fixture
def ticket_service(platform, test_db, config):
    """TicketService wired to the fake platform and temp database."""
    from shopdesk.services.tickets.service import TicketService

    return TicketService(platform=platform, db=test_db, config=config, rng=random.Random(7))


@pytest.fixture
def open_ticket(ticket_service):
    """Factory fixture: open a support ticket for alice and return it."""
    from shopdesk.services.tickets.models import RequestType

    async def _open(request_type=RequestType.SUPPORT, fields=None, owner_name="alice"):
        if fields is None:
            fields = {"concern": "My order has not arrived"}
        return await ticket_service.open_ticket(
            guild_id=GUILD_ID,
            owner_id=OWNER_ID,
            owner_name=owner_name,
            request_type=request_type,
            fields=fields,
        )

    return _open


@pytest.fixture
def mock_discord_member():
    """Create a mock Discord member."""
    member = MagicMock()
    member.id = OWNER_ID
    member.name = "alice"
    member.roles = []
    member.mention = f"<@{OWNER_ID}>"
    return member
