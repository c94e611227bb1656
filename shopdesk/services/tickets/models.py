"""
Ticket System Models
====================

Dataclasses and enums shared by the ticket lifecycle components.

Author: حَـــــنَّـــــا
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from shopdesk.core.database.models import TicketRecord
from .constants import REQUEST_TYPES


# =============================================================================
# Enums
# =============================================================================

class RequestType(str, Enum):
    """Kind of request a ticket was opened for."""

    PURCHASE = "purchase"
    SUPPORT = "support"

    @property
    def label(self) -> str:
        """Bare channel label ("shop" / "support")."""
        return REQUEST_TYPES[self.value]["label"]

    @property
    def display_name(self) -> str:
        return REQUEST_TYPES[self.value]["title"]


class TicketState(str, Enum):
    """Lifecycle state, owned by the closure coordinator."""

    OPEN = "open"
    PENDING_CLOSE_CONFIRMATION = "pending_close_confirmation"
    CLOSING = "closing"
    CLOSED = "closed"


class SubjectKind(str, Enum):
    """Principal a permission grant applies to."""

    EVERYONE = "everyone"
    MEMBER = "member"
    ROLE = "role"


class Capability(str, Enum):
    """Channel capabilities. Values match discord.Permissions attribute names."""

    VIEW = "view_channel"
    SEND = "send_messages"
    READ_HISTORY = "read_message_history"


ALL_CAPABILITIES: FrozenSet[Capability] = frozenset(Capability)


class ArchiveTargetKind(str, Enum):
    """Where a transcript is delivered."""

    OWNER_DM = "owner_dm"
    ORIGIN_CHANNEL = "origin_channel"
    ARCHIVE_CHANNEL = "archive_channel"


# =============================================================================
# Value Objects
# =============================================================================

@dataclass(frozen=True)
class PermissionGrant:
    """Allowed and denied capabilities for one principal."""

    subject_kind: SubjectKind
    subject_id: int
    allow: FrozenSet[Capability] = frozenset()
    deny: FrozenSet[Capability] = frozenset()


@dataclass(frozen=True)
class TranscriptMessage:
    """A single message as captured for a transcript. Never mutated."""

    message_id: int
    author_id: int
    author_tag: str
    created_at: datetime
    content: str
    attachments: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TranscriptDocument:
    """A rendered transcript file."""

    filename: str
    data: bytes


@dataclass(frozen=True)
class ArchiveTarget:
    """A transcript destination."""

    kind: ArchiveTargetKind
    target_id: int


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of delivering to one target."""

    target: ArchiveTarget
    delivered: bool
    error: Optional[str] = None


@dataclass
class ArchiveReport:
    """Per-target outcome of a transcript fan-out."""

    results: List[DeliveryResult] = field(default_factory=list)

    @property
    def delivered(self) -> List[ArchiveTarget]:
        return [r.target for r in self.results if r.delivered]

    @property
    def failed(self) -> List[ArchiveTarget]:
        return [r.target for r in self.results if not r.delivered]

    @property
    def all_delivered(self) -> bool:
        return all(r.delivered for r in self.results)


# =============================================================================
# Ticket
# =============================================================================

@dataclass
class Ticket:
    """A provisioned ticket channel and its lifecycle state."""

    channel_id: int
    guild_id: int
    owner_id: int
    request_type: RequestType
    category_id: int
    channel_name: str
    display_id: str
    state: TicketState = TicketState.OPEN
    created_at: float = field(default_factory=time.time)
    closed_by: Optional[int] = None
    closed_at: Optional[float] = None

    @classmethod
    def from_record(cls, record: TicketRecord) -> "Ticket":
        """Build a Ticket from a database row."""
        return cls(
            channel_id=record["channel_id"],
            guild_id=record["guild_id"],
            owner_id=record["owner_id"],
            request_type=RequestType(record["request_type"]),
            category_id=record["category_id"],
            channel_name=record["channel_name"],
            display_id=record["display_id"],
            state=TicketState(record["state"]),
            created_at=record["created_at"],
            closed_by=record.get("closed_by"),
            closed_at=record.get("closed_at"),
        )


__all__ = [
    "RequestType",
    "TicketState",
    "SubjectKind",
    "Capability",
    "ALL_CAPABILITIES",
    "ArchiveTargetKind",
    "PermissionGrant",
    "TranscriptMessage",
    "TranscriptDocument",
    "ArchiveTarget",
    "DeliveryResult",
    "ArchiveReport",
    "Ticket",
]
