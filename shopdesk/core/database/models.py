"""
ShopDesk - Database Type Definitions
====================================

TypedDict definitions for database records.

Author: حَـــــنَّـــــا
"""

from typing import Optional, TypedDict


class TicketRecord(TypedDict, total=False):
    """Type for ticket records."""
    channel_id: int
    guild_id: int
    owner_id: int
    request_type: str
    category_id: int
    channel_name: str
    display_id: str
    state: str
    created_at: float
    closed_by: Optional[int]
    closed_at: Optional[float]


__all__ = ["TicketRecord"]
