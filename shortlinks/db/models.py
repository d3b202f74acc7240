"""
Database Models for the Short Link Service

This module defines the SQLModel database schemas for:
- ShortLink: Maps a short id to a long URL, owned by a principal
- VisitRecord: One recorded redirect with derived client classification

Design Decisions:
- Visits live in their own table keyed by short_link_id; a link's visit
  history is its visit_records rows in id (insertion) order
- click_count is denormalized on ShortLink and only ever changed in the same
  transaction that appends a VisitRecord, so click_count == number of visits
- short_id carries the unique index that the allocator relies on to reject
  duplicate ids
- Visit rows are deleted with their link (ON DELETE CASCADE)

Open scaling question: visit_records grows without bound per link. At high
volume it belongs in an append-only time-series store with separate
aggregation.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlmodel import Column, Field, SQLModel

DIRECT_REFERRER = "Direct"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ShortLink(SQLModel, table=True):
    """
    Main table storing short link mappings.

    Fields:
    - id: Auto-incrementing primary key
    - owner_id: Opaque reference to the creating principal
    - long_url: The original target (http/https)
    - short_id: Unique fixed-length identifier, the lookup key
    - click_count: Number of recorded visits
    - created_at: Creation timestamp, never updated

    Indexes:
    - short_id: Unique index for redirects and collision detection
    - owner_id: For listing a principal's links
    """
    __tablename__ = "short_links"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: str = Field(
        sa_column=Column(String(255), nullable=False, index=True)
    )
    long_url: str = Field(sa_column=Column(Text, nullable=False))
    short_id: str = Field(
        sa_column=Column(String(32), nullable=False, unique=True, index=True),
        max_length=32
    )
    click_count: int = Field(default=0, sa_column=Column(Integer, nullable=False, default=0))
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )


class VisitRecord(SQLModel, table=True):
    """
    Visit table for per-redirect analytics.

    The raw user agent is kept for reprocessing; only the derived
    browser/os/device labels are exposed to API consumers.
    """
    __tablename__ = "visit_records"

    id: Optional[int] = Field(default=None, primary_key=True)
    short_link_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("short_links.id", ondelete="CASCADE"),
            nullable=False,
            index=True
        )
    )
    visited_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )
    referrer: str = Field(
        default=DIRECT_REFERRER,
        sa_column=Column(Text, nullable=False, default=DIRECT_REFERRER)
    )
    user_agent: str = Field(
        default="",
        sa_column=Column(Text, nullable=False, default="")
    )
    browser: str = Field(sa_column=Column(String(32), nullable=False))
    os: str = Field(sa_column=Column(String(32), nullable=False))
    device: str = Field(sa_column=Column(String(16), nullable=False))
