"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.

Raw user agent strings are stored but never part of a response: visits are
exposed with their derived browser/os/device labels only.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from shortlinks.core.setting import settings


def build_short_url(short_id: str) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/{short_id}"


class ShortenRequest(BaseModel):
    """Request model for URL shortening endpoint."""
    long_url: Optional[str] = Field(None, description="The long URL to shorten (http:// or https://)")


class ShortenResponse(BaseModel):
    """Response model for URL shortening endpoint."""
    short_id: str = Field(..., description="The generated short id")
    long_url: str = Field(..., description="The original long URL")
    short_url: str = Field(..., description="The complete short URL")
    click_count: int = Field(0, description="Visits recorded so far")
    created_at: datetime


class VisitResponse(BaseModel):
    """One recorded visit, without the raw user agent."""
    timestamp: datetime
    referrer: str
    browser: str
    os: str
    device: str


class ShortLinkResponse(BaseModel):
    """A short link with its visit history."""
    id: int
    short_id: str
    long_url: str
    short_url: str
    click_count: int
    created_at: datetime
    visits: list[VisitResponse]


class ShortLinkListResponse(BaseModel):
    """Response model for the owner's link list."""
    urls: list[ShortLinkResponse]


class MessageResponse(BaseModel):
    message: str
