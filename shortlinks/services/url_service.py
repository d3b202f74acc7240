"""
Short Link Service

This service handles the owner-facing operations on short links:
- Shorten: validate the long URL and allocate a unique short id
- List: all links of a principal with their visit history
- Delete: remove a link and its visits, owner only

Design Decisions:
- The owning principal is always an explicit argument; the service never
  reads request or session state
- Validation is limited to the http/https scheme check
- Store failures are wrapped in StoreUnavailableError so the API layer can
  answer with a retryable status
"""

import logging
from collections import defaultdict
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.core.exceptions import (
    InvalidURLError,
    ShortLinkNotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
)
from shortlinks.core.setting import settings
from shortlinks.core.validators import normalize_long_url
from shortlinks.db.models import ShortLink, VisitRecord
from shortlinks.services.allocator import ShortIdAllocator

logger = logging.getLogger(__name__)


class ShortLinkService:
    """
    Core business logic for creating, listing and deleting short links.

    Args:
        session: Database session
        allocator: Short id allocator (default: one bound to `session`
                   using the configured length and alphabet)
    """

    def __init__(self, session: AsyncSession, allocator: Optional[ShortIdAllocator] = None):
        self.session = session
        self.allocator = allocator or ShortIdAllocator(
            session,
            length=settings.SHORT_ID_LENGTH,
            alphabet=settings.SHORT_ID_ALPHABET
        )

    async def shorten(self, owner_id: str, long_url: Optional[str]) -> ShortLink:
        """
        Create a new short link for `long_url`.

        Always creates a new link, even if the same URL was shortened before.

        Args:
            owner_id: Principal creating the link
            long_url: URL to shorten; surrounding whitespace is stripped

        Returns:
            The persisted ShortLink (click_count == 0)

        Raises:
            InvalidURLError: If the URL does not start with http:// or https://
            StoreUnavailableError: If the store cannot be written
        """
        normalized_url = normalize_long_url(long_url)
        if normalized_url is None:
            raise InvalidURLError(
                long_url or "",
                reason="Please provide a valid URL starting with http:// or https://"
            )

        short_link = await self.allocator.allocate(owner_id, normalized_url)
        logger.info(f"Created short id '{short_link.short_id}' for owner '{owner_id}'")
        return short_link

    async def get_by_short_id(self, short_id: str) -> Optional[ShortLink]:
        """
        Retrieve the short link for a given short id.

        Returns:
            ShortLink if found, None otherwise
        """
        try:
            statement = select(ShortLink).where(ShortLink.short_id == short_id)
            result = await self.session.execute(statement)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreUnavailableError("failed to read short link", original_error=e) from e

    async def get_visits(self, short_link_id: int) -> list[VisitRecord]:
        """Visit history of one link in insertion order."""
        try:
            statement = (
                select(VisitRecord)
                .where(VisitRecord.short_link_id == short_link_id)
                .order_by(VisitRecord.id)
            )
            result = await self.session.execute(statement)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StoreUnavailableError("failed to read visits", original_error=e) from e

    async def list_for_owner(self, owner_id: str) -> list[tuple[ShortLink, list[VisitRecord]]]:
        """
        List every short link owned by `owner_id`, newest first.

        Returns:
            List of (ShortLink, visits) pairs; visits are in insertion order
        """
        try:
            links_statement = (
                select(ShortLink)
                .where(ShortLink.owner_id == owner_id)
                .order_by(ShortLink.created_at.desc(), ShortLink.id.desc())
            )
            links = list((await self.session.execute(links_statement)).scalars().all())
            if not links:
                return []

            visits_statement = (
                select(VisitRecord)
                .where(VisitRecord.short_link_id.in_([link.id for link in links]))
                .order_by(VisitRecord.id)
            )
            visits_by_link = defaultdict(list)
            for visit in (await self.session.execute(visits_statement)).scalars().all():
                visits_by_link[visit.short_link_id].append(visit)
        except SQLAlchemyError as e:
            raise StoreUnavailableError("failed to list short links", original_error=e) from e

        return [(link, visits_by_link[link.id]) for link in links]

    async def delete(self, owner_id: str, short_id: str) -> None:
        """
        Delete a short link and all of its visits.

        Args:
            owner_id: Principal requesting the delete
            short_id: Link to delete

        Raises:
            ShortLinkNotFoundError: If no link has this short id
            UnauthorizedError: If the link belongs to another principal
            StoreUnavailableError: If the store cannot be written
        """
        short_link = await self.get_by_short_id(short_id)
        if short_link is None:
            raise ShortLinkNotFoundError(short_id)
        if short_link.owner_id != owner_id:
            raise UnauthorizedError(short_id, owner_id)

        try:
            await self.session.execute(
                delete(VisitRecord).where(VisitRecord.short_link_id == short_link.id)
            )
            await self.session.execute(
                delete(ShortLink).where(ShortLink.id == short_link.id)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to delete short id '{short_id}': {str(e)}", exc_info=True)
            raise StoreUnavailableError("failed to delete short link", original_error=e) from e

        logger.info(f"Deleted short id '{short_id}' for owner '{owner_id}'")
