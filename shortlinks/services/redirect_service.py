"""
Redirect Service

This service resolves a short id for redirection and records the visit.

Design Decisions:
- Record before redirect: the target URL is only returned after the visit
  transaction has committed, so a failed write never produces a redirect
- One transaction per visit:
    1. UPDATE short_links SET click_count = click_count + 1 WHERE short_id = ?
    2. INSERT the VisitRecord
    3. COMMIT
  The increment is evaluated by the database (no read-modify-write), and the
  UPDATE takes the row's write lock first, so concurrent visits to the same
  link queue behind each other while visits to other links do not touch it
- Zero rows updated means the short id does not exist (or was just deleted):
  the transaction is rolled back and nothing is recorded
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.core.exceptions import ShortLinkNotFoundError, StoreUnavailableError
from shortlinks.db.models import DIRECT_REFERRER, ShortLink, VisitRecord, utc_now
from shortlinks.services.client_classifier import classify_user_agent

logger = logging.getLogger(__name__)


class RedirectService:
    """
    Service for handling redirects and visit analytics.

    Args:
        session: Async database session; each call to record_visit runs
                 one complete transaction on it
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record_visit(
        self,
        short_id: str,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None
    ) -> str:
        """
        Record one visit to `short_id` and return its redirect target.

        Args:
            short_id: The short id from the request path
            user_agent: Raw User-Agent header (may be missing)
            referrer: Referer header; missing or blank becomes "Direct"

        Returns:
            The long URL to redirect to

        Raises:
            ShortLinkNotFoundError: If no link has this short id
            StoreUnavailableError: If the visit could not be recorded
        """
        user_agent = user_agent or ""
        classification = classify_user_agent(user_agent)

        try:
            increment = (
                update(ShortLink)
                .where(ShortLink.short_id == short_id)
                .values(click_count=ShortLink.click_count + 1)
            )
            result = await self.session.execute(increment)

            if result.rowcount == 0:
                await self.session.rollback()
                raise ShortLinkNotFoundError(short_id)

            row = (
                await self.session.execute(
                    select(ShortLink.id, ShortLink.long_url).where(ShortLink.short_id == short_id)
                )
            ).one()

            self.session.add(
                VisitRecord(
                    short_link_id=row.id,
                    visited_at=utc_now(),
                    referrer=(referrer or "").strip() or DIRECT_REFERRER,
                    user_agent=user_agent,
                    browser=classification.browser,
                    os=classification.os,
                    device=classification.device,
                )
            )
            await self.session.commit()

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to record visit for '{short_id}': {str(e)}", exc_info=True)
            raise StoreUnavailableError("failed to record visit", original_error=e) from e

        return row.long_url
