"""
Tests for ShortLinkService: shorten, list and delete.
"""

import pytest

from shortlinks.core.exceptions import InvalidURLError, ShortLinkNotFoundError, UnauthorizedError
from shortlinks.services.redirect_service import RedirectService
from shortlinks.services.url_service import ShortLinkService

from tests.conftest import OTHER_OWNER, OWNER, count_visits, load_link


class TestShorten:
    """Test link creation."""

    @pytest.mark.asyncio
    async def test_shorten_valid_url(self, session):
        """Test that a valid URL is stored and retrievable by its id."""
        link = await ShortLinkService(session).shorten(OWNER, "https://example.com/path")

        assert link.long_url == "https://example.com/path"
        assert link.click_count == 0
        assert len(link.short_id) == 8

        found = await ShortLinkService(session).get_by_short_id(link.short_id)
        assert found is not None
        assert found.long_url == "https://example.com/path"

    @pytest.mark.asyncio
    async def test_shorten_trims_whitespace(self, session):
        """Test that the stored URL is trimmed."""
        link = await ShortLinkService(session).shorten(OWNER, "  https://example.com  ")
        assert link.long_url == "https://example.com"

    @pytest.mark.asyncio
    async def test_invalid_urls_rejected(self, session_maker):
        """Test that invalid URLs create nothing."""
        for url in ["ftp://example.com", "example.com", "", None]:
            async with session_maker() as session:
                with pytest.raises(InvalidURLError):
                    await ShortLinkService(session).shorten(OWNER, url)

        async with session_maker() as session:
            assert await ShortLinkService(session).list_for_owner(OWNER) == []

    @pytest.mark.asyncio
    async def test_same_url_gets_new_id_each_time(self, session_maker):
        """Test that repeated URLs are not deduplicated."""
        async with session_maker() as session:
            first = await ShortLinkService(session).shorten(OWNER, "https://example.com")
        async with session_maker() as session:
            second = await ShortLinkService(session).shorten(OWNER, "https://example.com")

        assert first.short_id != second.short_id


class TestListForOwner:
    """Test the owner listing."""

    @pytest.mark.asyncio
    async def test_newest_first_and_owner_only(self, session_maker):
        """Test ordering and owner filtering."""
        short_ids = []
        for i in range(3):
            async with session_maker() as session:
                link = await ShortLinkService(session).shorten(OWNER, f"https://example.com/{i}")
                short_ids.append(link.short_id)
        async with session_maker() as session:
            await ShortLinkService(session).shorten(OTHER_OWNER, "https://other.example.com")

        async with session_maker() as session:
            listed = await ShortLinkService(session).list_for_owner(OWNER)

        assert [link.short_id for link, _ in listed] == list(reversed(short_ids))
        assert all(visits == [] for _, visits in listed)

    @pytest.mark.asyncio
    async def test_visits_attached_in_order(self, session_maker):
        """Test that visits are listed in the order they happened."""
        async with session_maker() as session:
            link = await ShortLinkService(session).shorten(OWNER, "https://example.com")
            short_id = link.short_id

        for referrer in ["https://a.example", None, "https://b.example"]:
            async with session_maker() as session:
                await RedirectService(session).record_visit(short_id, "Firefox", referrer)

        async with session_maker() as session:
            [(listed_link, visits)] = await ShortLinkService(session).list_for_owner(OWNER)

        assert listed_link.click_count == 3
        assert [visit.referrer for visit in visits] == ["https://a.example", "Direct", "https://b.example"]
        assert all(visit.browser == "Firefox" for visit in visits)

    @pytest.mark.asyncio
    async def test_unknown_owner_has_no_links(self, session):
        """Test an owner without links."""
        assert await ShortLinkService(session).list_for_owner("nobody") == []


class TestDelete:
    """Test owner-only deletion."""

    @pytest.mark.asyncio
    async def test_owner_deletes_link_and_visits(self, session_maker):
        """Test that deletion removes the link and its visits."""
        async with session_maker() as session:
            link = await ShortLinkService(session).shorten(OWNER, "https://example.com")
            short_id, link_id = link.short_id, link.id
        async with session_maker() as session:
            await RedirectService(session).record_visit(short_id)

        async with session_maker() as session:
            await ShortLinkService(session).delete(OWNER, short_id)

        assert await load_link(session_maker, short_id) is None
        assert await count_visits(session_maker, link_id) == 0

    @pytest.mark.asyncio
    async def test_other_owner_cannot_delete(self, session_maker):
        """Test that another owner is refused and the link survives."""
        async with session_maker() as session:
            link = await ShortLinkService(session).shorten(OWNER, "https://example.com")
            short_id = link.short_id

        async with session_maker() as session:
            with pytest.raises(UnauthorizedError):
                await ShortLinkService(session).delete(OTHER_OWNER, short_id)

        assert await load_link(session_maker, short_id) is not None

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, session):
        """Test deleting an id that does not exist."""
        with pytest.raises(ShortLinkNotFoundError):
            await ShortLinkService(session).delete(OWNER, "zzzzzzzz")

    @pytest.mark.asyncio
    async def test_deleted_id_no_longer_redirects(self, session_maker):
        """Test that a deleted id is not found on redirect."""
        async with session_maker() as session:
            link = await ShortLinkService(session).shorten(OWNER, "https://example.com")
            short_id = link.short_id
        async with session_maker() as session:
            await ShortLinkService(session).delete(OWNER, short_id)

        async with session_maker() as session:
            with pytest.raises(ShortLinkNotFoundError):
                await RedirectService(session).record_visit(short_id)
