"""
Test configuration and fixtures.

Every test gets its own SQLite file under tmp_path, with the schema created
through the same init_db() the application runs on startup. The API client
talks to the app in-process and uses sessions bound to that file.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from shortlinks.db.models import ShortLink, VisitRecord
from shortlinks.db.session import create_session_maker, get_session, init_db
from shortlinks.db.sqlite_adapter import SQLiteAdapter
from shortlinks.main import app
from shortlinks.core.setting import settings

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


@pytest_asyncio.fixture
async def engine(tmp_path):
    test_engine = SQLiteAdapter(busy_timeout=30.0).create_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    )
    await init_db(test_engine)
    try:
        yield test_engine
    finally:
        await test_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as db_session:
        yield db_session


@pytest_asyncio.fixture
async def client(session_maker):
    """
    HTTP client for the app with the session dependency overridden.
    """
    async def override_get_session():
        async with session_maker() as db_session:
            try:
                yield db_session
            except Exception:
                await db_session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def owner_headers():
    return {settings.OWNER_HEADER: OWNER}


@pytest.fixture
def other_owner_headers():
    return {settings.OWNER_HEADER: OTHER_OWNER}


async def count_visits(session_maker, short_link_id=None) -> int:
    """Number of visit rows, for one link or overall."""
    async with session_maker() as db_session:
        statement = select(func.count()).select_from(VisitRecord)
        if short_link_id is not None:
            statement = statement.where(VisitRecord.short_link_id == short_link_id)
        return (await db_session.execute(statement)).scalar_one()


async def load_link(session_maker, short_id: str):
    """Fresh copy of a ShortLink, or None."""
    async with session_maker() as db_session:
        statement = select(ShortLink).where(ShortLink.short_id == short_id)
        return (await db_session.execute(statement)).scalar_one_or_none()


async def assert_click_counts_match_visits(session_maker) -> None:
    """click_count equals the number of visit rows for every link."""
    async with session_maker() as db_session:
        visit_counts = (
            select(VisitRecord.short_link_id, func.count().label("visits"))
            .group_by(VisitRecord.short_link_id)
            .subquery()
        )
        statement = (
            select(ShortLink.short_id, ShortLink.click_count, visit_counts.c.visits)
            .outerjoin(visit_counts, visit_counts.c.short_link_id == ShortLink.id)
        )
        for short_id, click_count, visits in (await db_session.execute(statement)).all():
            assert click_count == (visits or 0), f"{short_id}: {click_count} clicks, {visits} visits"
