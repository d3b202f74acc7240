"""
API tests for the short link endpoints.
"""

import pytest

from shortlinks.core.exceptions import StoreUnavailableError
from shortlinks.core.setting import settings
from shortlinks.services.redirect_service import RedirectService

from tests.conftest import assert_click_counts_match_visits


async def shorten(client, headers, long_url="https://example.com/some/long/path"):
    response = await client.post("/shorten", json={"long_url": long_url}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_health(client):
    """Test the health endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_shorten(client, owner_headers):
    """Test creating a short URL."""
    data = await shorten(client, owner_headers)

    assert data["long_url"] == "https://example.com/some/long/path"
    assert data["click_count"] == 0
    assert len(data["short_id"]) == 8
    assert data["short_url"] == f"{settings.BASE_URL.rstrip('/')}/{data['short_id']}"
    assert "created_at" in data
    assert "X-Process-Time" in (await client.get("/health")).headers


@pytest.mark.asyncio
async def test_shorten_rejects_bad_urls(client, owner_headers):
    """Test that invalid or missing URLs get 400."""
    for body in [{"long_url": "ftp://example.com"}, {"long_url": "not a url"}, {}]:
        response = await client.post("/shorten", json=body, headers=owner_headers)
        assert response.status_code == 400, body
        assert "http://" in response.json()["detail"]


@pytest.mark.asyncio
async def test_owner_header_required(client):
    """Test that owner endpoints need the owner header."""
    assert (await client.post("/shorten", json={"long_url": "https://example.com"})).status_code == 401
    assert (await client.get("/urls")).status_code == 401
    assert (await client.delete("/urls/aB3dE6gH")).status_code == 401


@pytest.mark.asyncio
async def test_redirect_records_visit(client, owner_headers):
    """Test that a redirect is recorded and listed without the raw agent."""
    data = await shorten(client, owner_headers)

    response = await client.get(
        f"/{data['short_id']}",
        headers={
            "User-Agent": "Mozilla/5.0 (Windows NT 10.0) Chrome/99 Mobile",
            "Referer": "https://news.example.com",
        }
    )
    assert response.status_code == 302
    assert response.headers["location"] == "https://example.com/some/long/path"

    [listed] = (await client.get("/urls", headers=owner_headers)).json()["urls"]
    assert listed["click_count"] == 1
    [visit] = listed["visits"]
    assert visit["referrer"] == "https://news.example.com"
    assert (visit["browser"], visit["os"], visit["device"]) == ("Chrome", "Windows", "Mobile")
    assert "user_agent" not in visit


@pytest.mark.asyncio
async def test_redirect_unknown_ids(client, session_maker):
    """Test 404 for unknown and malformed ids."""
    assert (await client.get("/Nope1234")).status_code == 404
    # Cannot be a short id at all
    assert (await client.get("/short")).status_code == 404
    assert (await client.get("/has-dash")).status_code == 404

    await assert_click_counts_match_visits(session_maker)


@pytest.mark.asyncio
async def test_redirect_store_unavailable(client, owner_headers, monkeypatch):
    """Test 503 with Retry-After when the visit cannot be stored."""
    data = await shorten(client, owner_headers)

    async def unavailable(self, short_id, user_agent=None, referrer=None):
        raise StoreUnavailableError("database is locked")

    monkeypatch.setattr(RedirectService, "record_visit", unavailable)

    response = await client.get(f"/{data['short_id']}")
    assert response.status_code == 503
    assert response.headers["retry-after"] == str(settings.STORE_RETRY_AFTER_SECONDS)


@pytest.mark.asyncio
async def test_list_only_own_links(client, owner_headers, other_owner_headers):
    """Test that the listing is per owner and newest first."""
    first = await shorten(client, owner_headers, "https://example.com/1")
    second = await shorten(client, owner_headers, "https://example.com/2")
    await shorten(client, other_owner_headers, "https://example.com/other")

    response = await client.get("/urls", headers=owner_headers)
    assert response.status_code == 200
    urls = response.json()["urls"]
    assert [url["short_id"] for url in urls] == [second["short_id"], first["short_id"]]
    assert all(url["visits"] == [] for url in urls)


@pytest.mark.asyncio
async def test_delete(client, owner_headers, other_owner_headers):
    """Test the delete flow for owner and non-owner."""
    data = await shorten(client, owner_headers)
    short_id = data["short_id"]
    await client.get(f"/{short_id}")

    response = await client.delete(f"/urls/{short_id}", headers=other_owner_headers)
    assert response.status_code == 403
    assert (await client.get(f"/{short_id}")).status_code == 302

    response = await client.delete(f"/urls/{short_id}", headers=owner_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "URL deleted successfully"}

    assert (await client.get(f"/{short_id}")).status_code == 404
    assert (await client.delete(f"/urls/{short_id}", headers=owner_headers)).status_code == 404
    assert (await client.get("/urls", headers=owner_headers)).json() == {"urls": []}


@pytest.mark.asyncio
async def test_padded_path_is_not_an_alias(client, owner_headers, session_maker):
    """Test that whitespace around an id in the path does not redirect."""
    data = await shorten(client, owner_headers)
    short_id = data["short_id"]

    assert (await client.get(f"/%20{short_id}")).status_code == 404
    assert (await client.get(f"/{short_id}%20")).status_code == 404

    [listed] = (await client.get("/urls", headers=owner_headers)).json()["urls"]
    assert listed["click_count"] == 0
    await assert_click_counts_match_visits(session_maker)
