"""
FastAPI Endpoints for the Short Link Service

This module defines all REST API endpoints with minimal logic.
Endpoints only handle:
- Request validation (Pydantic models)
- Resolving the requesting principal from the auth gateway header
- Error handling and HTTP responses
- Delegating to service layer

Error mapping:
- InvalidURLError        -> 400
- missing principal      -> 401
- UnauthorizedError      -> 403
- ShortLinkNotFoundError -> 404
- StoreUnavailableError  -> 503 with Retry-After
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortlinks.api.schemas import (
    MessageResponse,
    ShortLinkListResponse,
    ShortLinkResponse,
    ShortenRequest,
    ShortenResponse,
    VisitResponse,
    build_short_url,
)
from shortlinks.core.exceptions import (
    InvalidURLError,
    ShortLinkNotFoundError,
    StoreUnavailableError,
    UnauthorizedError,
)
from shortlinks.core.setting import settings
from shortlinks.core.validators import sanitize_short_id
from shortlinks.db.session import get_session
from shortlinks.services.redirect_service import RedirectService
from shortlinks.services.url_service import ShortLinkService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_owner_id(request: Request) -> str:
    """
    Resolve the authenticated principal for this request.

    Authentication happens upstream; the gateway forwards the principal's
    id in the settings.OWNER_HEADER header.

    Raises:
        HTTPException 401: If the header is missing or blank
    """
    owner_id = request.headers.get(settings.OWNER_HEADER, "").strip()
    if not owner_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required"
        )
    return owner_id


def store_unavailable(error: StoreUnavailableError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=str(error),
        headers={"Retry-After": str(settings.STORE_RETRY_AFTER_SECONDS)}
    )


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short URL",
    description="Takes a long URL and returns a shortened version with a unique id"
)
async def create_short_url(
    body: ShortenRequest,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
) -> ShortenResponse:
    """
    Create a new short URL from a long URL.

    Returns:
        ShortenResponse with short_id, long_url, short_url and click_count 0
    """
    try:
        short_link = await ShortLinkService(session).shorten(owner_id, body.long_url)
    except InvalidURLError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.reason
        )
    except StoreUnavailableError as e:
        raise store_unavailable(e)

    return ShortenResponse(
        short_id=short_link.short_id,
        long_url=short_link.long_url,
        short_url=build_short_url(short_link.short_id),
        click_count=short_link.click_count,
        created_at=short_link.created_at
    )


@router.get(
    "/urls",
    response_model=ShortLinkListResponse,
    summary="List own short URLs",
    description="Returns the caller's short URLs, newest first, with visit analytics"
)
async def list_short_urls(
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
) -> ShortLinkListResponse:
    try:
        links = await ShortLinkService(session).list_for_owner(owner_id)
    except StoreUnavailableError as e:
        raise store_unavailable(e)

    return ShortLinkListResponse(
        urls=[
            ShortLinkResponse(
                id=link.id,
                short_id=link.short_id,
                long_url=link.long_url,
                short_url=build_short_url(link.short_id),
                click_count=link.click_count,
                created_at=link.created_at,
                visits=[
                    VisitResponse(
                        timestamp=visit.visited_at,
                        referrer=visit.referrer,
                        browser=visit.browser,
                        os=visit.os,
                        device=visit.device
                    )
                    for visit in visits
                ]
            )
            for link, visits in links
        ]
    )


@router.delete(
    "/urls/{short_id}",
    response_model=MessageResponse,
    summary="Delete a short URL",
    description="Deletes one of the caller's short URLs together with its visits"
)
async def delete_short_url(
    short_id: str,
    owner_id: str = Depends(get_owner_id),
    session: AsyncSession = Depends(get_session)
) -> MessageResponse:
    """
    Raises:
        HTTPException 403: If the short URL belongs to someone else
        HTTPException 404: If the short id does not exist
    """
    try:
        await ShortLinkService(session).delete(owner_id, short_id)
    except ShortLinkNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except UnauthorizedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to delete this short URL"
        )
    except StoreUnavailableError as e:
        raise store_unavailable(e)

    return MessageResponse(message="URL deleted successfully")


@router.get(
    "/{short_id}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to original URL",
    description="Records the visit, then redirects to the original long URL"
)
async def redirect_to_url(
    short_id: str,
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> RedirectResponse:
    """
    Redirect to the original URL for a given short id.

    The visit is committed before the redirect is returned.

    Raises:
        HTTPException 404: If short id not found (or cannot be a short id)
        HTTPException 503: If the visit could not be recorded
    """
    sanitized_id = sanitize_short_id(short_id)
    if not sanitized_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short id '{short_id}' not found"
        )

    try:
        long_url = await RedirectService(session).record_visit(
            sanitized_id,
            user_agent=request.headers.get("User-Agent"),
            referrer=request.headers.get("Referer")
        )
    except ShortLinkNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except StoreUnavailableError as e:
        raise store_unavailable(e)

    return RedirectResponse(
        url=long_url,
        status_code=status.HTTP_302_FOUND
    )
