"""Bookmark CRUD endpoints."""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.config import Settings
from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from schemas.errors import ErrorResponse
from services import bookmark_service
from services.exceptions import BookmarkNotFoundError, BookmarkValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookmarks", tags=["bookmarks"])

NOT_FOUND_RESPONSE: dict[int | str, dict[str, Any]] = {404: {"model": ErrorResponse}}
BAD_REQUEST_RESPONSE: dict[int | str, dict[str, Any]] = {400: {"model": ErrorResponse}}


async def _get_existing_bookmark(db: AsyncSession, bookmark_id: int) -> Bookmark:
    bookmark = await bookmark_service.get_bookmark(db, bookmark_id)
    if bookmark is None:
        logger.error("Bookmark with id %s not found.", bookmark_id)
        raise BookmarkNotFoundError(bookmark_id)
    return bookmark


@router.get("", response_model=list[BookmarkResponse])
@router.get("/", response_model=list[BookmarkResponse], include_in_schema=False)
async def list_bookmarks(
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """List all bookmarks."""
    bookmarks = await bookmark_service.list_bookmarks(db)
    return [BookmarkResponse.model_validate(b) for b in bookmarks]


@router.post(
    "",
    response_model=BookmarkResponse,
    status_code=201,
    responses=BAD_REQUEST_RESPONSE,
)
@router.post(
    "/",
    response_model=BookmarkResponse,
    status_code=201,
    responses=BAD_REQUEST_RESPONSE,
    include_in_schema=False,
)
async def create_bookmark(
    response: Response,
    payload: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> BookmarkResponse:
    """
    Create a new bookmark.

    `title` and `url` are required and `url` must be well formed.
    `description` defaults to "" and `rating` to 1. Markup in `title` and
    `description` is sanitized during validation, before storage.
    """
    try:
        data = BookmarkCreate.from_payload(payload)
    except BookmarkValidationError as e:
        logger.error("Invalid bookmark: %s", e.message)
        raise

    bookmark = await bookmark_service.create_bookmark(db, data)
    logger.info("Bookmark with id %s created", bookmark.id)
    response.headers["Location"] = f"{settings.api_prefix}/bookmarks/{bookmark.id}"
    return BookmarkResponse.model_validate(bookmark)


@router.get("/{bookmark_id}", response_model=BookmarkResponse, responses=NOT_FOUND_RESPONSE)
async def get_bookmark(
    bookmark_id: int,
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    bookmark = await _get_existing_bookmark(db, bookmark_id)
    return BookmarkResponse.model_validate(bookmark)


@router.patch(
    "/{bookmark_id}",
    status_code=204,
    responses={**NOT_FOUND_RESPONSE, **BAD_REQUEST_RESPONSE},
)
async def update_bookmark(
    bookmark_id: int,
    payload: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """
    Partially update a bookmark.

    At least one of `title`, `url`, `rating`, or `description` must be
    present; other keys are ignored. Responds with no body.
    """
    await _get_existing_bookmark(db, bookmark_id)
    try:
        data = BookmarkUpdate.from_payload(payload)
    except BookmarkValidationError as e:
        logger.error("Invalid bookmark update for id %s: %s", bookmark_id, e.message)
        raise

    await bookmark_service.update_bookmark(db, bookmark_id, data)
    logger.info("Bookmark with id %s updated.", bookmark_id)


@router.delete("/{bookmark_id}", status_code=204, responses=NOT_FOUND_RESPONSE)
async def delete_bookmark(
    bookmark_id: int,
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Delete a bookmark."""
    deleted = await bookmark_service.delete_bookmark(db, bookmark_id)
    if not deleted:
        logger.error("Bookmark with id %s not found.", bookmark_id)
        raise BookmarkNotFoundError(bookmark_id)
    logger.info("Bookmark with id %s deleted.", bookmark_id)
