"""Service layer for bookmark CRUD operations."""
import functools
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import INTEGER_MAX, INTEGER_MIN, Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services.exceptions import StorageError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def _storage_call(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Re-raise database failures from `func` as StorageError."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.error("Storage call %s failed: %s", func.__name__, e)
            raise StorageError(f"{func.__name__} failed") from e

    return wrapper


def _is_storable_id(bookmark_id: int) -> bool:
    """Ids outside the column range can never match a row."""
    return INTEGER_MIN <= bookmark_id <= INTEGER_MAX


@_storage_call
async def list_bookmarks(db: AsyncSession) -> list[Bookmark]:
    """Get all bookmarks in storage order."""
    result = await db.execute(select(Bookmark).order_by(Bookmark.id))
    return list(result.scalars().all())


@_storage_call
async def get_bookmark(db: AsyncSession, bookmark_id: int) -> Bookmark | None:
    """Get a bookmark by ID. Returns None if not found."""
    if not _is_storable_id(bookmark_id):
        return None
    result = await db.execute(select(Bookmark).where(Bookmark.id == bookmark_id))
    return result.scalar_one_or_none()


@_storage_call
async def create_bookmark(db: AsyncSession, data: BookmarkCreate) -> Bookmark:
    """
    Insert a new bookmark and return it with its assigned id.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = Bookmark(
        title=data.title,
        url=data.url,
        description=data.description,
        rating=data.rating,
    )
    db.add(bookmark)
    await db.flush()
    await db.refresh(bookmark)
    return bookmark


@_storage_call
async def delete_bookmark(db: AsyncSession, bookmark_id: int) -> int:
    """
    Delete a bookmark. Returns the number of rows removed (0 or 1).

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    if not _is_storable_id(bookmark_id):
        return 0
    result = await db.execute(delete(Bookmark).where(Bookmark.id == bookmark_id))
    await db.flush()
    return result.rowcount


@_storage_call
async def update_bookmark(db: AsyncSession, bookmark_id: int, data: BookmarkUpdate) -> int:
    """
    Merge the fields set on `data` into an existing bookmark.

    Fields not set on `data` keep their stored values. Returns the number of
    rows updated (0 or 1).

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    update_data = data.model_dump(exclude_unset=True)
    if not update_data or not _is_storable_id(bookmark_id):
        return 0

    result = await db.execute(select(Bookmark).where(Bookmark.id == bookmark_id))
    bookmark = result.scalar_one_or_none()
    if bookmark is None:
        return 0

    for field, value in update_data.items():
        setattr(bookmark, field, value)
    await db.flush()
    return 1
