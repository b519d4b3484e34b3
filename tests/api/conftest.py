"""Shared fixtures for API tests."""
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark


@pytest.fixture
def test_bookmarks() -> list[dict[str, Any]]:
    """Four well-formed bookmarks with explicit ids."""
    return [
        {
            "id": 1,
            "title": "Google",
            "url": "www.google.com",
            "description": "most popular search engine",
            "rating": 5,
        },
        {
            "id": 2,
            "title": "Reddit",
            "url": "www.reddit.com",
            "description": "front page of the internet",
            "rating": 5,
        },
        {
            "id": 3,
            "title": "Facebook",
            "url": "www.facebook.com",
            "description": "steal yo info",
            "rating": 1,
        },
        {
            "id": 4,
            "title": "Thinkful",
            "url": "www.thinkful.com",
            "description": "learn to code",
            "rating": 5,
        },
    ]


@pytest.fixture
def malicious_bookmark() -> dict[str, Any]:
    """Bookmark payload carrying script and event-handler markup."""
    return {
        "title": 'Naughty naughty very naughty <script>alert("xss");</script>',
        "description": (
            'Bad image <img src="https://url.to.file.which/does-not.exist" '
            'onerror="alert(document.cookie);">. But not <strong>all</strong> bad.'
        ),
        "url": "www.malicious.com",
        "rating": 1,
    }


@pytest.fixture
def sanitized_bookmark() -> dict[str, Any]:
    """What `malicious_bookmark` looks like once stored."""
    return {
        "title": 'Naughty naughty very naughty &lt;script&gt;alert("xss");&lt;/script&gt;',
        "description": (
            'Bad image <img src="https://url.to.file.which/does-not.exist">. '
            "But not <strong>all</strong> bad."
        ),
        "url": "www.malicious.com",
        "rating": 1,
    }


@pytest.fixture
async def seeded_bookmarks(
    db_session: AsyncSession,
    test_bookmarks: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Insert `test_bookmarks` directly into the database."""
    db_session.add_all([Bookmark(**data) for data in test_bookmarks])
    await db_session.commit()
    return test_bookmarks
