"""Root endpoint."""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["root"])

GREETING = "Hello, bookmarks!"


@router.get("/", response_class=PlainTextResponse)
async def read_root() -> str:
    """Plain-text greeting; confirms the token was accepted."""
    return GREETING
