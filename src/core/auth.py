"""Bearer token gate applied to every request."""
import logging
import secrets

from fastapi import Request, Response, status
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from core.config import get_settings


logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Return the token from an `Authorization: Bearer <token>` header value.

    Returns None if the header is missing, uses another scheme, or carries
    no token.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def is_valid_token(token: str | None, expected: str) -> bool:
    """Constant-time comparison against the configured secret."""
    if token is None:
        return False
    return secrets.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


class BearerTokenMiddleware(BaseHTTPMiddleware):
    """
    Reject any request that does not carry the configured API token.

    Runs before routing, so unknown paths are rejected too. Rejections are a
    bare 401 with no body; the reason is never disclosed.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Check the bearer token and pass the request on if it matches."""
        token = extract_bearer_token(request.headers.get("Authorization"))
        if not is_valid_token(token, get_settings().api_token):
            logger.error("Unauthorized request to path: %s %s", request.method, request.url.path)
            return Response(
                status_code=status.HTTP_401_UNAUTHORIZED,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return await call_next(request)
