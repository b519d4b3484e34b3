"""FastAPI application entry point."""
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from api.routers import bookmarks, root
from core.auth import BearerTokenMiddleware
from core.config import Settings, get_settings
from db.session import create_tables, engine, is_sqlite_url
from schemas.errors import ErrorResponse
from services.exceptions import ApiError


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("bookmarks.access")

SERVER_ERROR_MESSAGE = "server error"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan - startup and shutdown."""
    app_settings = get_settings()
    logging.basicConfig(
        level=app_settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting Bookmarks API (environment=%s)", app_settings.environment)
    if is_sqlite_url(app_settings.database_url):
        await create_tables(engine)

    yield

    await engine.dispose()


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Process request and add security headers to response."""
        response = await call_next(request)
        # HSTS: enforce HTTPS for 1 year, including subdomains
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Prevent clickjacking - API shouldn't be framed
        response.headers["X-Frame-Options"] = "DENY"
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log one line per request.

    Production logs are terse (method, path, status, duration); other
    environments also include the client address and user agent.
    """

    def __init__(self, app: ASGIApp, *, terse: bool = False) -> None:
        super().__init__(app)
        self.terse = terse

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        """Time the request and log the outcome."""
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        if self.terse:
            access_logger.log(
                log_level,
                "%s %s %d - %.1f ms",
                request.method,
                request.url.path,
                status,
                duration_ms,
            )
        else:
            client_ip = request.client.host if request.client else "-"
            access_logger.log(
                log_level,
                '%s "%s %s" %d %.1f ms "%s"',
                client_ip,
                request.method,
                request.url.path,
                status,
                duration_ms,
                request.headers.get("user-agent", "-"),
            )
        return response


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse.from_message(message).model_dump(),
    )


async def api_error_handler(_request: Request, exc: ApiError) -> JSONResponse:
    """Render service errors as `{"error": {"message": ...}}`."""
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message, exc_info=exc.__cause__ or exc)
        return _error_response(exc.status_code, SERVER_ERROR_MESSAGE)
    return _error_response(exc.status_code, exc.message)


async def request_validation_error_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Malformed bodies and path parameters are reported as 400, not 422."""
    messages = []
    for err in exc.errors():
        loc = err.get("loc", ())
        field = loc[-1] if loc else "request"
        messages.append(f"{field}: {err.get('msg', 'invalid')}")
    return _error_response(400, "; ".join(messages) or "Invalid request")


async def unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected becomes a 500 without internal detail."""
    logger.error("Unhandled error", exc_info=exc)
    return _error_response(500, SERVER_ERROR_MESSAGE)


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """
    Build the application.

    The bookmark routes are mounted under `app_settings.api_prefix`; the
    root greeting always stays at `/`.
    """
    app_settings = app_settings or get_settings()

    application = FastAPI(
        title="Bookmarks API",
        description="Manage bookmarks (title, url, description, rating) behind a shared API token.",
        version="0.1.0",
        lifespan=lifespan,
    )

    application.add_exception_handler(ApiError, api_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_error_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    # Auth gate runs innermost of the middleware stack but before routing
    application.add_middleware(BearerTokenMiddleware)

    application.add_middleware(RequestLoggingMiddleware, terse=app_settings.is_production)

    # Security headers middleware (runs after CORS, adds headers to responses)
    application.add_middleware(SecurityHeadersMiddleware)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(root.router)
    application.include_router(bookmarks.router, prefix=app_settings.api_prefix)
    return application


app = create_app()
