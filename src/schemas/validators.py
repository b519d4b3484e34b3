"""
Validation functions for bookmark payloads.

Each check raises BookmarkValidationError with a client-facing message. The
create and update chains call them in a fixed order so the first violated
rule decides the reported error.
"""
import ipaddress
import re
from typing import Annotated, Any

from pydantic import AnyUrl, TypeAdapter, UrlConstraints, ValidationError

from core.config import get_settings
from models.bookmark import INTEGER_MAX, INTEGER_MIN
from services.exceptions import BookmarkValidationError
from services.sanitizer import sanitize

MAX_URL_LENGTH = 2083

URL_SCHEMES = ["http", "https", "ftp"]

BookmarkUrl = Annotated[AnyUrl, UrlConstraints(allowed_schemes=URL_SCHEMES, host_required=True)]

_url_adapter = TypeAdapter(BookmarkUrl)

# Hosts arrive lowercased and punycode-encoded (bücher.de -> xn--bcher-kva.de)
DOMAIN_LABEL_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
TLD_PATTERN = re.compile(r"^(?:[a-z]{2,63}|xn--[a-z0-9-]{2,59})$")

INTEGER_STRING_PATTERN = re.compile(r"\s*-?\d+\s*")

UPDATABLE_FIELDS = ("title", "url", "rating", "description")

EMPTY_UPDATE_MESSAGE = (
    "Request body must contain an update to 'title', 'url', 'rating', or 'description'"
)


def _is_public_host(host: str) -> bool:
    """Dotted domain with an alphabetic TLD, or a dotted IPv4 address."""
    try:
        ipaddress.IPv4Address(host)
        return True
    except ValueError:
        pass
    labels = host.split(".")
    if len(labels) < 2:
        return False
    if not all(DOMAIN_LABEL_PATTERN.match(label) for label in labels):
        return False
    return TLD_PATTERN.match(labels[-1]) is not None


def is_valid_url(url: str) -> bool:
    """Syntactic URL check; a scheme is optional (`www.example.com` passes)."""
    if len(url) > MAX_URL_LENGTH or any(c.isspace() for c in url):
        return False
    candidate = url if "://" in url else f"http://{url}"
    try:
        parsed = _url_adapter.validate_python(candidate)
    except ValidationError:
        return False
    return parsed.host is not None and _is_public_host(parsed.host)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def require_title(title: Any) -> str:
    """Title must be a non-empty string."""
    if _is_blank(title) or not isinstance(title, str):
        raise BookmarkValidationError("title is required")
    return title


def require_url(url: Any) -> str:
    """URL must be a non-empty string that passes the URL check."""
    if _is_blank(url) or not isinstance(url, str):
        raise BookmarkValidationError("url is required")
    if not is_valid_url(url.strip()):
        raise BookmarkValidationError("url is not valid")
    return url.strip()


def _parse_rating(rating: Any) -> int:
    if isinstance(rating, bool):
        raise BookmarkValidationError("rating must be a number")
    if isinstance(rating, int):
        return rating
    if isinstance(rating, float):
        if rating.is_integer():
            return int(rating)
        raise BookmarkValidationError("rating must be an integer")
    if isinstance(rating, str):
        if INTEGER_STRING_PATTERN.fullmatch(rating):
            return int(rating)
        try:
            float(rating)
        except ValueError:
            raise BookmarkValidationError("rating must be a number") from None
        raise BookmarkValidationError("rating must be an integer")
    raise BookmarkValidationError("rating must be a number")


def validate_rating(rating: Any) -> int:
    """
    Coerce rating to int; numeric strings such as "5" are accepted.

    Non-numeric values, fractional values, and values outside the column's
    integer range are rejected.
    """
    value = _parse_rating(rating)
    if not INTEGER_MIN <= value <= INTEGER_MAX:
        raise BookmarkValidationError(
            f"rating must be between {INTEGER_MIN} and {INTEGER_MAX}",
        )
    return value


def validate_description(description: Any) -> str:
    """Description must be a string; None means empty."""
    if description is None:
        return ""
    if not isinstance(description, str):
        raise BookmarkValidationError("description must be a string")
    return description


def validate_title_length(title: str) -> str:
    """Validate that title doesn't exceed maximum length."""
    settings = get_settings()
    if len(title) > settings.max_title_length:
        raise BookmarkValidationError(
            f"title exceeds maximum length of {settings.max_title_length:,} characters",
        )
    return title


def validate_description_length(description: str) -> str:
    """Validate that description doesn't exceed maximum length."""
    settings = get_settings()
    if len(description) > settings.max_description_length:
        raise BookmarkValidationError(
            f"description exceeds maximum length of "
            f"{settings.max_description_length:,} characters",
        )
    return description


def _clean_title(title: str) -> str:
    # Sanitizing can empty a title (a lone comment) or lengthen it (escaping)
    cleaned = require_title(sanitize(title))
    return validate_title_length(cleaned)


def _clean_description(description: str) -> str:
    return validate_description_length(sanitize(description))


def validate_create_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Run the create chain and return the cleaned fields.

    Order: title present, url present, url well-formed, rating numeric,
    then length limits. Length limits apply to the sanitized `title` and
    `description`, which are what get stored. Missing `description` defaults
    to "" and missing `rating` to 1.
    """
    title = require_title(payload.get("title"))
    url = require_url(payload.get("url"))
    rating = validate_rating(payload["rating"]) if payload.get("rating") is not None else 1
    description = validate_description(payload.get("description"))
    return {
        "title": _clean_title(title),
        "url": url,
        "description": _clean_description(description),
        "rating": rating,
    }


def validate_update_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Run the partial-update chain and return only recognized fields.

    Keys outside UPDATABLE_FIELDS are dropped silently. At least one
    recognized key must be present.
    """
    updates = {key: payload[key] for key in UPDATABLE_FIELDS if key in payload}
    if not updates:
        raise BookmarkValidationError(EMPTY_UPDATE_MESSAGE)

    cleaned: dict[str, Any] = {}
    if "title" in updates:
        cleaned["title"] = _clean_title(require_title(updates["title"]))
    if "url" in updates:
        cleaned["url"] = require_url(updates["url"])
    if "rating" in updates:
        cleaned["rating"] = validate_rating(updates["rating"])
    if "description" in updates:
        cleaned["description"] = _clean_description(validate_description(updates["description"]))
    return cleaned
