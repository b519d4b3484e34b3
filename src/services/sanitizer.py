"""
HTML sanitization for free-text bookmark fields.

Benign formatting markup is kept, unknown tags are escaped to inert text, and
attributes outside the per-tag allow-list (event handlers such as `onerror`)
are dropped. Output is stable under repeated sanitization.
"""
from bleach.sanitizer import Cleaner

ALLOWED_TAGS = frozenset({
    "a",
    "abbr",
    "b",
    "blockquote",
    "br",
    "code",
    "del",
    "em",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "i",
    "img",
    "li",
    "ol",
    "p",
    "pre",
    "s",
    "small",
    "span",
    "strong",
    "sub",
    "sup",
    "u",
    "ul",
})

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title", "target"],
    "abbr": ["title"],
    "img": ["src", "alt", "title", "width", "height"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto"]

_cleaner = Cleaner(
    tags=ALLOWED_TAGS,
    attributes=ALLOWED_ATTRIBUTES,
    protocols=ALLOWED_PROTOCOLS,
    strip=False,
    strip_comments=True,
)


def sanitize(text: str | None) -> str | None:
    """Return `text` with active HTML neutralized. None passes through."""
    if text is None:
        return None
    return _cleaner.clean(text)

