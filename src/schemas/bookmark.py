"""Pydantic schemas for bookmark endpoints."""
from typing import Any

from pydantic import BaseModel, ConfigDict

from schemas.validators import validate_create_payload, validate_update_payload


class BookmarkCreate(BaseModel):
    """Schema for creating a new bookmark."""

    title: str
    url: str
    description: str = ""
    rating: int = 1

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "BookmarkCreate":
        """
        Build from a raw request body.

        Raises:
            BookmarkValidationError: On the first rule the payload violates.
        """
        return cls(**validate_create_payload(payload))


class BookmarkUpdate(BaseModel):
    """
    Schema for a partial bookmark update.

    Only fields that were present in the request are set; use
    `model_dump(exclude_unset=True)` to get the changes.
    """

    title: str | None = None
    url: str | None = None
    description: str | None = None
    rating: int | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "BookmarkUpdate":
        """
        Build from a raw request body, dropping unrecognized keys.

        Raises:
            BookmarkValidationError: If no recognized field is present or a
                present field is invalid.
        """
        return cls(**validate_update_payload(payload))


class BookmarkResponse(BaseModel):
    """Schema for bookmark responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    url: str
    description: str
    rating: int
