"""
Error response schemas for API endpoints.

Every 4xx/5xx body the API produces (except 401, which has none) has the
shape `{"error": {"message": "..."}}`.
"""
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Inner error object."""

    message: str = Field(description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Error response body."""

    error: ErrorDetail

    @classmethod
    def from_message(cls, message: str) -> "ErrorResponse":
        """Build an error body from a plain message."""
        return cls(error=ErrorDetail(message=message))
