"""Shared exceptions for service layer operations."""


class ApiError(Exception):
    """
    Base exception for errors that map directly to an HTTP response.

    Rendered by the application as `{"error": {"message": ...}}` with
    `status_code`.
    """

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class BookmarkValidationError(ApiError):
    """Raised when a create or update payload fails validation."""

    status_code = 400


class BookmarkNotFoundError(ApiError):
    """Raised when no bookmark matches the requested id."""

    status_code = 404

    def __init__(self, bookmark_id: int) -> None:
        self.bookmark_id = bookmark_id
        super().__init__("Bookmark not found")


class StorageError(ApiError):
    """
    Raised when the underlying database call fails.

    The message is for logs only; clients receive a generic server error.
    """

    status_code = 500
