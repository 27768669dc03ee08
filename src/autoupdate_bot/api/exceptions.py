"""Exceptions for the update-set API client."""


class ApiError(Exception):
    """Base exception for all remote API operations."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiConflictError(ApiError):
    """Raised on HTTP 409: the server does not know the current revision."""
