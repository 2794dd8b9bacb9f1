"""Application exception types."""

from app.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error rendered as ``{"error": message}``."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(error=message)
        super().__init__(message)


class ConfigurationError(Exception):
    """Raised when the configured backend cannot be constructed."""


def not_found(resource: str) -> ApiError:
    return ApiError(status_code=404, message=f"{resource} not found")


__all__ = ["ApiError", "ConfigurationError", "not_found"]
