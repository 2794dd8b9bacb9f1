"""Helpers shared by the service layer."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging

from app.errors import ApiError
from app.repositories.base import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate storage failures into 500 responses carrying the storage message."""
    try:
        yield
    except StorageError as exc:
        logger.error("storage.failed operation=%s error=%s", operation, exc)
        raise ApiError(status_code=500, message=str(exc) or "Internal server error") from exc
