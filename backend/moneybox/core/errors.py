"""Domain exceptions raised by services and storage, mapped to HTTP in main.py."""

from fastapi import status


class CatalogError(Exception):
    """Base class for errors the API turns into a JSON error body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CatalogError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationFailed(CatalogError):
    """Input that passed schema validation but is still unusable."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: list[dict] | None = None):
        super().__init__(message)
        self.details = details or []


class PayloadTooLarge(CatalogError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE


class RevisionConflictError(CatalogError):
    """The store changed on disk after it was loaded for this write."""

    status_code = status.HTTP_409_CONFLICT


class StorageError(CatalogError):
    """The catalog file could not be read, parsed or written."""


class RateLimited(CatalogError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after
