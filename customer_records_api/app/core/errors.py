"""
Error taxonomy for the record service.

Services raise these exceptions instead of returning sentinel values.
Each class carries the HTTP status the API layer answers with.  The
``message`` is safe to show to clients; ``detail`` holds internal
information (e.g. the store's constraint text) that is only logged.
"""

import sqlite3
from typing import Optional

from fastapi import status


class RecordServiceError(Exception):
    """Base class for all failures surfaced by the service layer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(RecordServiceError):
    """A required field is missing or invalid."""

    # Literal status: the starlette constant for 422 was renamed and the
    # old name warns on access.
    status_code = 422


class NotFound(RecordServiceError):
    """No row matches the id of a by-id operation."""

    status_code = status.HTTP_404_NOT_FOUND


class ConstraintViolation(RecordServiceError):
    """The store rejected a statement on a foreign key or uniqueness rule."""

    status_code = status.HTTP_409_CONFLICT


class StoreUnavailable(RecordServiceError):
    """The store cannot be opened or used."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


def translate_store_error(exc: Exception) -> RecordServiceError:
    """Map a ``sqlite3`` or parameter binding exception onto the taxonomy."""
    text = str(exc)
    if isinstance(exc, (UnicodeEncodeError, OverflowError)):
        return ValidationError("A field value cannot be stored", detail=text)
    if isinstance(exc, sqlite3.IntegrityError):
        if "NOT NULL" in text:
            return ValidationError("A required field is missing", detail=text)
        return ConstraintViolation(
            "The operation conflicts with related records", detail=text
        )
    if isinstance(exc, (sqlite3.OperationalError, sqlite3.InterfaceError)):
        return StoreUnavailable("The record store is unavailable", detail=text)
    return RecordServiceError("Unexpected store error", detail=text)
