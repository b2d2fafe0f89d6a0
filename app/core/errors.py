"""Error taxonomy for the intake boundary.

Every failure that reaches a caller is an ``IngestionError``. The ``kind``
is a stable machine-readable label, ``status_code`` the HTTP status the
webhook answers with. Client-induced kinds are all in the 4xx range,
unexpected failures are ``Internal`` (500).
"""
from app.services.store.base import DocumentExistsError


class IngestionError(Exception):
    """Base class for errors surfaced to webhook and admin callers."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"ok": False, "error": self.message}


class Unauthenticated(IngestionError):
    kind = "unauthenticated"
    status_code = 401


class PermissionDenied(IngestionError):
    kind = "permission-denied"
    status_code = 403


class InvalidArgument(IngestionError):
    kind = "invalid-argument"
    status_code = 400


class NotFound(IngestionError):
    kind = "not-found"
    status_code = 404


class AlreadyExists(IngestionError):
    kind = "already-exists"
    status_code = 409


class Internal(IngestionError):
    kind = "internal"
    status_code = 500


def as_ingestion_error(exc: Exception) -> IngestionError:
    """Wrap an unexpected exception as ``Internal``, keeping its message."""
    if isinstance(exc, IngestionError):
        return exc
    if isinstance(exc, DocumentExistsError):
        return AlreadyExists(str(exc))
    return Internal(str(exc) or type(exc).__name__)
