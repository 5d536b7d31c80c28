from typing import Any, Dict, Optional


class BookSaverError(Exception):
    """Base error carrying the HTTP status and any upstream detail."""

    status_code = 500

    def __init__(
        self,
        message: str,
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"ok": False, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(BookSaverError):
    """A required credential or identifier is missing."""


class ClientInputError(BookSaverError, ValueError):
    """The caller sent something unusable (empty query, blank title)."""

    status_code = 400


class UpstreamError(BookSaverError):
    """Aladin or Notion answered with an error or an unreadable payload."""

    def __init__(
        self,
        message: str,
        details: Optional[Any] = None,
        upstream_status: Optional[int] = None,
    ):
        status_code = upstream_status if upstream_status and upstream_status >= 400 else None
        super().__init__(message, details=details, status_code=status_code)
        self.upstream_status = upstream_status


class SchemaShapeError(BookSaverError):
    """The destination database schema cannot be used for writing pages."""
