"""
HTTP-meaningful error types shared by every layer of the service.

Each error carries a status code, a human-readable message and a
machine-readable ``kind``. Pipelines raise them; the handler wrapper
forwards them; ``app.core.json_response.render_error`` turns them into
JSON responses.
"""

from typing import Any


class HttpError(Exception):
    """
    Base error for all failures surfaced to API callers.

    Subclasses fix the status code and kind; callers provide the message.
    """

    status_code: int = 500
    kind: str = "internal_error"
    default_message: str = "Server error"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class BadRequest(HttpError):
    """Raised when required input is missing or malformed."""

    status_code = 400
    kind = "bad_request"
    default_message = "Bad Request"


class Unauthorized(HttpError):
    """Raised when the caller cannot be authenticated."""

    status_code = 401
    kind = "unauthorized"
    default_message = "Not authorized"


class NotFound(HttpError):
    """Raised when a referenced record does not exist."""

    status_code = 404
    kind = "not_found"
    default_message = "Not found"


class Conflict(HttpError):
    """Raised when a write would break a uniqueness constraint."""

    status_code = 409
    kind = "conflict"
    default_message = "Conflict"


class RepositoryError(HttpError):
    """Raised when the persistent store fails to read or write a record."""

    status_code = 500
    kind = "repository_error"
    default_message = "Failed to access the user store"


class UpstreamServiceError(HttpError):
    """Raised when the media store or the email transport fails."""

    status_code = 502
    kind = "upstream_service_error"
    default_message = "Upstream service failed"
