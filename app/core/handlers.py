"""
Controller plumbing: request/response carriers and the handler wrapper.

Controllers are plain async functions with the signature
``op(request, response, next_error)``. They write their result into the
``ResponseSink`` and are wrapped with ``controller_decorator`` so that any
failure ends up in ``next_error`` exactly once.
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from functools import wraps
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from app.core.logging import get_logger

if TYPE_CHECKING:
    from app.services.container import Services

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as supplied by the identity provider."""

    id: int
    email: str
    name: str


@dataclass(frozen=True)
class UploadedFile:
    """Reference to an uploaded file saved to a temporary location."""

    path: Path


@dataclass
class HandlerRequest:
    """Everything a controller needs to know about the inbound request."""

    user: Identity
    services: "Services"
    body: dict[str, Any] = field(default_factory=dict)
    file: UploadedFile | None = None


class ResponseSink:
    """Collects the JSON payload written by a controller."""

    def __init__(self) -> None:
        self.status_code: int = 200
        self.payload: dict[str, Any] | None = None

    def json(self, payload: dict[str, Any], status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    @property
    def sent(self) -> bool:
        return self.payload is not None


class ErrorSink(Protocol):
    """Single downstream channel for failures."""

    async def __call__(self, error: Exception) -> None: ...


class CollectingErrorSink:
    """Error sink that remembers the forwarded error for the transport adapter."""

    def __init__(self) -> None:
        self.error: Exception | None = None
        self.calls = 0

    async def __call__(self, error: Exception) -> None:
        self.calls += 1
        self.error = error


Operation = Callable[[HandlerRequest, ResponseSink, ErrorSink], Awaitable[None] | None]
WrappedOperation = Callable[[HandlerRequest, ResponseSink, ErrorSink], Awaitable[None]]


class _ReportOnce:
    """Wraps an error sink so that only the first report goes through."""

    def __init__(self, sink: ErrorSink, handler_name: str) -> None:
        self._sink = sink
        self._handler_name = handler_name
        self.reported = False

    async def __call__(self, error: Exception) -> None:
        if self.reported:
            logger.warning(
                "handler_error_already_reported",
                handler=self._handler_name,
                error=str(error),
                error_type=type(error).__name__,
            )
            return
        self.reported = True
        await self._sink(error)


def controller_decorator(op: Operation) -> WrappedOperation:
    """
    Wrap a controller so that failures are funneled to ``next_error``.

    Normal completion: nothing else happens, the controller has written its
    own response. Failure, whether raised synchronously or from the awaited
    result: the exception is forwarded to ``next_error`` once and is not
    re-raised.

    Example:
        @controller_decorator
        async def update_theme(request, response, next_error):
            ...
    """

    @wraps(op)
    async def wrapper(
        request: HandlerRequest,
        response: ResponseSink,
        next_error: ErrorSink,
    ) -> None:
        report = _ReportOnce(next_error, op.__name__)
        try:
            result = op(request, response, report)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.info(
                "handler_error_forwarded",
                handler=op.__name__,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            await report(exc)

    return wrapper
