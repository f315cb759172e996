"""
Bridge between FastAPI routes and wrapped controllers.
"""

import tempfile
from pathlib import Path

from fastapi import UploadFile
from fastapi.responses import JSONResponse

from app.core.errors import HttpError
from app.core.handlers import (
    CollectingErrorSink,
    HandlerRequest,
    ResponseSink,
    UploadedFile,
    WrappedOperation,
)
from app.core.json_response import render_error


async def dispatch(op: WrappedOperation, request: HandlerRequest) -> JSONResponse:
    """
    Run a wrapped controller and turn its outcome into an HTTP response.

    A forwarded error is rendered by ``render_error``; otherwise the payload
    written to the response sink is returned as JSON.
    """
    response = ResponseSink()
    errors = CollectingErrorSink()

    await op(request, response, errors)

    if errors.error is not None:
        return render_error(errors.error)
    if not response.sent:
        return render_error(HttpError("Handler did not produce a response"))
    return JSONResponse(content=response.payload, status_code=response.status_code)


async def save_upload(upload: UploadFile | None) -> UploadedFile | None:
    """
    Save an uploaded file to a temporary location.

    The returned file belongs to the pipeline that consumes it, which
    deletes it when done.
    """
    if upload is None:
        return None

    suffix = Path(upload.filename or "").suffix
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as temp_file:
        temp_path = Path(temp_file.name)
        content = await upload.read()
        temp_file.write(content)

    return UploadedFile(path=temp_path)
