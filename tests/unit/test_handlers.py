"""
Unit tests for the controller wrapper.

Tests cover:
- Successful controllers write their own response, nothing is reported
- Raised errors reach the error sink exactly once and are not re-raised
- Errors raised before the first await are funneled the same way
- A controller that reports and then raises is reported once
"""

import pytest

from app.core.errors import BadRequest, NotFound
from app.core.handlers import (
    CollectingErrorSink,
    HandlerRequest,
    Identity,
    ResponseSink,
    controller_decorator,
)
from app.repositories.user import UserLookup


@pytest.fixture
def request_(services) -> HandlerRequest:
    return HandlerRequest(
        user=Identity(id=1, email="a@x.com", name="Ann"),
        services=services,
        body={"theme": "dark"},
    )


@pytest.mark.unit
class TestControllerDecorator:
    async def test_success_writes_response_and_reports_nothing(self, request_):
        @controller_decorator
        async def op(request, response, next_error):
            response.json({"user": {"theme": request.body["theme"]}})

        response = ResponseSink()
        errors = CollectingErrorSink()
        await op(request_, response, errors)

        assert response.payload == {"user": {"theme": "dark"}}
        assert response.status_code == 200
        assert errors.calls == 0

    async def test_raised_error_is_forwarded_once(self, request_):
        @controller_decorator
        async def op(request, response, next_error):
            raise NotFound("User not found")

        response = ResponseSink()
        errors = CollectingErrorSink()
        await op(request_, response, errors)

        assert errors.calls == 1
        assert isinstance(errors.error, NotFound)
        assert errors.error.status_code == 404
        assert not response.sent

    async def test_error_after_await_is_forwarded(self, request_):
        @controller_decorator
        async def op(request, response, next_error):
            await request.services.users.find(UserLookup.by_id(1))
            raise BadRequest("Please send the file")

        errors = CollectingErrorSink()
        await op(request_, ResponseSink(), errors)

        assert errors.calls == 1
        assert errors.error.message == "Please send the file"

    async def test_sync_callable_failure_is_forwarded(self, request_):
        def op(request, response, next_error):
            raise ValueError("boom")

        wrapped = controller_decorator(op)
        errors = CollectingErrorSink()
        await wrapped(request_, ResponseSink(), errors)

        assert errors.calls == 1
        assert isinstance(errors.error, ValueError)

    async def test_report_then_raise_is_reported_once(self, request_):
        @controller_decorator
        async def op(request, response, next_error):
            await next_error(BadRequest("first"))
            raise NotFound("second")

        errors = CollectingErrorSink()
        await op(request_, ResponseSink(), errors)

        assert errors.calls == 1
        assert errors.error.message == "first"

    async def test_wrapper_keeps_controller_name(self):
        @controller_decorator
        async def update_theme(request, response, next_error):
            pass

        assert update_theme.__name__ == "update_theme"
