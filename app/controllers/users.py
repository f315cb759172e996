"""
User controllers: profile, theme and avatar updates.

Each controller is wrapped with ``controller_decorator``; failures raised
by the pipelines reach the request's error sink without local handling.
"""

from app.core.handlers import ErrorSink, HandlerRequest, ResponseSink, controller_decorator
from app.services import avatar as avatar_service
from app.services import profile as profile_service


@controller_decorator
async def update_profile(
    request: HandlerRequest, response: ResponseSink, next_error: ErrorSink
) -> None:
    user = await profile_service.update_profile(
        request.services.users,
        email=request.user.email,
        changes=request.body,
    )
    response.json({"user": user})


@controller_decorator
async def update_theme(
    request: HandlerRequest, response: ResponseSink, next_error: ErrorSink
) -> None:
    theme = await profile_service.update_theme(
        request.services.users,
        email=request.user.email,
        theme=request.body["theme"],
    )
    response.json({"user": {"theme": theme}})


@controller_decorator
async def update_avatar(
    request: HandlerRequest, response: ResponseSink, next_error: ErrorSink
) -> None:
    avatar_url = await avatar_service.update_avatar(
        request.services.users,
        request.services.media,
        user_id=request.user.id,
        upload_path=request.file.path if request.file else None,
    )
    response.json({"avatar": avatar_url})
