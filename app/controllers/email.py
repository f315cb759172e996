"""Support email controller."""

from app.core.handlers import ErrorSink, HandlerRequest, ResponseSink, controller_decorator
from app.services.support import send_help_email as send_help_email_pipeline


@controller_decorator
async def send_help_email(
    request: HandlerRequest, response: ResponseSink, next_error: ErrorSink
) -> None:
    await send_help_email_pipeline(
        request.services.send_email,
        name=request.user.name,
        email=request.body["email"],
        comment=request.body["comment"],
    )
    response.json({"message": "Email sent successfully"})
