"""Support ("need help") email pipeline."""

import html as html_escape

from app.config import settings
from app.core.errors import UpstreamServiceError
from app.core.logging import get_logger
from app.services.email import EmailSender

logger = get_logger(__name__)

ACKNOWLEDGEMENT_SUBJECT = "Need help"
NOTIFICATION_SUBJECT = "Support notification"


def render_acknowledgement(name: str) -> str:
    """HTML body thanking the requester."""
    safe_name = html_escape.escape(name)
    return f"""<p>Dear {safe_name},<br>
We thank you for your email.<br>
<br>
Best regards,<br>
{html_escape.escape(settings.SMTP_FROM_NAME)}
</p>"""


def render_notification(name: str, email: str, comment: str) -> str:
    """HTML body telling the support team who needs help and how to reply."""
    safe_name = html_escape.escape(name)
    safe_email = html_escape.escape(email)
    safe_comment = html_escape.escape(comment)
    return f"""<p>Dear Team,<br>
<br>
The customer {safe_name} has sent you a help email.<br>
Comment from the user: {safe_comment}<br>
Email for reply: {safe_email}.<br>
<br>
Best regards,<br>
{html_escape.escape(settings.SMTP_FROM_NAME)}
</p>"""


async def send_help_email(
    send_email: EmailSender,
    *,
    name: str,
    email: str,
    comment: str,
) -> None:
    """
    Send the acknowledgement to the requester and the notification to support.

    Both messages are always attempted, in that order. If either of them
    fails, the whole request is reported as failed.

    Raises:
        UpstreamServiceError: at least one of the two messages was not sent
    """
    failed: list[str] = []

    if not await send_email(
        to=email,
        subject=ACKNOWLEDGEMENT_SUBJECT,
        html=render_acknowledgement(name),
    ):
        failed.append("acknowledgement")

    if not await send_email(
        to=settings.SUPPORT_EMAIL,
        subject=NOTIFICATION_SUBJECT,
        html=render_notification(name, email, comment),
    ):
        failed.append("notification")

    if failed:
        logger.error("help_email_failed", failed=failed, requester=email)
        raise UpstreamServiceError(
            "Failed to send email", details={"failed": failed}
        )

    logger.info("help_email_sent", requester=email)
