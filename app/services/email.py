"""Email sending service with SMTP."""

import asyncio
from email.message import EmailMessage
from typing import Protocol

import aiosmtplib
from aiosmtplib.errors import (
    SMTPAuthenticationError,
    SMTPConnectError,
    SMTPConnectTimeoutError,
    SMTPException,
    SMTPReadTimeoutError,
)

from app.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class EmailSender(Protocol):
    """Outbound email transport: reports success as a boolean."""

    async def __call__(
        self,
        to: str | list[str],
        subject: str,
        html: str,
        body: str | None = None,
    ) -> bool: ...


def build_message(
    to: str | list[str],
    subject: str,
    html: str,
    body: str | None = None,
) -> EmailMessage:
    """Build a MIME message with an HTML part and an optional plain text part."""
    message = EmailMessage()
    message["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    message["To"] = to if isinstance(to, str) else ", ".join(to)
    message["Subject"] = subject

    if body:
        message.set_content(body)
        message.add_alternative(html, subtype="html")
    else:
        message.set_content(html, subtype="html")

    return message


async def send_email(
    to: str | list[str],
    subject: str,
    html: str,
    body: str | None = None,
) -> bool:
    """
    Send email via SMTP with retry logic.

    Args:
        to: Recipient email address(es)
        subject: Email subject
        html: HTML email body
        body: Optional plain text alternative

    Returns:
        True if email sent successfully, False otherwise

    Note:
        This function logs errors but does NOT raise exceptions.
        Callers should check return value if they need to know success/failure.
    """
    message = build_message(to, subject, html, body)

    # Only retry connection failures where we know email wasn't queued
    max_retries = 3
    for attempt in range(max_retries):
        try:
            await aiosmtplib.send(
                message,
                hostname=settings.SMTP_HOST,
                port=settings.SMTP_PORT,
                username=settings.SMTP_USER or None,
                password=settings.SMTP_PASSWORD or None,
                use_tls=settings.SMTP_TLS,
                start_tls=settings.SMTP_STARTTLS,
                timeout=30,
            )
            logger.info(
                "email_sent_success",
                to=to,
                subject=subject,
                attempt=attempt + 1,
            )
            return True

        except SMTPReadTimeoutError as e:
            # NEVER RETRY - Email might already be queued on server
            logger.error(
                "email_send_timeout_after_data",
                to=to,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
                note="Not retrying - ambiguous state, email might be delivered",
            )
            return False

        except SMTPAuthenticationError as e:
            # NEVER RETRY - Credentials are wrong, will never succeed
            logger.error(
                "email_auth_failed",
                to=to,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        except (SMTPConnectError, SMTPConnectTimeoutError) as e:
            # SAFE TO RETRY - Connection never established, no data sent
            logger.warning(
                "email_connection_failed",
                to=to,
                subject=subject,
                attempt=attempt + 1,
                error=str(e),
                error_type=type(e).__name__,
            )
            if attempt < max_retries - 1:
                # Exponential backoff: 1s, 2s
                await asyncio.sleep(2**attempt)
            else:
                logger.error(
                    "email_connection_failed_all_retries",
                    to=to,
                    subject=subject,
                    error=str(e),
                )
                return False

        except SMTPException as e:
            # Recipient not found, mailbox full, ... likely permanent
            logger.error(
                "email_smtp_error",
                to=to,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        except Exception as e:
            logger.error(
                "email_send_unexpected_error",
                to=to,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    return False
