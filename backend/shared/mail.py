"""
Outgoing mail over SMTP.

send() blocks until the server accepts the message. send_async() runs the
same call in a worker thread, and dispatch() schedules it without waiting:
failures of dispatched mail are logged and never reach the caller.
"""

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from .config import Settings, get_settings
from .exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class MailDeliveryError(ExternalServiceError):
    """Raised when the SMTP server cannot be reached or refuses a message."""

    def __init__(self, recipient: str, reason: str):
        super().__init__(
            f"Failed to send email: {reason}",
            service="mail",
            code="MAIL_DELIVERY_FAILED",
            details={"recipient": recipient},
        )


class MailSender:
    """SMTP mail transport."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._pending: set[asyncio.Task] = set()

    def _build_message(self, to: str, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._settings.mail_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html_body, subtype="html")
        return message

    def send(self, to: str, subject: str, html_body: str) -> None:
        """Deliver one HTML message, raising MailDeliveryError on failure."""
        settings = self._settings
        message = self._build_message(to, subject, html_body)
        try:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=30) as smtp:
                if settings.smtp_use_tls:
                    smtp.starttls()
                if settings.smtp_username:
                    smtp.login(settings.smtp_username, settings.smtp_password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' to %s: %s", subject, to, e)
            raise MailDeliveryError(to, str(e)) from e

        logger.info("Email '%s' sent to %s", subject, to)

    async def send_async(self, to: str, subject: str, html_body: str) -> None:
        await asyncio.to_thread(self.send, to, subject, html_body)

    def dispatch(self, to: str, subject: str, html_body: str) -> asyncio.Task:
        """Send in the background; the returned task never raises."""
        task = asyncio.get_running_loop().create_task(
            self._send_logged(to, subject, html_body)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _send_logged(self, to: str, subject: str, html_body: str) -> None:
        try:
            await self.send_async(to, subject, html_body)
        except MailDeliveryError:
            logger.exception("Background delivery of '%s' to %s failed", subject, to)
