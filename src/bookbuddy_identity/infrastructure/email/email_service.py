import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Protocol

from bookbuddy_config.settings import Settings
from bookbuddy_identity.infrastructure.email.templates import EmailContent

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    """Outbound mail collaborator used by the identity services.

    Implementations raise on delivery failure; callers do not retry.
    """

    def send_mail(self, to: str, subject: str, text: str, html: str | None = None) -> None:
        ...


class EmailService:
    """SMTP mailer configured from application settings."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    def send_mail(self, to: str, subject: str, text: str, html: str | None = None) -> None:
        if not self._settings.smtp_enabled:
            logger.warning("SMTP disabled, email not sent to %s (%s)", to, subject)
            logger.debug("Unsent email body for %s:\n%s", to, text)
            return

        if not self._settings.smtp_host:
            msg = "SMTP is enabled but SMTP_HOST is not configured"
            raise RuntimeError(msg)

        self._send_email(to, self._create_message(to, subject, text, html))

    def _send_email(self, to_email: str, message: MIMEMultipart) -> None:
        settings = self._settings
        smtp_password = (
            settings.smtp_password.get_secret_value() if settings.smtp_password else ""
        )
        timeout = settings.smtp_timeout_seconds

        try:
            if settings.smtp_use_tls and not settings.smtp_starttls:
                # Implicit TLS (port 465)
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(
                    settings.smtp_host,
                    settings.smtp_port,
                    context=context,
                    timeout=timeout,
                ) as server:
                    if settings.smtp_user:
                        server.login(settings.smtp_user, smtp_password)
                    server.send_message(message)
            else:
                # STARTTLS (port 587) or plain
                with smtplib.SMTP(
                    settings.smtp_host,
                    settings.smtp_port,
                    timeout=timeout,
                ) as server:
                    if settings.smtp_starttls:
                        context = ssl.create_default_context()
                        server.starttls(context=context)
                    if settings.smtp_user:
                        server.login(settings.smtp_user, smtp_password)
                    server.send_message(message)

            logger.info("Email sent to %s", to_email)

        except Exception as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise


async def deliver_email(mailer: Mailer, to: str, content: EmailContent) -> None:
    """Send prepared content through a mailer without blocking the event loop."""
    await asyncio.to_thread(
        mailer.send_mail,
        to,
        content.subject,
        content.text,
        content.html,
    )
