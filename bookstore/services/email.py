"""
Email Service

Outgoing mail for the password reset flow.

Providers:
==========
- console: writes the message to the application log (default; for
  development and tests)
- smtp: delivers through an SMTP server with the standard library's
  smtplib, optionally with STARTTLS and login

The provider is chosen by settings.email_backend. Routers obtain it
through the get_email_provider dependency and send in a background task,
so a slow or failing mail server never delays the HTTP response.
"""

import logging
import smtplib
from abc import ABC, abstractmethod
from datetime import datetime
from email.message import EmailMessage
from functools import lru_cache
from typing import Optional
from urllib.parse import urlencode

from bookstore.config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailProvider(ABC):
    """Interface for email delivery backends."""

    name = "base"

    def __init__(self, sender: str) -> None:
        self.sender = sender

    def describe(self) -> dict:
        """Context added to every email log record."""
        return {"email_provider": self.name, "email_sender": self.sender}

    @abstractmethod
    def send_email(self, recipient: str, subject: str, html_body: str, text_body: str) -> None:
        ...


class ConsoleEmailProvider(EmailProvider):
    """Logs messages instead of sending them."""

    name = "console"

    def send_email(self, recipient: str, subject: str, html_body: str, text_body: str) -> None:
        logger.info(f"Email to {recipient} | {subject}\n{text_body}")


class SMTPEmailProvider(EmailProvider):
    """Sends messages through an SMTP server."""

    name = "smtp"

    def __init__(
        self,
        sender: str,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        super().__init__(sender)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def describe(self) -> dict:
        return {**super().describe(), "smtp_host": self.host, "smtp_port": self.port}

    def send_email(self, recipient: str, subject: str, html_body: str, text_body: str) -> None:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(text_body)
        message.add_alternative(html_body, subtype="html")

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)


def create_email_provider(settings: Settings) -> EmailProvider:
    if settings.email_backend == "smtp":
        if not settings.smtp_host:
            raise ValueError("SMTP_HOST must be set when EMAIL_BACKEND=smtp")
        return SMTPEmailProvider(
            sender=settings.email_sender,
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return ConsoleEmailProvider(sender=settings.email_sender)


@lru_cache
def get_email_provider() -> EmailProvider:
    """Email provider selected by the application settings (cached)."""
    provider = create_email_provider(get_settings())
    logger.info(f"Email provider initialized: {provider.name}")
    return provider


def build_reset_link(frontend_url: str, email: str, token: str) -> str:
    query = urlencode({"email": email, "token": token})
    return f"{frontend_url.rstrip('/')}/reset-password?{query}"


def send_password_reset_email(
    provider: EmailProvider,
    email: str,
    username: str,
    token: str,
    expires_at: datetime,
    frontend_url: str,
) -> None:
    """
    Send the password reset email.

    Runs as a background task; failures are logged with the traceback
    and re-raised.
    """
    log_context = {
        **provider.describe(),
        "email_recipient": email,
        "email_type": "password_reset",
    }
    logger.info(f"Dispatching password reset email {log_context}")

    reset_link = build_reset_link(frontend_url, email, token)
    subject = "Reset your Bookstore password"
    text_body = (
        f"Hello {username},\n\n"
        "A password reset was requested for your Bookstore account. "
        "Open the link below, or use the token, to choose a new password:\n\n"
        f"{reset_link}\n\n"
        f"Token: {token}\n\n"
        f"This token expires at {expires_at.isoformat()}.\n"
        "If you did not request a reset you can ignore this message.\n"
    )
    html_body = (
        "<!DOCTYPE html><html><body style=\"font-family: Arial, sans-serif; line-height: 1.5;\">"
        f"<p>Hello {username},</p>"
        "<p>A password reset was requested for your Bookstore account.</p>"
        f"<p><a href=\"{reset_link}\">Choose a new password</a></p>"
        f"<p>Or use this token: <strong>{token}</strong></p>"
        f"<p>This token expires at {expires_at.isoformat()}.</p>"
        "<p>If you did not request a reset you can ignore this message.</p>"
        "</body></html>"
    )

    try:
        provider.send_email(email, subject, html_body, text_body)
    except Exception:
        logger.exception(f"Failed to send password reset email {log_context}")
        raise

    logger.info(f"Password reset email dispatched {log_context}")
