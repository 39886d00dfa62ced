from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class EmailClient(Protocol):
    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        raise NotImplementedError


class SMTPEmailClient(EmailClient):
    """Sends one message per SMTP session (STARTTLS when ``use_tls``)."""

    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        username: str = "",
        password: str = "",
        sender: str = "",
        use_tls: bool = True,
        timeout: float = 30.0,
    ):
        self._host = host
        self._port = int(port)
        self._username = username
        self._password = password
        self._sender = sender or username
        self._use_tls = use_tls
        self._timeout = timeout

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        msg = EmailMessage()
        msg["From"] = self._sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text)
        if html:
            msg.add_alternative(html, subtype="html")

        with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
            if self._use_tls:
                smtp.starttls()
            if self._username:
                smtp.login(self._username, self._password)
            smtp.send_message(msg)
        logger.info("Email sent to %s: %s", to, subject)


class ConsoleEmailClient(EmailClient):
    """Development backend: writes the message to the log instead of sending it."""

    def __init__(self, *, sender: str = ""):
        self._sender = sender

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        logger.info("Email (console) from=%s to=%s subject=%s\n%s", self._sender, to, subject, text)


def build_email_client(settings) -> EmailClient:
    backend = str(getattr(settings, "EMAIL_BACKEND", "console")).lower()
    sender = getattr(settings, "EMAIL_FROM", "") or getattr(settings, "EMAIL_USER", "")
    if backend == "smtp":
        return SMTPEmailClient(
            host=getattr(settings, "EMAIL_HOST", "localhost"),
            port=int(getattr(settings, "EMAIL_PORT", 587)),
            username=getattr(settings, "EMAIL_USER", ""),
            password=getattr(settings, "EMAIL_PASSWORD", ""),
            sender=sender,
            use_tls=bool(getattr(settings, "EMAIL_USE_TLS", True)),
        )
    return ConsoleEmailClient(sender=sender)
