"""
SMTP e-mail sender.

Used for fire-and-forget notifications (checkout confirmation, welcome
mail): `deliver` never raises, failures are logged and reported as False.
"""

import smtplib
from email.message import EmailMessage
from typing import Optional, Sequence, Tuple

import structlog

from app.config import Settings, get_settings

logger = structlog.get_logger(__name__)

Attachment = Tuple[str, bytes, str]  # (filename, content, mime type)


class EmailSender:
    """Sends HTML mail through the configured SMTP relay."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def enabled(self) -> bool:
        return bool(self.settings.SMTP_HOST)

    def build_message(self, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.settings.EMAIL_FROM
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        for filename, content, mime_type in attachments:
            maintype, subtype = mime_type.split("/", 1)
            message.add_attachment(content, maintype=maintype, subtype=subtype, filename=filename)
        return message

    def send(self, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> None:
        """Send one message; raises on SMTP or network errors."""
        message = self.build_message(to, subject, html, attachments)
        s = self.settings
        with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=30) as smtp:
            if s.SMTP_USE_TLS:
                smtp.starttls()
            if s.SMTP_USER:
                smtp.login(s.SMTP_USER, s.SMTP_PASSWORD)
            smtp.send_message(message)

    def deliver(self, to: str, subject: str, html: str, attachments: Sequence[Attachment] = ()) -> bool:
        if not self.enabled:
            logger.info("Email disabled, message not sent", to=to, subject=subject)
            return False
        try:
            self.send(to, subject, html, attachments)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email failed", to=to, subject=subject, error=str(e))
            return False
        logger.info("Email sent", to=to, subject=subject)
        return True