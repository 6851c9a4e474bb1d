"""
Email Service - synchronous SMTP delivery.

Used for the welcome email after an employee is created. Callers on the
create path swallow its errors; here every failure surfaces as
ExternalServiceError.
"""

import logging
import smtplib
from email.message import EmailMessage

from talentos.core.config import Settings, get_settings
from talentos.core.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class EmailService:

    def __init__(self, settings: Settings = None):
        self.settings = settings or get_settings()

    @property
    def is_configured(self) -> bool:
        s = self.settings
        return bool(s.smtp_host and s.smtp_sender and s.smtp_password)

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.settings.smtp_sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)
        msg.add_alternative(f"<p>{body}</p>", subtype="html")
        return msg

    def send_email(self, to: str, subject: str, body: str) -> None:
        if not self.is_configured:
            raise ExternalServiceError("Email configuration is missing")

        s = self.settings
        msg = self._build_message(to, subject, body)
        try:
            if s.smtp_port == 465:
                with smtplib.SMTP_SSL(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds) as server:
                    server.login(s.smtp_sender, s.smtp_password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=s.smtp_timeout_seconds) as server:
                    server.starttls()
                    server.login(s.smtp_sender, s.smtp_password)
                    server.send_message(msg)
        except smtplib.SMTPAuthenticationError as e:
            logger.exception("SMTP auth failed for %s", s.smtp_sender)
            raise ExternalServiceError("SMTP authentication failed") from e
        except (smtplib.SMTPException, OSError) as e:
            logger.exception("Failed to send email to %s", to)
            raise ExternalServiceError(f"Could not send email: {e}") from e

        logger.info("Email '%s' sent to %s", subject, to)


# Singleton instance
_email_service: EmailService = None


def get_email_service() -> EmailService:
    """Get or create the email service (singleton pattern)"""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
