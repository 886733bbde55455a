"""
Dramatiq worker for outbound email.

Delivery is best-effort: SMTP failures are logged and dropped, never
retried and never reported back to the request that queued the message.

Run with:
    dramatiq app.workers.mail_worker
"""
import logging
import smtplib
from email.message import EmailMessage

import dramatiq

# Import broker setup (must be before actor definitions)
from app.workers import redis_broker  # noqa: F401
from app.config import settings

logger = logging.getLogger(__name__)


def build_message(to_address: str, subject: str, html_body: str) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.mail_from
    message["To"] = to_address
    message["Subject"] = subject
    message.set_content("This message requires an HTML capable mail client.")
    message.add_alternative(html_body, subtype="html")
    return message


def deliver(message: EmailMessage) -> None:
    """Send a message through the configured SMTP relay."""
    with smtplib.SMTP(
        settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout
    ) as smtp:
        if settings.smtp_use_tls:
            smtp.starttls()
        if settings.smtp_username:
            smtp.login(settings.smtp_username, settings.smtp_password)
        smtp.send_message(message)


@dramatiq.actor(queue_name="mail", max_retries=0)
def send_invite_email(to_address: str, subject: str, html_body: str) -> bool:
    """
    Deliver a rendered invite email.

    Returns True when the relay accepted the message, False otherwise.
    """
    if not settings.mail_enabled:
        logger.info("Mail disabled; skipping invite email to %s", to_address)
        return False

    try:
        deliver(build_message(to_address, subject, html_body))
    except (smtplib.SMTPException, OSError):
        logger.exception("Error sending invite email to %s", to_address)
        return False

    logger.info("Invite email sent to %s", to_address)
    return True
