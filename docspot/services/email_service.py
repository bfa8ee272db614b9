from email.message import EmailMessage
from urllib.parse import urlencode
import logging
import smtplib

from ..core.config import settings
from ..core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

def build_reset_link(email: str, token: str) -> str:
    query = urlencode({"token": token, "email": email})
    return f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?{query}"

def send_email(to_email: str, subject: str, text_body: str, html_body: str) -> None:
    """Send a message through the configured SMTP server."""
    if not settings.SMTP_HOST:
        raise EmailDeliveryError("SMTP_HOST is not configured")

    message = EmailMessage()
    message["From"] = settings.MAIL_FROM
    message["To"] = to_email
    message["Subject"] = subject
    message.set_content(text_body)
    message.add_alternative(html_body, subtype="html")

    try:
        with smtplib.SMTP(
            settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT
        ) as server:
            if settings.SMTP_USE_TLS:
                server.starttls()
            if settings.SMTP_USER:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD or "")
            server.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        raise EmailDeliveryError(str(e)) from e

    logger.info(f"Sent '{subject}' email to {to_email}")

def send_password_reset_email(to_email: str, name: str, reset_link: str) -> None:
    minutes = settings.PASSWORD_RESET_EXPIRE_MINUTES
    text_body = (
        f"Hi {name},\n\n"
        "We received a request to reset your DocSpot password. "
        f"Open the link below to choose a new one. It expires in {minutes} minutes.\n\n"
        f"{reset_link}\n\n"
        "If you didn't request this, you can ignore this email.\n"
    )
    html_body = (
        f"<p>Hi <strong>{name}</strong>,</p>"
        "<p>We received a request to reset your DocSpot password. "
        f"This link expires in <strong>{minutes} minutes</strong>.</p>"
        f'<p><a href="{reset_link}">Reset My Password</a></p>'
        "<p>If you didn't request this, you can ignore this email.</p>"
    )
    send_email(to_email, "DocSpot - Password Reset Request", text_body, html_body)
