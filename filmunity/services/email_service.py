"""
Transactional email for Film Unity.

Sends over SMTP when credentials are configured; otherwise logs a short
preview to the console (development fallback).

Reset links carry a secret token: they go into the email body only and are
never logged.
"""

import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from filmunity.core.config import get_settings

logger = logging.getLogger(__name__)


class EmailService:
    """SMTP email sender with a console fallback."""

    def __init__(self):
        settings = get_settings()
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.smtp_from_email = settings.smtp_from_email
        self.smtp_from_name = settings.smtp_from_name
        self.smtp_use_tls = settings.smtp_use_tls

        self.is_configured = bool(
            self.smtp_host and
            self.smtp_port and
            self.smtp_user and
            self.smtp_password
        )

        if self.is_configured:
            logger.info(f"Email service configured with SMTP: {self.smtp_host}:{self.smtp_port}")
        else:
            logger.warning("Email service not configured - emails will be logged to console")

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
        preview: Optional[str] = None,
    ) -> bool:
        """
        Send an email without blocking the event loop.

        `preview` is what gets logged in console mode; pass something that
        contains no secrets.

        Returns:
            True if sent (or logged) successfully
        """
        if not self.is_configured:
            logger.info(f"[EMAIL] To: {to_email}, Subject: {subject}")
            if preview:
                logger.info(f"[EMAIL] {preview}")
            return True

        try:
            return await asyncio.to_thread(
                self._send_smtp,
                to_email,
                subject,
                html_body,
                text_body,
            )
        except Exception as e:
            logger.error(f"Failed to send email to {to_email[:3]}***: {e}")
            return False

    def _send_smtp(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> bool:
        """Send email via SMTP (synchronous)."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.smtp_from_name} <{self.smtp_from_email}>"
        msg["To"] = to_email

        if text_body:
            msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        context = ssl.create_default_context()
        try:
            if self.smtp_use_tls:
                with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                    server.starttls(context=context)
                    server.login(self.smtp_user, self.smtp_password)
                    server.sendmail(self.smtp_from_email, to_email, msg.as_string())
            else:
                # Implicit TLS (port 465)
                with smtplib.SMTP_SSL(self.smtp_host, self.smtp_port, context=context) as server:
                    server.login(self.smtp_user, self.smtp_password)
                    server.sendmail(self.smtp_from_email, to_email, msg.as_string())

            logger.info(f"Email sent to {to_email[:3]}***")
            return True

        except smtplib.SMTPAuthenticationError:
            logger.error("SMTP authentication failed - check credentials")
            return False
        except smtplib.SMTPException as e:
            logger.error(f"SMTP error: {e}")
            return False

    async def send_password_reset_link(
        self,
        to_email: str,
        reset_url: str,
        user_name: str = "there",
        expiry_minutes: int = 60,
    ) -> bool:
        """Send the one-time password reset link."""
        subject = "Film Unity - Reset your password"

        html_body = f"""
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; color: #222; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #b5179e;">Reset your password</h2>
    <p>Hi {user_name},</p>
    <p>We received a request to reset your Film Unity password. Click the link below to choose a new one:</p>
    <p><a href="{reset_url}" target="_blank">{reset_url}</a></p>
    <p style="color: #666;"><strong>This link expires in {expiry_minutes} minutes</strong> and can only be used once.</p>
    <p style="color: #666;">If you did not ask for this, you can ignore this email. Your password will not change.</p>
</body>
</html>
"""

        text_body = f"""
Film Unity - Reset your password

Hi {user_name},

We received a request to reset your Film Unity password. Open the link below to choose a new one:

{reset_url}

This link expires in {expiry_minutes} minutes and can only be used once.

If you did not ask for this, you can ignore this email.
"""

        logger.info(f"Sending password reset link to {to_email[:3]}***")

        return await self.send_email(
            to_email=to_email,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            preview=f"Password reset link issued (expires in {expiry_minutes} minutes)",
        )

    async def send_password_changed(
        self,
        to_email: str,
        user_name: str = "there",
    ) -> bool:
        """Let the owner know their password was just changed."""
        subject = "Film Unity - Your password was changed"

        html_body = f"""
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; color: #222; max-width: 600px; margin: 0 auto; padding: 20px;">
    <h2 style="color: #b5179e;">Password updated</h2>
    <p>Hi {user_name},</p>
    <p>The password for your Film Unity account was just changed.</p>
    <p style="color: #c0392b;"><strong>If this wasn't you</strong>, reset your password right away and contact support.</p>
</body>
</html>
"""

        text_body = f"""
Film Unity - Password updated

Hi {user_name},

The password for your Film Unity account was just changed.

If this wasn't you, reset your password right away and contact support.
"""

        return await self.send_email(
            to_email=to_email,
            subject=subject,
            html_body=html_body,
            text_body=text_body,
            preview="Password changed notification",
        )


# Singleton instance
_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get or create the email service singleton."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
