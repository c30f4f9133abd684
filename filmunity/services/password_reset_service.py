"""
Password Reset Service.

- 256-bit tokens from the `secrets` CSPRNG
- Only the SHA-256 digest of a token is stored
- One hour expiry (configurable)
- Single use: the token is consumed with a conditional UPDATE
- The new password is hashed before anything is written
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from filmunity.core.config import get_settings
from filmunity.core.exceptions import InvalidTokenError, NotFoundError
from filmunity.models.user import User
from filmunity.services.auth_service import AuthService
from filmunity.services.email_service import EmailService, get_email_service

logger = logging.getLogger(__name__)
settings = get_settings()

RESET_TOKEN_BYTES = 32


class PasswordResetService:
    """Forgot-password and reset-password flow."""

    # ─────────────────────────────────────────────────────────────
    # Tokens
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def generate_token() -> str:
        return secrets.token_hex(RESET_TOKEN_BYTES)

    @staticmethod
    def hash_token(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @staticmethod
    def build_reset_url(token: str) -> str:
        return f"{settings.frontend_url.rstrip('/')}/auth/reset-password?token={token}"

    # ─────────────────────────────────────────────────────────────
    # Request Reset
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    async def request_reset(
        db: AsyncSession,
        email: str,
        email_service: Optional[EmailService] = None,
    ) -> str:
        """
        Issue a reset token for the account and email the link.

        The token is committed before the email is sent; if the commit fails
        no link goes out.

        Raises:
            NotFoundError: no account uses this email

        Returns:
            The plain token (only ever placed in the email)
        """
        user = await AuthService.get_user_by_email(db, email)
        if not user:
            raise NotFoundError("User not found")

        token = PasswordResetService.generate_token()
        user.reset_password_token = PasswordResetService.hash_token(token)
        user.reset_password_expires = datetime.now(timezone.utc) + timedelta(
            minutes=settings.password_reset_expire_minutes
        )
        await db.commit()

        logger.info(f"Password reset token issued for user {user.id[:8]}...")

        email_service = email_service or get_email_service()
        sent = await email_service.send_password_reset_link(
            to_email=user.email,
            reset_url=PasswordResetService.build_reset_url(token),
            user_name=user.first_name,
            expiry_minutes=settings.password_reset_expire_minutes,
        )
        if not sent:
            logger.error(f"Password reset email could not be delivered for user {user.id[:8]}...")

        return token

    # ─────────────────────────────────────────────────────────────
    # Reset Password
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    async def reset_password(
        db: AsyncSession,
        token: str,
        new_password: str,
    ) -> User:
        """
        Set a new password using a live reset token, consuming the token.

        Raises:
            InvalidTokenError: unknown, expired or already used token
            ValidationError: new password does not meet the policy
        """
        digest = PasswordResetService.hash_token(token)
        now = datetime.now(timezone.utc)

        result = await db.execute(
            select(User).where(
                User.reset_password_token == digest,
                User.reset_password_expires > now,
            )
        )
        user = result.scalar_one_or_none()
        if not user:
            raise InvalidTokenError("Invalid or expired token")

        AuthService.validate_password_strength(new_password)
        hashed_password = AuthService.hash_password(new_password)

        consumed = await db.execute(
            update(User)
            .where(User.id == user.id, User.reset_password_token == digest)
            .values(
                hashed_password=hashed_password,
                reset_password_token=None,
                reset_password_expires=None,
                updated_at=now,
            )
            .execution_options(synchronize_session="fetch")
        )
        if consumed.rowcount != 1:
            raise InvalidTokenError("Invalid or expired token")

        logger.info(f"Password reset completed for user {user.id[:8]}...")
        return user
