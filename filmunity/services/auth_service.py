"""Authentication Service: credential store, password policy, session tokens and login."""

import re
import uuid
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from filmunity.core.config import get_settings
from filmunity.core.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    InvalidSessionError,
    ValidationError,
)
from filmunity.core.login_guard import LoginGuard
from filmunity.models.user import User
from filmunity.schemas.user import UserCreate

logger = logging.getLogger(__name__)
settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

# Precomputed fake hash so unknown emails cost the same as a wrong password
FAKE_HASHED_PASSWORD = pwd_context.hash(
    "this_is_a_fake_user_that_never_exists_2025"
)

# At least 8 characters with one lowercase, one uppercase and one non-alphanumeric
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*[\W_]).{8,}$", re.DOTALL)
PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters long and include an uppercase "
    "letter, a lowercase letter and a special character"
)

SESSION_TOKEN_TYPE = "session"


@dataclass(frozen=True)
class SessionIdentity:
    """Identity decoded from a verified session token."""
    user_id: str
    email: str


class AuthService:
    """Signup, login and session token handling."""

    # ─── Password ────────────────────────────────
    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain: str, hashed: str) -> bool:
        return pwd_context.verify(plain, hashed)

    @staticmethod
    def validate_password_strength(password: str) -> None:
        if not password or not PASSWORD_PATTERN.match(password):
            raise ValidationError(PASSWORD_POLICY_MESSAGE)

    # ─── Session Tokens ─────────────────────────
    @staticmethod
    def create_session_token(
        user_id: str,
        email: str,
        expires_delta: Optional[timedelta] = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=settings.session_expire_minutes))
        payload = {
            "sub": str(user_id),
            "email": email,
            "jti": str(uuid.uuid4()),
            "iat": now,
            "exp": expire,
            "type": SESSION_TOKEN_TYPE,
        }
        return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

    @staticmethod
    def decode_session_token(token: str) -> SessionIdentity:
        """Verify signature and expiry; raise InvalidSessionError otherwise."""
        try:
            payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        except JWTError as e:
            logger.debug(f"Session token rejected: {e}")
            raise InvalidSessionError()

        if payload.get("type") != SESSION_TOKEN_TYPE or not payload.get("sub"):
            raise InvalidSessionError()

        return SessionIdentity(user_id=payload["sub"], email=payload.get("email", ""))

    # ─── User Lookup ─────────────────────────────
    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    # ─── Registration ───────────────────────────
    @staticmethod
    async def register(db: AsyncSession, user_data: UserCreate) -> User:
        """Create an account. No session is issued; the caller logs in separately."""
        AuthService.validate_password_strength(user_data.password)

        if await AuthService.get_user_by_email(db, user_data.email):
            raise ConflictError("Email is already registered")

        user = User(
            email=user_data.email,
            hashed_password=AuthService.hash_password(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            age=user_data.age,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Concurrent signup with the same email won the unique constraint
            raise ConflictError("Email is already registered")

        logger.info(f"User registered: {user.id[:8]}...")
        return user

    # ─── Login ───────────────────────────────────
    @staticmethod
    async def authenticate(
        db: AsyncSession,
        guard: LoginGuard,
        email: str,
        password: str,
    ) -> User:
        """
        Check credentials under the lockout rules.

        Locked emails are rejected before the password is looked at. Unknown
        emails are verified against a fake hash and counted like any other
        failure, so the response never reveals whether the account exists.
        """
        guard.ensure_not_locked(email)

        user = await AuthService.get_user_by_email(db, email)
        hashed_password = user.hashed_password if user else FAKE_HASHED_PASSWORD
        password_correct = pwd_context.verify(password, hashed_password)

        if not user or not password_correct:
            record = guard.record_failure(email)
            logger.info(f"Failed login for {email[:3]}*** (attempt {record.count})")
            raise InvalidCredentialsError()

        guard.record_success(email)
        return user
