"""Profile management for the authenticated account."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from filmunity.core.exceptions import ConflictError, InvalidCredentialsError
from filmunity.models.user import User
from filmunity.schemas.user import ProfileUpdate
from filmunity.services.auth_service import AuthService

logger = logging.getLogger(__name__)


class ProfileService:
    """
    Read, update and delete the caller's own account.

    Every method takes the already-loaded `User` behind the verified session;
    ids from the request body are never used to pick the account.
    """

    @staticmethod
    async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
        if data.email != user.email:
            result = await db.execute(
                select(User.id).where(User.email == data.email, User.id != user.id)
            )
            if result.first() is not None:
                raise ConflictError("Email is already registered")

        user.first_name = data.first_name
        user.last_name = data.last_name
        user.age = data.age
        user.email = data.email

        try:
            await db.flush()
        except IntegrityError:
            raise ConflictError("Email is already registered")
        await db.refresh(user)
        return user

    @staticmethod
    async def change_password(
        db: AsyncSession,
        user: User,
        current_password: str,
        new_password: str,
    ) -> User:
        if not AuthService.verify_password(current_password, user.hashed_password):
            raise InvalidCredentialsError("Current password is incorrect")

        AuthService.validate_password_strength(new_password)
        user.hashed_password = AuthService.hash_password(new_password)
        await db.flush()

        logger.info(f"Password changed for user {user.id[:8]}...")
        return user

    @staticmethod
    async def delete_profile(db: AsyncSession, user: User, password: str) -> None:
        """Delete the account (and its movies, comments and ratings) after re-checking the password."""
        if not AuthService.verify_password(password, user.hashed_password):
            raise InvalidCredentialsError("Incorrect password")

        user_id = user.id
        await db.delete(user)
        await db.flush()

        logger.info(f"User {user_id[:8]}... deleted their account")
