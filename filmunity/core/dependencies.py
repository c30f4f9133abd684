"""Shared FastAPI dependencies: database session, session identity and login guard."""

from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from filmunity.core.config import get_settings
from filmunity.core.exceptions import InvalidSessionError, NotFoundError, UnauthenticatedError
from filmunity.core.login_guard import LoginGuard, get_login_guard
from filmunity.db.session import get_db
from filmunity.models.user import User
from filmunity.services.auth_service import AuthService, SessionIdentity


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(get_settings().session_cookie_name)


async def get_current_identity(request: Request) -> SessionIdentity:
    """Require a valid session cookie."""
    token = get_session_token(request)
    if not token:
        raise UnauthenticatedError()
    return AuthService.decode_session_token(token)


async def get_optional_identity(request: Request) -> Optional[SessionIdentity]:
    """Identity if a valid session cookie is present, else None."""
    token = get_session_token(request)
    if not token:
        return None
    try:
        return AuthService.decode_session_token(token)
    except InvalidSessionError:
        return None


async def get_current_user(
    identity: Annotated[SessionIdentity, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Load the account behind the session; it may have been deleted since login."""
    user = await AuthService.get_user_by_id(db, identity.user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentIdentity = Annotated[SessionIdentity, Depends(get_current_identity)]
OptionalIdentity = Annotated[Optional[SessionIdentity], Depends(get_optional_identity)]
CurrentUser = Annotated[User, Depends(get_current_user)]
Guard = Annotated[LoginGuard, Depends(get_login_guard)]
