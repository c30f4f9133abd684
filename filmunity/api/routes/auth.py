"""Authentication and profile endpoints."""

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from filmunity.core.dependencies import CurrentUser, DbSession, Guard, get_session_token
from filmunity.core.exceptions import InvalidSessionError, NotFoundError
from filmunity.core.session_cookie import clear_session_cookie, set_session_cookie
from filmunity.schemas.base import MessageResponse
from filmunity.schemas.user import (
    AuthResponse,
    ForgotPasswordRequest,
    PasswordChange,
    ProfileDelete,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    ResetPasswordRequest,
    SessionResponse,
    SessionUser,
    UserCreate,
    UserLogin,
)
from filmunity.services.auth_service import AuthService
from filmunity.services.email_service import get_email_service
from filmunity.services.password_reset_service import PasswordResetService
from filmunity.services.profile_service import ProfileService

logger = logging.getLogger(__name__)
router = APIRouter()

FORGOT_PASSWORD_MESSAGE = "If an account with this email exists, a recovery email has been sent."


# ─────────────────────────────────────────────
# Register
# ─────────────────────────────────────────────

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: DbSession):
    """
    Register a new user.
    Does not log the user in.
    """
    user = await AuthService.register(db, user_data)
    await db.commit()
    return AuthResponse(message="User registered successfully", user_id=user.id)


# ─────────────────────────────────────────────
# Login / Logout
# ─────────────────────────────────────────────

@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, response: Response, db: DbSession, guard: Guard):
    """
    Authenticate a user and set the session cookie.

    Five failed attempts lock the email for 15 minutes (HTTP 423).
    """
    user = await AuthService.authenticate(db, guard, credentials.email, credentials.password)

    token = AuthService.create_session_token(user.id, user.email)
    set_session_cookie(response, token)

    return AuthResponse(message="Login successful", user_id=user.id)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Clear the session cookie. The token itself stays valid until it expires."""
    clear_session_cookie(response)
    return MessageResponse(message="Logout successful")


# ─────────────────────────────────────────────
# Session Check
# ─────────────────────────────────────────────

@router.get("/session", response_model=SessionResponse)
async def session(request: Request):
    """Report whether the session cookie holds a valid token."""
    token = get_session_token(request)
    if not token:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"loggedIn": False})

    try:
        identity = AuthService.decode_session_token(token)
    except InvalidSessionError:
        return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"loggedIn": False})

    return SessionResponse(
        logged_in=True,
        user=SessionUser(user_id=identity.user_id, email=identity.email),
    )


# ─────────────────────────────────────────────
# Forgot / Reset Password
# ─────────────────────────────────────────────

@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(data: ForgotPasswordRequest, db: DbSession):
    """
    Email a one-time reset link, valid for one hour.

    Always returns the same message so the endpoint cannot be used to
    discover which emails are registered.
    """
    try:
        await PasswordResetService.request_reset(db, data.email)
    except NotFoundError:
        logger.info(f"Password reset requested for unknown email {data.email[:3]}***")

    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post("/reset-password/{token}", response_model=MessageResponse)
async def reset_password(token: str, data: ResetPasswordRequest, db: DbSession):
    """
    Set a new password with the token from the reset email.
    The token can only be used once.
    """
    user = await PasswordResetService.reset_password(db, token, data.password)
    await db.commit()

    await get_email_service().send_password_changed(
        to_email=user.email,
        user_name=user.first_name,
    )

    return MessageResponse(message="Password updated successfully")


@router.post("/change-password", response_model=MessageResponse)
async def change_password(data: PasswordChange, current_user: CurrentUser, db: DbSession):
    """
    Change the password.
    Requires the current password.
    """
    await ProfileService.change_password(db, current_user, data.current_password, data.new_password)
    await db.commit()
    return MessageResponse(message="Password changed successfully")


# ─────────────────────────────────────────────
# Profile
# ─────────────────────────────────────────────

@router.get("/profile", response_model=ProfileResponse)
async def get_profile(current_user: CurrentUser):
    """Return the authenticated user's profile."""
    return current_user


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    data: ProfileUpdate,
    response: Response,
    current_user: CurrentUser,
    db: DbSession,
):
    """
    Update the authenticated user's profile.
    The account is always the one from the session, never from the body.
    The session cookie is reissued so it carries the current email.
    """
    user = await ProfileService.update_profile(db, current_user, data)
    await db.commit()

    set_session_cookie(response, AuthService.create_session_token(user.id, user.email))
    return ProfileUpdateResponse(
        message="Profile updated successfully",
        user=ProfileResponse.model_validate(user),
    )


@router.delete("/profile", response_model=MessageResponse)
async def delete_profile(
    data: ProfileDelete,
    response: Response,
    current_user: CurrentUser,
    db: DbSession,
):
    """
    Permanently delete the account after confirming the password,
    then end the session.
    """
    await ProfileService.delete_profile(db, current_user, data.password)
    await db.commit()
    clear_session_cookie(response)
    return MessageResponse(message="Profile deleted and session closed")
