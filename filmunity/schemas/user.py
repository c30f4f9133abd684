"""User, session and password schemas for API validation."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from filmunity.schemas.base import APIModel


class UserCreate(APIModel):
    """Schema for user registration."""
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    age: int = Field(gt=0, lt=150)
    email: EmailStr
    # Strength rules are enforced by AuthService so the message is specific
    password: str = Field(min_length=1, max_length=100)


class UserLogin(APIModel):
    """Schema for user login."""
    email: EmailStr
    password: str = Field(min_length=1)


class AuthResponse(APIModel):
    """Returned by register and login."""
    message: str
    user_id: str


class ProfileUpdate(APIModel):
    """Schema for updating the caller's profile. All fields are required."""
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    age: int = Field(gt=0, lt=150)
    email: EmailStr


class ProfileResponse(APIModel):
    """Profile without password or reset-token fields."""
    id: str
    email: str
    first_name: str
    last_name: str
    age: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProfileUpdateResponse(APIModel):
    message: str
    user: ProfileResponse


class ProfileDelete(APIModel):
    """Current password, required to confirm account deletion."""
    password: str = Field(min_length=1)


class PasswordChange(APIModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1, max_length=100)


class ForgotPasswordRequest(APIModel):
    email: EmailStr


class ResetPasswordRequest(APIModel):
    password: str = Field(min_length=1, max_length=100)


class SessionUser(APIModel):
    user_id: str
    email: str


class SessionResponse(APIModel):
    logged_in: bool
    user: Optional[SessionUser] = None
