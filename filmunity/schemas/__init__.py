"""Pydantic schemas for API request/response validation."""

from filmunity.schemas.base import APIModel, MessageResponse
from filmunity.schemas.user import (
    UserCreate,
    UserLogin,
    AuthResponse,
    ProfileResponse,
    SessionResponse,
)
from filmunity.schemas.comment import CommentResponse, MovieCommentsResponse
from filmunity.schemas.rating import RatingResponse, AverageRatingResponse
from filmunity.schemas.movie import MovieResponse

__all__ = [
    "APIModel",
    "MessageResponse",
    "UserCreate",
    "UserLogin",
    "AuthResponse",
    "ProfileResponse",
    "SessionResponse",
    "CommentResponse",
    "MovieCommentsResponse",
    "RatingResponse",
    "AverageRatingResponse",
    "MovieResponse",
]
