"""Comment schemas for API validation."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from filmunity.models.comment import COMMENT_MAX_LENGTH
from filmunity.schemas.base import APIModel


class CommentCreate(APIModel):
    movie_pexels_id: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=COMMENT_MAX_LENGTH)

    @field_validator("movie_pexels_id", "description", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class CommentUpdate(APIModel):
    description: str = Field(min_length=1, max_length=COMMENT_MAX_LENGTH)

    @field_validator("description", mode="before")
    @classmethod
    def strip_whitespace(cls, value):
        return value.strip() if isinstance(value, str) else value


class CommentAuthor(APIModel):
    """Display fields of the comment owner."""
    id: str
    first_name: str
    last_name: str
    email: str


class CommentResponse(APIModel):
    id: str
    movie_pexels_id: str
    description: str
    user_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class CommentWithAuthor(CommentResponse):
    user: Optional[CommentAuthor] = None


class MovieCommentsResponse(APIModel):
    """Comments on one video, split between the caller's and everyone else's."""
    user_comments: List[CommentWithAuthor]
    other_comments: List[CommentWithAuthor]


class CommentUpdateResponse(APIModel):
    message: str
    comment: CommentResponse
