"""Catalog movie schemas."""

from datetime import datetime

from pydantic import Field

from filmunity.schemas.base import APIModel


class MovieCreate(APIModel):
    title: str = Field(min_length=1, max_length=255)
    pexels_id: str = Field(min_length=1, max_length=50)
    pexels_user: str = Field(min_length=1, max_length=255)
    miniature_url: str = Field(min_length=1, max_length=1000)


class MovieResponse(APIModel):
    id: str
    title: str
    pexels_id: str
    pexels_user: str
    miniature_url: str
    user_id: str
    created_at: datetime
