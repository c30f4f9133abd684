"""Rating schemas for API validation."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from filmunity.schemas.base import APIModel


class RatingCreate(APIModel):
    movie_pexels_id: str = Field(min_length=1, max_length=50)
    # Strict so JSON booleans are rejected; the range is checked by RatingService
    value: int = Field(strict=True)


class RatingResponse(APIModel):
    id: str
    movie_pexels_id: str
    value: int
    user_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class RatingUpsertResponse(APIModel):
    message: str
    rating: RatingResponse


class AverageRatingResponse(APIModel):
    average_rating: float
    total_ratings: int
    user_rating: int
