"""Rating endpoints."""

from typing import List

from fastapi import APIRouter, Response, status

from filmunity.core.dependencies import CurrentIdentity, DbSession
from filmunity.schemas.base import MessageResponse
from filmunity.schemas.rating import (
    AverageRatingResponse,
    RatingCreate,
    RatingResponse,
    RatingUpsertResponse,
)
from filmunity.services.rating_service import RatingService

router = APIRouter()


@router.post("", response_model=RatingUpsertResponse, status_code=status.HTTP_201_CREATED)
async def create_or_update_rating(
    data: RatingCreate,
    response: Response,
    identity: CurrentIdentity,
    db: DbSession,
):
    """
    Rate a video from 1 to 5.

    Rating the same video again overwrites the previous value (HTTP 200
    instead of 201).
    """
    rating, created = await RatingService.create_or_update(db, identity, data.movie_pexels_id, data.value)
    await db.commit()
    if not created:
        response.status_code = status.HTTP_200_OK

    return RatingUpsertResponse(
        message="Rating created" if created else "Rating updated",
        rating=RatingResponse.model_validate(rating),
    )


@router.get("/movie/{movie_pexels_id}", response_model=AverageRatingResponse)
async def get_average_rating(movie_pexels_id: str, identity: CurrentIdentity, db: DbSession):
    """Average and count of ratings for a video, plus the caller's own rating (0 if none)."""
    average, total, user_rating = await RatingService.average_rating(db, movie_pexels_id, identity)
    return AverageRatingResponse(average_rating=average, total_ratings=total, user_rating=user_rating)


@router.get("/user/{user_id}", response_model=List[RatingResponse])
async def get_ratings_by_user(user_id: str, identity: CurrentIdentity, db: DbSession):
    """List a user's ratings, newest first."""
    return await RatingService.list_by_user(db, user_id)


@router.delete("/{rating_id}", response_model=MessageResponse)
async def delete_rating(rating_id: str, identity: CurrentIdentity, db: DbSession):
    """Delete a rating. Only its owner may do this."""
    await RatingService.delete(db, identity, rating_id)
    await db.commit()
    return MessageResponse(message="Rating deleted successfully")
