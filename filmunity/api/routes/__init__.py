"""API routes package."""

from fastapi import APIRouter

from filmunity.api.routes import (
    auth,
    comments,
    health,
    movies,
    ratings,
    videos,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(movies.router, prefix="/movies", tags=["Movies"])
api_router.include_router(comments.router, prefix="/comments", tags=["Comments"])
api_router.include_router(ratings.router, prefix="/ratings", tags=["Ratings"])
api_router.include_router(videos.router, prefix="/pexels", tags=["Video Search"])
