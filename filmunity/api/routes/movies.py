"""Catalog endpoints."""

from typing import List

from fastapi import APIRouter, status

from filmunity.core.dependencies import CurrentIdentity, DbSession
from filmunity.schemas.base import MessageResponse
from filmunity.schemas.movie import MovieCreate, MovieResponse
from filmunity.services.movie_service import MovieService

router = APIRouter()


@router.get("", response_model=List[MovieResponse])
async def list_movies(identity: CurrentIdentity, db: DbSession):
    """All catalog movies, newest first."""
    return await MovieService.list_movies(db)


@router.get("/{movie_id}", response_model=MovieResponse)
async def get_movie(movie_id: str, identity: CurrentIdentity, db: DbSession):
    return await MovieService.get_movie(db, movie_id)


@router.post("", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
async def create_movie(data: MovieCreate, identity: CurrentIdentity, db: DbSession):
    """Add a Pexels video to the catalog."""
    movie = await MovieService.create_movie(db, identity, data)
    await db.commit()
    return movie


@router.delete("/{movie_id}", response_model=MessageResponse)
async def delete_movie(movie_id: str, identity: CurrentIdentity, db: DbSession):
    """Remove a movie. Only the user who added it may do this."""
    await MovieService.delete_movie(db, identity, movie_id)
    await db.commit()
    return MessageResponse(message="Movie deleted successfully")
