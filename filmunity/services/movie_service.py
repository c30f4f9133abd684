"""Catalog service. Deletion is restricted to the user who added the movie."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from filmunity.core.exceptions import ForbiddenError, NotFoundError
from filmunity.models.movie import Movie
from filmunity.schemas.movie import MovieCreate
from filmunity.services.auth_service import SessionIdentity

logger = logging.getLogger(__name__)


class MovieService:

    @staticmethod
    async def list_movies(db: AsyncSession) -> List[Movie]:
        result = await db.execute(select(Movie).order_by(Movie.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def get_movie(db: AsyncSession, movie_id: str) -> Movie:
        movie = await db.get(Movie, movie_id)
        if not movie:
            raise NotFoundError("Movie not found")
        return movie

    @staticmethod
    async def create_movie(db: AsyncSession, identity: SessionIdentity, data: MovieCreate) -> Movie:
        movie = Movie(
            title=data.title,
            pexels_id=data.pexels_id,
            pexels_user=data.pexels_user,
            miniature_url=data.miniature_url,
            user_id=identity.user_id,
        )
        db.add(movie)
        await db.flush()
        await db.refresh(movie)
        return movie

    @staticmethod
    async def delete_movie(db: AsyncSession, identity: SessionIdentity, movie_id: str) -> None:
        movie = await MovieService.get_movie(db, movie_id)
        if movie.user_id != identity.user_id:
            raise ForbiddenError("You can only delete movies you added")

        await db.delete(movie)
        await db.flush()
        logger.info(f"Movie {movie_id[:8]}... removed from catalog")
