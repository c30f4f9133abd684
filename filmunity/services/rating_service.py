"""Rating service: one rating per (user, video), averages and owner-only delete."""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from filmunity.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from filmunity.models.rating import MAX_RATING, MIN_RATING, Rating
from filmunity.services.auth_service import SessionIdentity

logger = logging.getLogger(__name__)


class RatingService:

    @staticmethod
    def validate_value(value) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_RATING <= value <= MAX_RATING:
            raise ValidationError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}")
        return value

    @staticmethod
    def _on_conflict_upsert(dialect_name: str, values: dict, now: datetime):
        """INSERT ... ON CONFLICT DO UPDATE for dialects that support it, else None."""
        if dialect_name == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        elif dialect_name == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
        else:
            return None

        stmt = insert(Rating).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=["user_id", "movie_pexels_id"],
            set_={"value": stmt.excluded.value, "updated_at": now},
        )

    @staticmethod
    async def _savepoint_upsert(db: AsyncSession, values: dict, now: datetime) -> None:
        """Update-or-insert for other dialects; the unique constraint settles races."""
        where = (
            Rating.user_id == values["user_id"],
            Rating.movie_pexels_id == values["movie_pexels_id"],
        )
        updated = await db.execute(update(Rating).where(*where).values(value=values["value"], updated_at=now))
        if updated.rowcount:
            return
        try:
            async with db.begin_nested():
                db.add(Rating(**values))
        except IntegrityError:
            await db.execute(update(Rating).where(*where).values(value=values["value"], updated_at=now))

    @staticmethod
    async def get_for_user_and_movie(
        db: AsyncSession,
        user_id: str,
        movie_pexels_id: str,
    ) -> Optional[Rating]:
        result = await db.execute(
            select(Rating)
            .where(Rating.user_id == user_id, Rating.movie_pexels_id == movie_pexels_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_or_update(
        db: AsyncSession,
        identity: SessionIdentity,
        movie_pexels_id: str,
        value: int,
    ) -> Tuple[Rating, bool]:
        """
        Set the caller's rating for a video in a single atomic write.

        Returns:
            (rating, created) where created is False when an existing rating
            was overwritten
        """
        value = RatingService.validate_value(value)

        existing = await RatingService.get_for_user_and_movie(db, identity.user_id, movie_pexels_id)

        now = datetime.now(timezone.utc)
        values = {
            "id": str(uuid.uuid4()),
            "user_id": identity.user_id,
            "movie_pexels_id": movie_pexels_id,
            "value": value,
            "created_at": now,
            "updated_at": now,
        }

        stmt = RatingService._on_conflict_upsert(db.get_bind().dialect.name, values, now)
        if stmt is not None:
            await db.execute(stmt)
        else:
            await RatingService._savepoint_upsert(db, values, now)

        rating = await RatingService.get_for_user_and_movie(db, identity.user_id, movie_pexels_id)
        return rating, existing is None

    @staticmethod
    async def average_rating(
        db: AsyncSession,
        movie_pexels_id: str,
        identity: Optional[SessionIdentity] = None,
    ) -> Tuple[float, int, int]:
        """
        Returns:
            (average, count, caller's rating) with (0, 0, 0) for an unrated
            video and a caller rating of 0 when the caller has not rated it
        """
        result = await db.execute(
            select(func.avg(Rating.value), func.count(Rating.id))
            .where(Rating.movie_pexels_id == movie_pexels_id)
        )
        average, count = result.one()

        user_rating = 0
        if identity:
            own = await db.execute(
                select(Rating.value).where(
                    Rating.movie_pexels_id == movie_pexels_id,
                    Rating.user_id == identity.user_id,
                )
            )
            user_rating = own.scalar_one_or_none() or 0

        return float(average or 0), int(count or 0), user_rating

    @staticmethod
    async def list_by_user(db: AsyncSession, user_id: str) -> List[Rating]:
        result = await db.execute(
            select(Rating)
            .where(Rating.user_id == user_id)
            .order_by(Rating.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def delete(db: AsyncSession, identity: SessionIdentity, rating_id: str) -> None:
        rating = await db.get(Rating, rating_id)
        if not rating:
            raise NotFoundError("Rating not found")
        if rating.user_id != identity.user_id:
            logger.warning(
                f"User {identity.user_id[:8]}... tried to delete rating {rating_id[:8]}... they do not own"
            )
            raise ForbiddenError("You can only delete your own ratings")

        await db.delete(rating)
        await db.flush()
