"""Star rating, one per (user, video)."""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmunity.db.session import Base

if TYPE_CHECKING:
    from filmunity.models.user import User

MIN_RATING = 1
MAX_RATING = 5


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "movie_pexels_id", name="uq_ratings_user_movie"),
        CheckConstraint(
            f"value >= {MIN_RATING} AND value <= {MAX_RATING}",
            name="ck_ratings_value_range",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    movie_pexels_id: Mapped[str] = mapped_column(String(50), index=True)
    value: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User", back_populates="ratings")

    def __repr__(self) -> str:
        return f"<Rating(id={self.id}, movie={self.movie_pexels_id}, value={self.value})>"
