"""Comment left by a user on a Pexels video."""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmunity.db.session import Base

if TYPE_CHECKING:
    from filmunity.models.user import User

COMMENT_MAX_LENGTH = 100


class Comment(Base):
    """
    A short free-text comment.

    `movie_pexels_id` is the provider's video id, not a foreign key into
    the catalog, so users can comment on any searchable video.
    """

    __tablename__ = "comments"

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
    description: Mapped[str] = mapped_column(String(COMMENT_MAX_LENGTH))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User", back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, movie={self.movie_pexels_id}, user={self.user_id})>"
