"""Catalog entry pointing at a Pexels video."""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from filmunity.db.session import Base

if TYPE_CHECKING:
    from filmunity.models.user import User


class Movie(Base):
    __tablename__ = "movies"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    title: Mapped[str] = mapped_column(String(255))
    pexels_id: Mapped[str] = mapped_column(String(50), index=True)
    pexels_user: Mapped[str] = mapped_column(String(255))
    miniature_url: Mapped[str] = mapped_column(String(1000))

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="movies")

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, title={self.title}, pexels_id={self.pexels_id})>"
