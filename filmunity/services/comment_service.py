"""Comment service: create, list and owner-only update/delete."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from filmunity.core.exceptions import ForbiddenError, NotFoundError
from filmunity.models.comment import Comment
from filmunity.services.auth_service import SessionIdentity

logger = logging.getLogger(__name__)


class CommentService:

    @staticmethod
    async def create(
        db: AsyncSession,
        identity: SessionIdentity,
        movie_pexels_id: str,
        description: str,
    ) -> Comment:
        comment = Comment(
            user_id=identity.user_id,
            movie_pexels_id=movie_pexels_id,
            description=description,
        )
        db.add(comment)
        await db.flush()
        await db.refresh(comment)
        return comment

    @staticmethod
    async def list_by_movie(
        db: AsyncSession,
        movie_pexels_id: str,
        identity: Optional[SessionIdentity] = None,
    ) -> Tuple[List[Comment], List[Comment]]:
        """
        Comments on a video, newest first, split into (caller's, everyone else's).

        Each comment has its `user` loaded for display. Without an identity
        every comment lands in the second list.
        """
        result = await db.execute(
            select(Comment)
            .where(Comment.movie_pexels_id == movie_pexels_id)
            .options(selectinload(Comment.user))
            .order_by(Comment.created_at.desc())
        )
        comments = result.scalars().all()

        caller_id = identity.user_id if identity else None
        mine = [c for c in comments if c.user_id == caller_id]
        others = [c for c in comments if c.user_id != caller_id]
        return mine, others

    @staticmethod
    async def list_by_user(db: AsyncSession, user_id: str) -> List[Comment]:
        result = await db.execute(
            select(Comment)
            .where(Comment.user_id == user_id)
            .order_by(Comment.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_owned(
        db: AsyncSession,
        identity: SessionIdentity,
        comment_id: str,
    ) -> Comment:
        """Fetch a comment the caller owns (404 if missing, 403 if someone else's)."""
        comment = await db.get(Comment, comment_id)
        if not comment:
            raise NotFoundError("Comment not found")
        if comment.user_id != identity.user_id:
            logger.warning(
                f"User {identity.user_id[:8]}... tried to modify comment {comment_id[:8]}... they do not own"
            )
            raise ForbiddenError("You can only modify your own comments")
        return comment

    @staticmethod
    async def update(
        db: AsyncSession,
        identity: SessionIdentity,
        comment_id: str,
        description: str,
    ) -> Comment:
        comment = await CommentService.get_owned(db, identity, comment_id)
        comment.description = description
        await db.flush()
        await db.refresh(comment)
        return comment

    @staticmethod
    async def delete(
        db: AsyncSession,
        identity: SessionIdentity,
        comment_id: str,
    ) -> None:
        comment = await CommentService.get_owned(db, identity, comment_id)
        await db.delete(comment)
        await db.flush()
