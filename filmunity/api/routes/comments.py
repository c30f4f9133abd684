"""Comment endpoints."""

from typing import List

from fastapi import APIRouter, status

from filmunity.core.dependencies import CurrentIdentity, DbSession, OptionalIdentity
from filmunity.schemas.base import MessageResponse
from filmunity.schemas.comment import (
    CommentCreate,
    CommentResponse,
    CommentUpdate,
    CommentUpdateResponse,
    CommentWithAuthor,
    MovieCommentsResponse,
)
from filmunity.services.comment_service import CommentService

router = APIRouter()


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(data: CommentCreate, identity: CurrentIdentity, db: DbSession):
    """Comment on a Pexels video."""
    comment = await CommentService.create(db, identity, data.movie_pexels_id, data.description)
    await db.commit()
    return comment


@router.get("/movie/{movie_pexels_id}", response_model=MovieCommentsResponse)
async def get_comments_by_movie(movie_pexels_id: str, db: DbSession, identity: OptionalIdentity):
    """
    List comments on a video, newest first.

    With a session, the caller's own comments come back in `userComments`
    and everyone else's in `otherComments`.
    """
    mine, others = await CommentService.list_by_movie(db, movie_pexels_id, identity)
    return MovieCommentsResponse(
        user_comments=[CommentWithAuthor.model_validate(c) for c in mine],
        other_comments=[CommentWithAuthor.model_validate(c) for c in others],
    )


@router.get("/user/{user_id}", response_model=List[CommentResponse])
async def get_comments_by_user(user_id: str, db: DbSession):
    """List a user's comments, newest first."""
    return await CommentService.list_by_user(db, user_id)


@router.put("/{comment_id}", response_model=CommentUpdateResponse)
@router.patch("/{comment_id}", response_model=CommentUpdateResponse)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    identity: CurrentIdentity,
    db: DbSession,
):
    """Edit a comment. Only its author may do this."""
    comment = await CommentService.update(db, identity, comment_id, data.description)
    await db.commit()
    return CommentUpdateResponse(
        message="Comment updated successfully",
        comment=CommentResponse.model_validate(comment),
    )


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(comment_id: str, identity: CurrentIdentity, db: DbSession):
    """Delete a comment. Only its author may do this."""
    await CommentService.delete(db, identity, comment_id)
    await db.commit()
    return MessageResponse(message="Comment deleted successfully")
