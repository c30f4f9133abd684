"""Database models."""

from filmunity.models.user import User
from filmunity.models.movie import Movie
from filmunity.models.comment import Comment
from filmunity.models.rating import Rating

__all__ = [
    "User",
    "Movie",
    "Comment",
    "Rating",
]
