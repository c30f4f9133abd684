"""Services for business logic."""

from filmunity.services.auth_service import AuthService, SessionIdentity
from filmunity.services.password_reset_service import PasswordResetService
from filmunity.services.profile_service import ProfileService
from filmunity.services.comment_service import CommentService
from filmunity.services.rating_service import RatingService
from filmunity.services.movie_service import MovieService
from filmunity.services.video_search_service import VideoSearchService

__all__ = [
    "AuthService",
    "SessionIdentity",
    "PasswordResetService",
    "ProfileService",
    "CommentService",
    "RatingService",
    "MovieService",
    "VideoSearchService",
]
