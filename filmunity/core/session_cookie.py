"""Session cookie helpers. Secure/SameSite depend on the deployment environment."""

from fastapi import Response

from filmunity.core.config import get_settings


def _cookie_flags() -> dict:
    settings = get_settings()
    return {
        "httponly": True,
        "secure": settings.is_production,
        # Cross-site frontends need SameSite=None, which browsers only accept with Secure
        "samesite": "none" if settings.is_production else "lax",
        "path": "/",
    }


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        **_cookie_flags(),
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=get_settings().session_cookie_name, **_cookie_flags())
