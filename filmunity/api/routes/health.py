"""Health check endpoints."""

from fastapi import APIRouter

from filmunity import __version__

router = APIRouter()


@router.get("/health")
async def health_check():
    """Check if the API is running."""
    return {"status": "ok", "message": "Film Unity API is running"}


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Film Unity API",
        "version": __version__,
        "description": "Accounts, movie catalog, comments, ratings and Pexels video search",
    }
