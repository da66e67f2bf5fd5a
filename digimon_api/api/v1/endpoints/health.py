"""Health check endpoint."""

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    summary="Health check",
    description="Check that the API is running.",
)
async def health_check() -> dict:
    """Liveness check; never touches the database."""
    return {"status": "healthy"}
