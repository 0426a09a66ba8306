"""Service-level REST routes."""

from fastapi import APIRouter

router = APIRouter(prefix="/api")


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
