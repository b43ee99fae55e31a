from fastapi import APIRouter

from foodapi.schemas.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/api/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return {"success": True, "status": "ok"}
