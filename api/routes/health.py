"""
Health check endpoint
"""

from fastapi import APIRouter
from schemas.api import HealthCheckResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Liveness only; the store is not touched"""
    return HealthCheckResponse()
