"""
Health check and service descriptor endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from config import NetworkConfig
from deps import get_network
from domain.constants import SERVICE_NAME
from models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check(network: NetworkConfig = Depends(get_network)):
    """Liveness only; Horizon is not contacted."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(timezone.utc).isoformat(),
        network=network.name,
    )


@router.get("/")
async def service_info(network: NetworkConfig = Depends(get_network)):
    return {
        "service": SERVICE_NAME,
        "description": "Backend service for Stellar XLM transfer Blinks",
        "version": "1.0.0",
        "network": network.name,
        "endpoints": {
            "health": "/health",
            "transfer": "/actions/transfer",
            "icon": "/actions/transfer/icon",
            "preview": "/actions/transfer/preview",
            "submit": "/actions/transfer/submit",
        },
    }
