"""Health endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from ...services.routing import osrm_client

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    try:
        return {"service": "osrm", "healthy": osrm_client.check_health()}
    except Exception as e:
        logger.warning(f"OSRM health check failed: {e}")
        return {"service": "osrm", "healthy": False, "error": str(e)}
