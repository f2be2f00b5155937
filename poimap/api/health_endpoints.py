"""
Health check and service status endpoints.
"""

from fastapi import APIRouter, Depends
from typing import Dict, Any
import logging
import time
from datetime import datetime, timezone

from poimap.config.settings import get_settings
from poimap.core.dependencies import get_registry
from poimap.core.error_handlers import error_handler
from poimap.core.registry import SessionRegistry
from poimap.schemas.base import ok

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Application start time for uptime calculation
_app_start_time = time.time()


@router.get("/health", summary="Basic health check")
async def health_check(registry: SessionRegistry = Depends(get_registry)) -> Dict[str, Any]:
    settings = get_settings()
    return ok({
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment.value,
        "uptime_seconds": round(time.time() - _app_start_time, 1),
        "active_sessions": len(registry),
        "errors": error_handler.get_error_statistics(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
