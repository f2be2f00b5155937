# API endpoints and routers

from .health_endpoints import router as health_router
from .session_endpoints import router as session_router

__all__ = [
    "health_router",
    "session_router",
]
