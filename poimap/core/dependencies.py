"""
Dependency injection setup for FastAPI.
Provides the session registry and per-request map session lookups.
"""

from fastapi import Depends, Request, HTTPException
import logging

from poimap.core.registry import SessionRegistry
from poimap.core.session import MapSession


logger = logging.getLogger(__name__)


def get_registry(request: Request) -> SessionRegistry:
    """
    Get the session registry from application state.

    Raises:
        HTTPException: If the registry is not available
    """
    registry = getattr(request.app.state, 'registry', None)
    if registry is None:
        logger.error("Session registry not initialized")
        raise HTTPException(
            status_code=500,
            detail="Session registry not available"
        )
    return registry


def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry)
) -> MapSession:
    """Dependency provider for the map session named in the path."""
    return registry.get(session_id)

