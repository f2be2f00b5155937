"""Map session endpoints: viewport updates, selection, nearest and directions."""
from fastapi import APIRouter, Depends
from typing import Any, Dict, Optional
import logging

from poimap.core.dependencies import get_registry, get_session
from poimap.core.registry import SessionRegistry
from poimap.core.session import MapSession
from poimap.schemas.base import ok
from poimap.schemas.session import DirectionsIn, LocationIn, SessionCreate, ViewportIn
from poimap.services.geolocation import FixedGeolocation
from poimap.services.nearest import NO_RESULTS_ADVISORY
from poimap.services.routing_client import apple_maps_url

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _state(session: MapSession) -> Dict[str, Any]:
    data = session.snapshot()
    surface_dict = getattr(session.surface, "to_dict", None)
    if surface_dict is not None:
        data["surface"] = surface_dict()
    return data


@router.post("", status_code=201)
async def create_session(
    body: Optional[SessionCreate] = None,
    registry: SessionRegistry = Depends(get_registry),
):
    """
    Create and start a map session.

    The client reports the device position if it has one; otherwise the
    session falls back to the default center.
    """
    body = body or SessionCreate()
    position = body.location.to_lnglat() if body.location else None
    await registry.prune()
    session = registry.create(geolocation=FixedGeolocation(position))
    viewport = body.viewport.to_viewport() if body.viewport else None
    if viewport is not None and hasattr(session.surface, "set_viewport"):
        session.surface.set_viewport(viewport)
    await session.start(viewport)
    return ok(_state(session))


@router.get("/{session_id}")
async def get_session_state(session: MapSession = Depends(get_session)):
    return ok(_state(session))


@router.post("/{session_id}/viewport", status_code=202)
async def viewport_changed(body: ViewportIn, session: MapSession = Depends(get_session)):
    """Report a viewport change; the refresh runs after the debounce delay."""
    viewport = body.to_viewport()
    if hasattr(session.surface, "set_viewport"):
        session.surface.set_viewport(viewport)
    session.on_viewport_changed(viewport)
    return ok({"pending": session.watcher.pending})


@router.post("/{session_id}/refresh")
async def refresh(body: Optional[ViewportIn] = None, session: MapSession = Depends(get_session)):
    """Refresh immediately, bypassing the debounce and movement threshold."""
    viewport = body.to_viewport() if body else session.surface.viewport()
    if viewport is None:
        viewport = session.watcher.last_fetched
    if viewport is not None:
        await session.watcher.force(viewport)
    return ok(_state(session))


@router.post("/{session_id}/location")
async def update_location(body: LocationIn, session: MapSession = Depends(get_session)):
    session.update_user_location(body.to_lnglat())
    return ok({"user_location": session.user_location.as_tuple()})


@router.post("/{session_id}/recenter")
async def recenter(session: MapSession = Depends(get_session)):
    session.recenter()
    return ok(_state(session))


@router.post("/{session_id}/markers/{marker_id}/activate")
async def activate_marker(marker_id: str, session: MapSession = Depends(get_session)):
    poi = session.activate_marker(marker_id)
    return ok({"selected": poi.to_dict(), "apple_maps_url": apple_maps_url(poi)})


@router.delete("/{session_id}/selection")
async def clear_selection(session: MapSession = Depends(get_session)):
    session.clear_selection()
    return ok(session.selection.to_dict())


@router.get("/{session_id}/nearest")
async def nearest(session: MapSession = Depends(get_session)):
    result = session.find_nearest()
    if result is None:
        return ok({"nearest": None, "advisory": NO_RESULTS_ADVISORY})
    return ok({
        "nearest": result.poi.to_dict(),
        "distance_m": result.distance_m,
        "distance": result.formatted_distance,
        "apple_maps_url": apple_maps_url(result.poi),
        "advisory": None,
    })


@router.post("/{session_id}/directions")
async def start_directions(body: Optional[DirectionsIn] = None, session: MapSession = Depends(get_session)):
    marker_id = body.marker_id if body else None
    directions = await session.request_directions(marker_id)
    return ok(directions.to_dict())


@router.delete("/{session_id}/directions")
async def stop_directions(session: MapSession = Depends(get_session)):
    session.stop_directions()
    return ok(session.directions.session.to_dict())


@router.delete("/{session_id}")
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_registry)):
    await registry.close(session_id)
    return ok({"session_id": session_id, "closed": True})
