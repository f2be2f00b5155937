"""
Map session - the owned object behind one live map.

Owns the current POI sets, the per-category marker reconcilers, the viewport
watcher, the directions controller, the selection and the user location.
Everything is created with the session and released by `close()`: the
debounce timer and any in-flight refresh are cancelled, directions are
stopped and every marker is removed from the map surface.

In-flight policy: a new refresh hard-cancels the refresh already in flight,
which aborts both category requests. A cycle counter also drops results from
a superseded cycle, so each category is last-writer-wins.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional

from poimap.config.settings import Settings, get_settings
from poimap.core.exceptions import MarkerNotFoundError, NoDestinationError
from poimap.models.directions import DirectionsSession
from poimap.models.events import CameraFocusRequested, DirectionsRequested, SelectionChanged, SessionEvent
from poimap.models.poi import CATEGORY_ORDER, Category, LngLat, PointOfInterest, Viewport
from poimap.models.selection import SelectionState
from poimap.services.declutter import declutter
from poimap.services.directions import DirectionsController
from poimap.services.geolocation import GeolocationProvider, locate
from poimap.services.map_surface import USER_MARKER_ID, HeadlessMapSurface, MapSurface
from poimap.services.marker_reconciler import MarkerHandle, MarkerReconciler
from poimap.services.nearest import NearestResult, find_nearest
from poimap.services.poi_fetcher import PoiFetcher
from poimap.services.routing_client import MapboxDirectionsClient, RoutingProvider
from poimap.services.viewport_watcher import ViewportWatcher

logger = logging.getLogger(__name__)


class MapSession:
    """Viewport-driven POI synchronization for one map."""

    def __init__(
        self,
        session_id: Optional[str] = None,
        surface: Optional[MapSurface] = None,
        fetcher: Optional[PoiFetcher] = None,
        routing: Optional[RoutingProvider] = None,
        geolocation: Optional[GeolocationProvider] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.session_id = session_id or uuid.uuid4().hex
        self._owned: List[Any] = []

        self.surface = surface if surface is not None else HeadlessMapSurface()
        if fetcher is None:
            fetcher = PoiFetcher(self.settings.fetch)
            self._owned.append(fetcher)
        self.fetcher = fetcher
        if routing is None:
            routing = MapboxDirectionsClient(self.settings.directions)
            self._owned.append(routing)
        self.routing = routing
        self.geolocation = geolocation

        self.default_location = LngLat(lng=self.settings.default_lng, lat=self.settings.default_lat)
        self.user_location = self.default_location
        self.located = False
        self._user_marker = False

        self.points: Dict[Category, List[PointOfInterest]] = {c: [] for c in CATEGORY_ORDER}
        self.loading: Dict[Category, bool] = {c: False for c in CATEGORY_ORDER}
        self.last_errors: Dict[Category, Optional[str]] = {c: None for c in CATEGORY_ORDER}
        self.reconcilers: Dict[Category, MarkerReconciler] = {
            c: MarkerReconciler(c, self.surface, self._dispatch, focus_zoom=self.settings.focus_zoom)
            for c in CATEGORY_ORDER
        }
        self.selection = SelectionState()
        self.watcher = ViewportWatcher(self.refresh, self.settings.viewport)
        self.directions = DirectionsController(self.routing, self.surface, lambda: self.user_location)

        self._cycle = 0
        self._refresh_task: Optional[asyncio.Task] = None
        self._directions_task: Optional[asyncio.Task] = None
        self.started = False
        self.closed = False

    # Lifecycle

    async def start(self, viewport: Optional[Viewport] = None) -> None:
        """Locate the user, place the user marker and run the initial fetch."""
        self.surface.set_control_icon("geolocate", "location-arrow")

        position, located = await locate(
            self.geolocation, self.default_location, self.settings.geolocation_timeout_seconds
        )
        self.update_user_location(position, located=located)
        if located:
            self.surface.fly_to(position, self.settings.user_zoom)
        else:
            self.surface.fly_to(position, self.settings.default_zoom)

        self.started = True
        initial = viewport or self.surface.viewport() or Viewport.around(position, zoom=self.settings.default_zoom)
        await self.watcher.force(initial)

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True

        self.watcher.cancel()
        for task in (self._refresh_task, self._directions_task):
            if task is not None and not task.done():
                task.cancel()
        self._refresh_task = None
        self._directions_task = None

        self.directions.stop()
        released = sum(r.release_all() for r in self.reconcilers.values())
        if self._user_marker:
            self.surface.remove_marker(USER_MARKER_ID)
            self._user_marker = False
        self.selection.clear()
        for category in CATEGORY_ORDER:
            self.points[category] = []
            self.loading[category] = False

        for resource in self._owned:
            await resource.aclose()
        logger.info(f"Map session {self.session_id} closed, released {released} markers")

    # Viewport and refresh

    def on_viewport_changed(self, viewport: Viewport) -> None:
        self.watcher.on_viewport_changed(viewport)

    async def refresh(self, viewport: Viewport) -> None:
        """Run one refresh cycle, cancelling any cycle still in flight."""
        previous = self._refresh_task
        if previous is not None and not previous.done():
            previous.cancel()
            logger.info("Superseding in-flight refresh")

        self._cycle += 1
        task = asyncio.create_task(self._refresh_cycle(self._cycle, viewport))
        self._refresh_task = task
        try:
            await task
        except asyncio.CancelledError:
            # Superseded or closed: the replacement owns the state now.
            if self._refresh_task is task:
                raise

    async def _refresh_cycle(self, cycle: int, viewport: Viewport) -> None:
        for category in CATEGORY_ORDER:
            self.loading[category] = True
        try:
            results = await self.fetcher.fetch_all(viewport)
        finally:
            if cycle == self._cycle:
                for category in CATEGORY_ORDER:
                    self.loading[category] = False

        if cycle != self._cycle or self.closed:
            logger.info("Dropping results of a superseded refresh")
            return

        decl = self.settings.declutter
        for category, result in results.items():
            if not result.ok:
                # Keep the previous markers for this category.
                self.last_errors[category] = result.error.message
                continue
            self.last_errors[category] = None
            points = declutter(result.points, decl.min_delta, decl.cap)
            self.points[category] = points
            stats = self.reconcilers[category].reconcile(points)
            logger.info(
                f"{category.value}: {len(points)} markers "
                f"(+{stats.created} -{stats.removed}) from {len(result.points)} points",
                extra={"session_id": self.session_id, "category": category.value},
            )

    # User location

    def update_user_location(self, position: LngLat, located: bool = True) -> None:
        self.user_location = position
        self.located = self.located or located
        if self._user_marker:
            self.surface.move_marker(USER_MARKER_ID, position)
        else:
            self.surface.add_marker(USER_MARKER_ID, position, kind="user", title="You are here")
            self._user_marker = True
        if self.directions.session.destination is None:
            self.directions.session.origin = position

    def recenter(self) -> None:
        self.surface.fly_to(self.user_location, self.settings.recenter_zoom)

    # Markers and selection

    def find_marker(self, marker_id: str) -> MarkerHandle:
        for reconciler in self.reconcilers.values():
            handle = reconciler.find(marker_id)
            if handle is not None:
                return handle
        raise MarkerNotFoundError(marker_id)

    def activate_marker(self, marker_id: str) -> PointOfInterest:
        return self.find_marker(marker_id).activate()

    def clear_selection(self) -> None:
        self.selection.clear()

    def _dispatch(self, event: SessionEvent) -> None:
        if isinstance(event, SelectionChanged):
            self.selection.select(event.poi)
        elif isinstance(event, CameraFocusRequested):
            self.surface.fly_to(event.position, event.zoom)
        elif isinstance(event, DirectionsRequested):
            if self._directions_task is not None and not self._directions_task.done():
                self._directions_task.cancel()
            self._directions_task = asyncio.create_task(self.start_directions(event.poi))

    # Nearest and directions

    def find_nearest(self) -> Optional[NearestResult]:
        """Select and focus the nearest displayed POI; None means show an advisory."""
        result = find_nearest(self.user_location, self.points)
        if result is None:
            logger.info("Nearest search found no candidates")
            return None
        self.selection.select(result.poi)
        self.surface.fly_to(result.poi.position, self.settings.focus_zoom)
        return result

    async def start_directions(self, poi: PointOfInterest) -> DirectionsSession:
        return await self.directions.start(self.user_location, poi.position)

    async def request_directions(self, marker_id: Optional[str] = None) -> DirectionsSession:
        """Route to a marker's POI, or to the current selection."""
        poi = self.find_marker(marker_id).poi if marker_id else self.selection.selected
        if poi is None:
            raise NoDestinationError()
        return await self.start_directions(poi)

    def stop_directions(self) -> None:
        self.directions.stop()

    def snapshot(self) -> Dict[str, Any]:
        markers = [
            {"marker_id": h.marker_id, "poi": h.poi.to_dict()}
            for category in CATEGORY_ORDER
            for h in self.reconcilers[category].handles.values()
        ]
        return {
            "session_id": self.session_id,
            "user_location": self.user_location.as_tuple(),
            "located": self.located,
            "loading": {c.value: v for c, v in self.loading.items()},
            "errors": {c.value: v for c, v in self.last_errors.items()},
            "counts": {c.value: len(self.points[c]) for c in CATEGORY_ORDER},
            "markers": markers,
            "selection": self.selection.to_dict(),
            "directions": self.directions.session.to_dict(),
        }
