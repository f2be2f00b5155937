"""
Directions controller - Idle / Requesting / Active state machine around an
external routing provider.

Only one route exists at a time: starting while Requesting or Active stops
the previous request or route first. A provider answer that arrives after
its request was superseded is discarded.
"""

import asyncio
import logging
from typing import Callable, Optional

from poimap.models.directions import DirectionsSession, DirectionsStatus, Route
from poimap.models.poi import LngLat
from poimap.services.map_surface import ROUTE_LAYER_ID, MapSurface
from poimap.services.routing_client import RoutingProvider

logger = logging.getLogger(__name__)


class DirectionsController:
    def __init__(
        self,
        routing: RoutingProvider,
        surface: MapSurface,
        user_location: Callable[[], LngLat],
        layer_id: str = ROUTE_LAYER_ID,
    ):
        self._routing = routing
        self._surface = surface
        self._user_location = user_location
        self.layer_id = layer_id
        self.session = DirectionsSession(origin=user_location())
        self._request: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def status(self) -> DirectionsStatus:
        return self.session.status

    async def start(self, origin: LngLat, destination: LngLat) -> DirectionsSession:
        """
        Request a route. Returns the session once the request has settled;
        the status is Active on success and Idle on failure or if a later
        start/stop superseded this request.
        """
        if self.session.status is not DirectionsStatus.IDLE:
            self.stop()

        self._generation += 1
        generation = self._generation
        self.session.origin = origin
        self.session.destination = destination
        self.session.route = None
        self.session.last_error = None
        self.session.status = DirectionsStatus.REQUESTING

        task = asyncio.create_task(self._routing.route(origin, destination))
        self._request = task
        try:
            route = await task
        except asyncio.CancelledError:
            if generation == self._generation:
                # The caller itself was cancelled.
                self._request = None
                self._reset()
                raise
            logger.info("Route request superseded before completion")
            return self.session
        except Exception as e:
            if generation != self._generation:
                return self.session
            self._request = None
            self._reset()
            self.session.last_error = getattr(e, "message", None) or str(e)
            logger.warning(
                f"Route request failed: {self.session.last_error}",
                extra={"error_code": "ROUTING_FAILED"},
            )
            return self.session

        if generation != self._generation:
            logger.info("Discarding route for a superseded request")
            return self.session

        self._request = None
        self._activate(route)
        return self.session

    def stop(self) -> None:
        """Tear down any request or route; a no-op when already Idle."""
        if self.session.status is DirectionsStatus.IDLE:
            return

        self._generation += 1
        if self._request is not None and not self._request.done():
            self._request.cancel()
        self._request = None

        if self.session.route is not None:
            self._surface.remove_route(self.layer_id)

        self._reset()
        logger.info("Directions stopped")

    def _reset(self) -> None:
        self.session.route = None
        self.session.destination = None
        self.session.origin = self._user_location()
        self.session.status = DirectionsStatus.IDLE

    def _activate(self, route: Route) -> None:
        self._surface.show_route(self.layer_id, route)
        # The route must sit above every other layer regardless of draw order.
        self._surface.raise_layer(self.layer_id)
        self.session.route = route
        self.session.status = DirectionsStatus.ACTIVE
        logger.info(f"Directions active: {route.distance_m:.0f}m")
