"""
Routing capability - Mapbox Directions API adapter.
"""

import logging
from typing import Optional, Protocol

import httpx

from poimap.config.settings import DirectionsSettings, get_settings
from poimap.core.exceptions import RoutingFailureError
from poimap.models.directions import Route
from poimap.models.poi import LngLat, PointOfInterest

logger = logging.getLogger(__name__)


class RoutingProvider(Protocol):
    async def route(self, origin: LngLat, destination: LngLat) -> Route: ...


def apple_maps_url(poi: PointOfInterest) -> str:
    """External hand-off link opening native directions to the POI."""
    return f"https://maps.apple.com/?daddr={poi.lat},{poi.lng}"


class MapboxDirectionsClient:
    """Fetches walking routes from the Mapbox Directions API."""

    def __init__(
        self,
        config: Optional[DirectionsSettings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or get_settings().directions
        self._client = client
        self._owns_client = client is None

        if not self.config.access_token:
            logger.warning(
                "Mapbox access token not configured. "
                "Set DIRECTIONS_ACCESS_TOKEN in .env file."
            )

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout_seconds)
        return self._client

    async def route(self, origin: LngLat, destination: LngLat) -> Route:
        """
        Request a route between two positions.

        Raises:
            RoutingFailureError: on missing configuration, HTTP errors or an
                empty/malformed response.
        """
        if not self.config.access_token:
            raise RoutingFailureError("Mapbox access token not configured")

        coordinates = f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        url = f"{self.config.api_url}/{self.config.profile}/{coordinates}"
        params = {
            "geometries": "geojson",
            "overview": "full",
            "access_token": self.config.access_token,
        }

        try:
            response = await self._get_client().get(url, params=params)
        except httpx.TimeoutException:
            raise RoutingFailureError("routing provider timed out")
        except httpx.HTTPError as e:
            raise RoutingFailureError(f"{type(e).__name__}: {e}")

        if response.status_code != 200:
            raise RoutingFailureError(
                f"HTTP {response.status_code}",
                {"status_code": response.status_code},
            )

        try:
            data = response.json()
        except ValueError:
            raise RoutingFailureError("response is not valid JSON")

        if not isinstance(data, dict):
            raise RoutingFailureError("malformed payload")
        if data.get("code", "Ok") != "Ok":
            raise RoutingFailureError(f"provider returned {data.get('code')}")

        routes = data.get("routes")
        if not routes:
            raise RoutingFailureError("no route found")

        best = routes[0]
        try:
            geometry = [LngLat(lng=float(lng), lat=float(lat)) for lng, lat in best["geometry"]["coordinates"]]
            route = Route(
                geometry=geometry,
                distance_m=float(best.get("distance", 0.0)),
                duration_s=float(best.get("duration", 0.0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RoutingFailureError(f"malformed route: {e}")

        logger.info(f"Route ready: {route.distance_m:.0f}m, {len(geometry)} vertices")
        return route

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
