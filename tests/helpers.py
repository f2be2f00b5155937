"""
Test helpers: POI builders and scripted fakes for the fetcher and router.
"""
import asyncio
from typing import Dict, List, Optional

from poimap.config.settings import ViewportSettings
from poimap.models.directions import Route
from poimap.models.poi import CATEGORY_ORDER, Category, LngLat, PointOfInterest, Viewport
from poimap.services.poi_fetcher import FetchResult

TIMES_SQUARE = LngLat(lng=-73.9855, lat=40.7580)


def restroom(lat: float, lng: float, name: str = "Bryant Park Restroom", **attrs) -> PointOfInterest:
    return PointOfInterest.create(Category.RESTROOM, lat, lng, name, **attrs)


def restaurant(lat: float, lng: float, name: str = "Joe's Pizza", grade: str = "A", **attrs) -> PointOfInterest:
    return PointOfInterest.create(Category.RESTAURANT, lat, lng, name, grade=grade, **attrs)


def fast_viewport_settings(debounce_seconds: float = 0.01) -> ViewportSettings:
    # Bypasses the 0.5-1.0s bounds so tests run quickly.
    return ViewportSettings.model_construct(debounce_seconds=debounce_seconds, edge_fraction=0.10)


class FakeFetcher:
    """
    Scripted stand-in for PoiFetcher.

    `responses` maps a category to a list of points or an exception instance;
    `gate`, when set, blocks every fetch until released.
    """

    def __init__(self, responses: Optional[Dict[Category, object]] = None):
        self.responses: Dict[Category, object] = responses or {c: [] for c in CATEGORY_ORDER}
        self.calls: List[Viewport] = []
        self.gate: Optional[asyncio.Event] = None
        self.cancelled = 0
        self.closed = False

    async def fetch_all(self, viewport: Viewport) -> Dict[Category, FetchResult]:
        self.calls.append(viewport)
        responses = dict(self.responses)
        if self.gate is not None:
            try:
                await self.gate.wait()
            except asyncio.CancelledError:
                self.cancelled += 1
                raise
        results = {}
        for category in CATEGORY_ORDER:
            value = responses.get(category, [])
            if isinstance(value, Exception):
                results[category] = FetchResult(category=category, error=value)
            else:
                results[category] = FetchResult(category=category, points=list(value))
        return results

    async def aclose(self) -> None:
        self.closed = True


class FakeRouting:
    """Routing provider returning a straight two-vertex route unless told to fail."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls: List[tuple] = []
        self.gate: Optional[asyncio.Event] = None

    async def route(self, origin: LngLat, destination: LngLat) -> Route:
        self.calls.append((origin, destination))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return Route(geometry=[origin, destination], distance_m=420.0, duration_s=300.0)

    async def aclose(self) -> None:
        pass


