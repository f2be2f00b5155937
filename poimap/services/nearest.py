"""Nearest POI search and distance helpers."""
import math
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from poimap.models.poi import CATEGORY_ORDER, Category, LngLat, PointOfInterest

EARTH_RADIUS_M = 6371000
NO_RESULTS_ADVISORY = "No restrooms or restaurants found nearby. Try moving the map."


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi, dlam = math.radians(lat2 - lat1), math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2) ** 2
    # Rounding can push a just past 1 for antipodal points.
    a = min(1.0, a)
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_m(origin: LngLat, poi: PointOfInterest) -> float:
    return haversine_m(origin.lat, origin.lng, poi.lat, poi.lng)


def format_distance(meters: float) -> str:
    """'999m' below a kilometre, '1.0km' from there on."""
    if meters < 1000:
        # Half-up rounding, not Python's round-half-even.
        return f"{math.floor(meters + 0.5)}m"
    return f"{meters / 1000:.1f}km"


@dataclass(frozen=True)
class NearestResult:
    poi: PointOfInterest
    distance_m: float

    @property
    def formatted_distance(self) -> str:
        return format_distance(self.distance_m)


def find_nearest(
    origin: LngLat,
    points_by_category: Mapping[Category, Sequence[PointOfInterest]],
) -> Optional[NearestResult]:
    """
    Linear scan over restrooms then restaurants. On equal distances the
    first point in that concatenated order wins. Returns None when there
    are no candidates.
    """
    best: Optional[NearestResult] = None
    for category in CATEGORY_ORDER:
        for poi in points_by_category.get(category, ()):
            d = distance_m(origin, poi)
            if best is None or d < best.distance_m:
                best = NearestResult(poi=poi, distance_m=d)
    return best
