"""
Point-of-interest and viewport data models.

Coordinates follow the map-engine convention of (lng, lat) pairs, while
POI keys are (lat, lng) rounded to 5 decimal places (about 1.1 m).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

KEY_DECIMALS = 5

PoiKey = Tuple[float, float]


class Category(str, Enum):
    """POI categories, declared in the fixed restroom-then-restaurant order."""
    RESTROOM = "restroom"
    RESTAURANT = "restaurant"


CATEGORY_ORDER: Tuple[Category, ...] = (Category.RESTROOM, Category.RESTAURANT)


@dataclass(frozen=True)
class LngLat:
    lng: float
    lat: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lng, self.lat)


def make_key(lat: float, lng: float) -> PoiKey:
    return (round(lat, KEY_DECIMALS), round(lng, KEY_DECIMALS))


@dataclass(frozen=True)
class PointOfInterest:
    """A fetched restroom or restaurant record."""
    category: Category
    key: PoiKey
    lat: float
    lng: float
    name: str
    borough: Optional[str] = None
    # Restroom attributes
    accessible: Optional[bool] = None
    year_round: Optional[bool] = None
    # Restaurant attributes
    cuisine: Optional[str] = None
    grade: Optional[str] = None

    @classmethod
    def create(cls, category: Category, lat: float, lng: float, name: str, **attrs: Any) -> "PointOfInterest":
        return cls(category=category, key=make_key(lat, lng), lat=lat, lng=lng, name=name, **attrs)

    @property
    def position(self) -> LngLat:
        return LngLat(lng=self.lng, lat=self.lat)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        data: Dict[str, Any] = {
            "category": self.category.value,
            "key": list(self.key),
            "latitude": self.lat,
            "longitude": self.lng,
            "name": self.name,
            "borough": self.borough,
        }
        if self.category is Category.RESTROOM:
            data["accessible"] = self.accessible
            data["year_round"] = self.year_round
        else:
            data["cuisine"] = self.cuisine
            data["grade"] = self.grade
        return data


@dataclass(frozen=True)
class Viewport:
    """Visible map region reported by the map engine."""
    south: float
    west: float
    north: float
    east: float
    zoom: float = 0.0

    @property
    def lat_span(self) -> float:
        return self.north - self.south

    @property
    def lng_span(self) -> float:
        return self.east - self.west

    @property
    def center(self) -> LngLat:
        return LngLat(lng=(self.west + self.east) / 2.0, lat=(self.south + self.north) / 2.0)

    @classmethod
    def around(cls, center: LngLat, lat_radius: float = 0.01, lng_radius: float = 0.013, zoom: float = 13.0) -> "Viewport":
        """Build a viewport centred on a position, used before the map reports bounds."""
        return cls(
            south=center.lat - lat_radius,
            west=center.lng - lng_radius,
            north=center.lat + lat_radius,
            east=center.lng + lng_radius,
            zoom=zoom,
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "south": self.south,
            "west": self.west,
            "north": self.north,
            "east": self.east,
            "zoom": self.zoom,
        }
