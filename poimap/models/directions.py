"""Directions session and route models."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from poimap.models.poi import LngLat


class DirectionsStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    ACTIVE = "active"


@dataclass(frozen=True)
class Route:
    """A computed route returned by the routing provider."""
    geometry: List[LngLat]
    distance_m: float
    duration_s: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "geometry": [p.as_tuple() for p in self.geometry],
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
        }


@dataclass
class DirectionsSession:
    origin: Optional[LngLat] = None
    destination: Optional[LngLat] = None
    status: DirectionsStatus = DirectionsStatus.IDLE
    route: Optional[Route] = None
    last_error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "origin": self.origin.as_tuple() if self.origin else None,
            "destination": self.destination.as_tuple() if self.destination else None,
            "route": self.route.to_dict() if self.route else None,
            "last_error": self.last_error,
        }
