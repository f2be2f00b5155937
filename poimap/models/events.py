"""
Events emitted by marker selection bindings.

Bindings only read POI data and emit these; the owning session applies them.
"""

from dataclasses import dataclass
from typing import Callable, Union

from poimap.models.poi import LngLat, PointOfInterest


@dataclass(frozen=True)
class SelectionChanged:
    poi: PointOfInterest


@dataclass(frozen=True)
class CameraFocusRequested:
    position: LngLat
    zoom: float


@dataclass(frozen=True)
class DirectionsRequested:
    poi: PointOfInterest


SessionEvent = Union[SelectionChanged, CameraFocusRequested, DirectionsRequested]

EventSink = Callable[[SessionEvent], None]
