"""
Data models for the POI map engine.
"""

from .poi import (
    CATEGORY_ORDER,
    Category,
    LngLat,
    PointOfInterest,
    PoiKey,
    Viewport,
    make_key,
)
from .directions import DirectionsSession, DirectionsStatus, Route
from .selection import SelectionState
from .events import (
    CameraFocusRequested,
    DirectionsRequested,
    EventSink,
    SelectionChanged,
    SessionEvent,
)

__all__ = [
    "CATEGORY_ORDER",
    "Category",
    "LngLat",
    "PointOfInterest",
    "PoiKey",
    "Viewport",
    "make_key",
    "DirectionsSession",
    "DirectionsStatus",
    "Route",
    "SelectionState",
    "CameraFocusRequested",
    "DirectionsRequested",
    "EventSink",
    "SelectionChanged",
    "SessionEvent",
]
