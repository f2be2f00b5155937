"""
Core infrastructure for the POI map engine: errors, logging, scheduling and
the map session lifecycle.
"""

from .exceptions import (
    ErrorCode,
    PoiMapException,
    FetchTimeoutError,
    FetchFailureError,
    GeolocationUnavailableError,
    RoutingFailureError,
    SessionNotFoundError,
    MarkerNotFoundError,
    NoDestinationError,
)
from .logging import configure_logging
from .scheduling import ScheduledTask

__all__ = [
    "ErrorCode",
    "PoiMapException",
    "FetchTimeoutError",
    "FetchFailureError",
    "GeolocationUnavailableError",
    "RoutingFailureError",
    "SessionNotFoundError",
    "MarkerNotFoundError",
    "NoDestinationError",
    "configure_logging",
    "ScheduledTask",
]
