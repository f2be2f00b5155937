"""
Custom exceptions for the POI map engine.

Fetch, geolocation and routing failures are classified at the asynchronous
boundary where they happen and degrade locally; none of them is fatal to a
map session. Session and marker lookups are the only errors surfaced as
HTTP failures.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Remote POI fetch errors
    FETCH_TIMEOUT = "FETCH_TIMEOUT"
    FETCH_FAILED = "FETCH_FAILED"

    # Capability errors
    GEOLOCATION_UNAVAILABLE = "GEOLOCATION_UNAVAILABLE"
    ROUTING_FAILED = "ROUTING_FAILED"

    # Session errors
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    MARKER_NOT_FOUND = "MARKER_NOT_FOUND"
    NO_DESTINATION = "NO_DESTINATION"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class PoiMapException(Exception):
    """Base exception for the POI map engine."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class FetchTimeoutError(PoiMapException):
    """Raised when a POI dataset query exceeds its timeout."""

    def __init__(self, category: str, timeout_seconds: float):
        super().__init__(
            message=f"Fetching {category} points timed out after {timeout_seconds:g} seconds",
            error_code=ErrorCode.FETCH_TIMEOUT,
            details={"category": category, "timeout_seconds": timeout_seconds},
            status_code=504
        )


class FetchFailureError(PoiMapException):
    """Raised on a non-2xx response, a transport error or a malformed payload."""

    def __init__(self, category: str, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Fetching {category} points failed: {reason}",
            error_code=ErrorCode.FETCH_FAILED,
            details={"category": category, **(details or {})},
            status_code=502
        )


class GeolocationUnavailableError(PoiMapException):
    """Raised when the device position cannot be acquired."""

    def __init__(self, reason: str = "Geolocation unavailable"):
        super().__init__(
            message=reason,
            error_code=ErrorCode.GEOLOCATION_UNAVAILABLE,
            status_code=503
        )


class RoutingFailureError(PoiMapException):
    """Raised when the routing provider cannot produce a route."""

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Route request failed: {reason}",
            error_code=ErrorCode.ROUTING_FAILED,
            details=details,
            status_code=502
        )


class SessionNotFoundError(PoiMapException):
    """Raised when a map session id is unknown or already closed."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Map session '{session_id}' not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"session_id": session_id},
            status_code=404
        )


class MarkerNotFoundError(PoiMapException):
    """Raised when a marker id is not part of the live marker set."""

    def __init__(self, marker_id: str):
        super().__init__(
            message=f"Marker '{marker_id}' not found",
            error_code=ErrorCode.MARKER_NOT_FOUND,
            details={"marker_id": marker_id},
            status_code=404
        )


class NoDestinationError(PoiMapException):
    """Raised when directions are requested with nothing selected."""

    def __init__(self):
        super().__init__(
            message="Select a restroom or restaurant before requesting directions",
            error_code=ErrorCode.NO_DESTINATION,
            status_code=409
        )
