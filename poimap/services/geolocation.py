"""
Geolocation capability with a fixed-coordinate fallback.
"""

import asyncio
import logging
from typing import Optional, Protocol

from poimap.core.exceptions import GeolocationUnavailableError, PoiMapException
from poimap.models.poi import LngLat

logger = logging.getLogger(__name__)


class GeolocationProvider(Protocol):
    async def current_position(self) -> LngLat: ...


class FixedGeolocation:
    """Yields a known position, or fails like a device without permission when given None."""

    def __init__(self, position: Optional[LngLat]):
        self.position = position

    async def current_position(self) -> LngLat:
        if self.position is None:
            raise GeolocationUnavailableError("Position not reported by client")
        return self.position


async def locate(
    provider: Optional[GeolocationProvider],
    default: LngLat,
    timeout_seconds: float = 5.0,
) -> tuple[LngLat, bool]:
    """
    Acquire the user's position once.

    Returns (position, located); located is False when the default was used.
    """
    if provider is None:
        logger.info("No geolocation provider, using default location")
        return default, False

    try:
        position = await asyncio.wait_for(provider.current_position(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.warning(
            f"Geolocation timed out after {timeout_seconds:g}s, using default location",
            extra={"error_code": "GEOLOCATION_UNAVAILABLE"},
        )
        return default, False
    except PoiMapException as e:
        logger.warning(f"{e.message}, using default location", extra={"error_code": e.error_code.value})
        return default, False
    except Exception as e:
        # Native provider failures, e.g. permission denied.
        error = GeolocationUnavailableError(str(e) or type(e).__name__)
        logger.warning(
            f"Geolocation unavailable ({type(e).__name__}: {error.message}), using default location",
            extra={"error_code": error.error_code.value},
        )
        return default, False

    return position, True
