"""
Unit tests for geolocation with default fallback
"""
import asyncio

import pytest

from helpers import TIMES_SQUARE
from poimap.models.poi import LngLat
from poimap.services.geolocation import FixedGeolocation, locate

USER = LngLat(lng=-73.99, lat=40.73)


class SlowGeolocation:
    async def current_position(self) -> LngLat:
        await asyncio.sleep(1)
        return USER


@pytest.mark.asyncio
async def test_reported_position_is_used():
    assert await locate(FixedGeolocation(USER), TIMES_SQUARE) == (USER, True)


@pytest.mark.asyncio
async def test_no_provider_falls_back_to_default():
    assert await locate(None, TIMES_SQUARE) == (TIMES_SQUARE, False)


@pytest.mark.asyncio
async def test_unavailable_falls_back_to_default():
    assert await locate(FixedGeolocation(None), TIMES_SQUARE) == (TIMES_SQUARE, False)


@pytest.mark.asyncio
async def test_timeout_falls_back_to_default():
    assert await locate(SlowGeolocation(), TIMES_SQUARE, timeout_seconds=0.02) == (TIMES_SQUARE, False)


class DeniedGeolocation:
    async def current_position(self) -> LngLat:
        raise PermissionError("User denied Geolocation")


@pytest.mark.asyncio
async def test_permission_denied_falls_back_to_default():
    assert await locate(DeniedGeolocation(), TIMES_SQUARE, 1.0) == (TIMES_SQUARE, False)
