"""
Unit tests for viewport debounce and the refetch threshold
"""
import asyncio

import pytest
from unittest.mock import AsyncMock

from helpers import fast_viewport_settings
from poimap.models.poi import Viewport
from poimap.services.viewport_watcher import ViewportWatcher, moved_significantly

BASE = Viewport(south=40.70, west=-74.00, north=40.80, east=-73.90, zoom=13)


def shifted(viewport: Viewport, dlat: float = 0.0, dlng: float = 0.0) -> Viewport:
    return Viewport(
        south=viewport.south + dlat,
        west=viewport.west + dlng,
        north=viewport.north + dlat,
        east=viewport.east + dlng,
        zoom=viewport.zoom,
    )


def test_small_pan_is_not_significant():
    # Spans are 0.1 degrees; a 0.005 move is 5% of the span.
    assert not moved_significantly(BASE, shifted(BASE, dlat=0.005, dlng=-0.005), 0.10)


def test_large_pan_is_significant():
    assert moved_significantly(BASE, shifted(BASE, dlng=0.02), 0.10)


def test_zoom_out_moving_edges_is_significant():
    zoomed = Viewport(south=40.65, west=-74.05, north=40.85, east=-73.85, zoom=12)

    assert moved_significantly(BASE, zoomed, 0.10)


def test_unchanged_viewport_is_not_significant():
    assert not moved_significantly(BASE, BASE, 0.10)


@pytest.mark.asyncio
async def test_first_settle_always_fetches():
    on_fetch = AsyncMock()
    watcher = ViewportWatcher(on_fetch, fast_viewport_settings())

    watcher.on_viewport_changed(BASE)
    await watcher.wait()

    on_fetch.assert_awaited_once_with(BASE)
    assert watcher.last_fetched == BASE


@pytest.mark.asyncio
async def test_burst_collapses_to_one_fetch_with_latest_viewport():
    on_fetch = AsyncMock()
    watcher = ViewportWatcher(on_fetch, fast_viewport_settings(0.05))

    for i in range(5):
        watcher.on_viewport_changed(shifted(BASE, dlng=i * 0.05))
        await asyncio.sleep(0.005)
    await watcher.wait()

    on_fetch.assert_awaited_once_with(shifted(BASE, dlng=0.2))


@pytest.mark.asyncio
async def test_small_move_after_fetch_is_skipped():
    on_fetch = AsyncMock()
    watcher = ViewportWatcher(on_fetch, fast_viewport_settings())
    await watcher.force(BASE)

    watcher.on_viewport_changed(shifted(BASE, dlat=0.001))
    await watcher.wait()

    assert on_fetch.await_count == 1
    assert watcher.skipped == 1
    # The last fetched viewport only moves when a fetch executes.
    assert watcher.last_fetched == BASE


@pytest.mark.asyncio
async def test_significant_move_after_fetch_refetches():
    on_fetch = AsyncMock()
    watcher = ViewportWatcher(on_fetch, fast_viewport_settings())
    await watcher.force(BASE)

    moved = shifted(BASE, dlat=0.05)
    watcher.on_viewport_changed(moved)
    await watcher.wait()

    assert on_fetch.await_count == 2
    assert watcher.last_fetched == moved


@pytest.mark.asyncio
async def test_force_bypasses_threshold_and_cancels_pending():
    on_fetch = AsyncMock()
    watcher = ViewportWatcher(on_fetch, fast_viewport_settings(0.05))
    await watcher.force(BASE)

    watcher.on_viewport_changed(shifted(BASE, dlng=0.5))
    await watcher.force(BASE)
    await asyncio.sleep(0.08)

    assert on_fetch.await_count == 2
    assert not watcher.pending


@pytest.mark.asyncio
async def test_cancel_drops_pending_schedule():
    on_fetch = AsyncMock()
    watcher = ViewportWatcher(on_fetch, fast_viewport_settings())

    watcher.on_viewport_changed(BASE)
    watcher.cancel()
    await asyncio.sleep(0.03)

    on_fetch.assert_not_awaited()
