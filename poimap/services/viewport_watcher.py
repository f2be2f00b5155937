"""
Viewport watcher: debounces map-engine viewport events and decides whether
the settled viewport moved far enough to warrant a refetch.
"""

import logging
from typing import Awaitable, Callable, Optional

from poimap.config.settings import ViewportSettings, get_settings
from poimap.core.scheduling import ScheduledTask
from poimap.models.poi import Viewport

logger = logging.getLogger(__name__)

FetchCallback = Callable[[Viewport], Awaitable[None]]


def moved_significantly(previous: Viewport, current: Viewport, edge_fraction: float) -> bool:
    """
    True unless every edge moved by less than `edge_fraction` of the
    corresponding span of the previous viewport.
    """
    lat_limit = abs(previous.lat_span) * edge_fraction
    lng_limit = abs(previous.lng_span) * edge_fraction
    return not (
        abs(current.south - previous.south) < lat_limit
        and abs(current.north - previous.north) < lat_limit
        and abs(current.west - previous.west) < lng_limit
        and abs(current.east - previous.east) < lng_limit
    )


class ViewportWatcher:
    """
    Turns a burst of viewport events into at most one fetch.

    `last_fetched` holds the viewport used by the last executed fetch; it is
    only updated when a fetch actually executes.
    """

    def __init__(
        self,
        on_fetch: FetchCallback,
        config: Optional[ViewportSettings] = None,
    ):
        self.config = config or get_settings().viewport
        self._on_fetch = on_fetch
        self._timer = ScheduledTask("viewport-debounce")
        self.last_fetched: Optional[Viewport] = None
        self.executed = 0
        self.skipped = 0

    @property
    def pending(self) -> bool:
        return self._timer.pending

    def on_viewport_changed(self, viewport: Viewport) -> None:
        """Schedule a fetch check, replacing any schedule that has not fired yet."""
        self._timer.schedule(self.config.debounce_seconds, self._settled, viewport)

    def should_fetch(self, viewport: Viewport) -> bool:
        if self.last_fetched is None:
            return True
        return moved_significantly(self.last_fetched, viewport, self.config.edge_fraction)

    async def force(self, viewport: Viewport) -> None:
        """Fetch now, bypassing the debounce and the movement threshold."""
        self._timer.cancel()
        await self._execute(viewport)

    def cancel(self) -> None:
        self._timer.cancel()

    async def wait(self) -> None:
        """Wait until the current schedule has fired and its fetch finished."""
        await self._timer.wait()

    async def _settled(self, viewport: Viewport) -> None:
        if not self.should_fetch(viewport):
            self.skipped += 1
            logger.debug("Viewport change below refetch threshold, skipping fetch")
            return
        await self._execute(viewport)

    async def _execute(self, viewport: Viewport) -> None:
        self.last_fetched = viewport
        self.executed += 1
        await self._on_fetch(viewport)
