"""
Marker reconciliation.

A MarkerReconciler owns the live marker handles of one category. Each
refresh diffs the new point list against the handle table by POI key:
kept keys reuse their handle (no visual flicker), new keys get a handle,
and handles whose key disappeared are released exactly once.
"""

import itertools
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Set

from poimap.models.events import CameraFocusRequested, DirectionsRequested, EventSink, SelectionChanged
from poimap.models.poi import Category, PoiKey, PointOfInterest
from poimap.services.map_surface import MapSurface

logger = logging.getLogger(__name__)

_marker_ids = itertools.count(1)


def _title(poi: PointOfInterest) -> str:
    if poi.category is Category.RESTAURANT and poi.grade:
        return f"{poi.name} ({poi.grade})"
    return poi.name


class MarkerHandle:
    """Owns one visual marker. Its key and category never change."""

    def __init__(
        self,
        marker_id: str,
        poi: PointOfInterest,
        surface: MapSurface,
        emit: EventSink,
        focus_zoom: float,
    ):
        self.marker_id = marker_id
        self.key: PoiKey = poi.key
        self.category: Category = poi.category
        self._poi = poi
        self._surface = surface
        self._emit = emit
        self._focus_zoom = focus_zoom
        self._released = False

    @property
    def poi(self) -> PointOfInterest:
        return self._poi

    @property
    def released(self) -> bool:
        return self._released

    def activate(self) -> PointOfInterest:
        """Selection binding: read the POI and emit events, never mutate handles."""
        poi = self._poi
        self._emit(SelectionChanged(poi=poi))
        self._emit(CameraFocusRequested(position=poi.position, zoom=self._focus_zoom))
        return poi

    def request_directions(self) -> PointOfInterest:
        poi = self._poi
        self._emit(DirectionsRequested(poi=poi))
        return poi

    def _refresh(self, poi: PointOfInterest) -> None:
        previous = self._poi
        self._poi = poi
        if (previous.lat, previous.lng) != (poi.lat, poi.lng):
            self._surface.move_marker(self.marker_id, poi.position)
        if _title(previous) != _title(poi):
            self._surface.update_marker_title(self.marker_id, _title(poi))

    def _release(self) -> bool:
        if self._released:
            return False
        self._released = True
        self._surface.remove_marker(self.marker_id)
        return True

    def __repr__(self) -> str:
        return f"MarkerHandle({self.marker_id!r}, {self.category.value}, key={self.key})"


@dataclass(frozen=True)
class ReconcileStats:
    created: int = 0
    updated: int = 0
    removed: int = 0


class MarkerReconciler:
    """Creates, updates and releases the marker handles of a single category."""

    def __init__(
        self,
        category: Category,
        surface: MapSurface,
        emit: EventSink,
        focus_zoom: float = 16.0,
    ):
        self.category = category
        self._surface = surface
        self._emit = emit
        self._focus_zoom = focus_zoom
        self._handles: Dict[PoiKey, MarkerHandle] = {}

    @property
    def handles(self) -> Mapping[PoiKey, MarkerHandle]:
        return MappingProxyType(self._handles)

    def find(self, marker_id: str) -> Optional[MarkerHandle]:
        for handle in self._handles.values():
            if handle.marker_id == marker_id:
                return handle
        return None

    def reconcile(self, new_points: Iterable[PointOfInterest]) -> ReconcileStats:
        kept: Set[PoiKey] = set()
        created = updated = 0

        for poi in new_points:
            if poi.category is not self.category:
                raise ValueError(f"{poi.category.value} point passed to {self.category.value} reconciler")

            handle = self._handles.get(poi.key)
            if handle is not None:
                handle._refresh(poi)
                if poi.key not in kept:
                    updated += 1
            else:
                handle = self._create(poi)
                self._handles[poi.key] = handle
                created += 1
            kept.add(poi.key)

        removed = 0
        for key in [k for k in self._handles if k not in kept]:
            if self._handles.pop(key)._release():
                removed += 1

        stats = ReconcileStats(created=created, updated=updated, removed=removed)
        logger.debug(
            f"Reconciled {self.category.value} markers: "
            f"+{stats.created} ~{stats.updated} -{stats.removed}"
        )
        return stats

    def release_all(self) -> int:
        released = 0
        for handle in self._handles.values():
            if handle._release():
                released += 1
        self._handles.clear()
        return released

    def _create(self, poi: PointOfInterest) -> MarkerHandle:
        marker_id = f"{self.category.value}-{next(_marker_ids)}"
        self._surface.add_marker(marker_id, poi.position, kind=self.category.value, title=_title(poi))
        return MarkerHandle(marker_id, poi, self._surface, self._emit, self._focus_zoom)
