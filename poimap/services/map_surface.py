"""
Map/render engine capability.

The engine depends only on the MapSurface protocol. HeadlessMapSurface
keeps the map state in memory, with a bounded log of recent operations;
the HTTP surface serves its state to the thin client that does the actual
drawing, and tests inspect it directly.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Protocol

from poimap.models.directions import Route
from poimap.models.poi import LngLat, Viewport


ROUTE_LAYER_ID = "route"
USER_MARKER_ID = "user-location"
# Most recent surface operations kept for inspection.
OPERATION_LOG_SIZE = 256


class MapSurface(Protocol):
    """Operations the engine needs from a map/render engine."""

    def viewport(self) -> Optional[Viewport]: ...

    def add_marker(self, marker_id: str, position: LngLat, *, kind: str, title: str) -> None: ...

    def remove_marker(self, marker_id: str) -> None: ...

    def move_marker(self, marker_id: str, position: LngLat) -> None: ...

    def update_marker_title(self, marker_id: str, title: str) -> None: ...

    def fly_to(self, center: LngLat, zoom: float) -> None: ...

    def show_route(self, layer_id: str, route: Route) -> None: ...

    def remove_route(self, layer_id: str) -> None: ...

    def raise_layer(self, layer_id: str) -> None: ...

    def set_layer_visibility(self, layer_id: str, visible: bool) -> None: ...

    def set_control_icon(self, control: str, icon: str) -> None: ...


@dataclass
class MarkerState:
    marker_id: str
    position: LngLat
    kind: str
    title: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "marker_id": self.marker_id,
            "position": self.position.as_tuple(),
            "kind": self.kind,
            "title": self.title,
        }


@dataclass
class HeadlessMapSurface:
    """In-memory MapSurface; layer order is bottom-to-top."""

    current_viewport: Optional[Viewport] = None
    markers: Dict[str, MarkerState] = field(default_factory=dict)
    camera_center: Optional[LngLat] = None
    camera_zoom: Optional[float] = None
    layers: List[str] = field(default_factory=lambda: ["base", "poi-labels"])
    hidden_layers: set = field(default_factory=set)
    routes: Dict[str, Route] = field(default_factory=dict)
    control_icons: Dict[str, str] = field(default_factory=dict)
    operations: Deque[tuple] = field(
        default_factory=lambda: deque(maxlen=OPERATION_LOG_SIZE), repr=False
    )

    def viewport(self) -> Optional[Viewport]:
        return self.current_viewport

    def set_viewport(self, viewport: Viewport) -> None:
        self.current_viewport = viewport

    def add_marker(self, marker_id: str, position: LngLat, *, kind: str, title: str) -> None:
        if marker_id in self.markers:
            raise ValueError(f"Marker '{marker_id}' already exists")
        self.markers[marker_id] = MarkerState(marker_id=marker_id, position=position, kind=kind, title=title)
        self.operations.append(("add_marker", marker_id))

    def remove_marker(self, marker_id: str) -> None:
        if self.markers.pop(marker_id, None) is None:
            raise KeyError(marker_id)
        self.operations.append(("remove_marker", marker_id))

    def move_marker(self, marker_id: str, position: LngLat) -> None:
        self.markers[marker_id].position = position
        self.operations.append(("move_marker", marker_id))

    def update_marker_title(self, marker_id: str, title: str) -> None:
        self.markers[marker_id].title = title
        self.operations.append(("update_marker_title", marker_id))

    def fly_to(self, center: LngLat, zoom: float) -> None:
        self.camera_center = center
        self.camera_zoom = zoom
        self.operations.append(("fly_to", center.as_tuple(), zoom))

    def show_route(self, layer_id: str, route: Route) -> None:
        self.routes[layer_id] = route
        if layer_id not in self.layers:
            self.layers.append(layer_id)
        self.operations.append(("show_route", layer_id))

    def remove_route(self, layer_id: str) -> None:
        self.routes.pop(layer_id, None)
        if layer_id in self.layers:
            self.layers.remove(layer_id)
        self.operations.append(("remove_route", layer_id))

    def raise_layer(self, layer_id: str) -> None:
        if layer_id not in self.layers:
            raise KeyError(layer_id)
        self.layers.remove(layer_id)
        self.layers.append(layer_id)
        self.operations.append(("raise_layer", layer_id))

    def set_layer_visibility(self, layer_id: str, visible: bool) -> None:
        if visible:
            self.hidden_layers.discard(layer_id)
        else:
            self.hidden_layers.add(layer_id)
        self.operations.append(("set_layer_visibility", layer_id, visible))

    def set_control_icon(self, control: str, icon: str) -> None:
        self.control_icons[control] = icon
        self.operations.append(("set_control_icon", control, icon))

    def count(self, operation: str) -> int:
        return sum(1 for op in self.operations if op[0] == operation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "viewport": self.current_viewport.to_dict() if self.current_viewport else None,
            "camera": {
                "center": self.camera_center.as_tuple() if self.camera_center else None,
                "zoom": self.camera_zoom,
            },
            "markers": [m.to_dict() for m in self.markers.values()],
            "layers": list(self.layers),
            "hidden_layers": sorted(self.hidden_layers),
            "routes": {layer_id: r.to_dict() for layer_id, r in self.routes.items()},
            "control_icons": dict(self.control_icons),
        }
