"""Selection state: at most one selected POI, restroom XOR restaurant."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from poimap.models.poi import Category, PointOfInterest


@dataclass
class SelectionState:
    restroom: Optional[PointOfInterest] = None
    restaurant: Optional[PointOfInterest] = None

    @property
    def selected(self) -> Optional[PointOfInterest]:
        return self.restroom or self.restaurant

    def select(self, poi: PointOfInterest) -> None:
        """Select a POI, clearing any selection in the competing category."""
        if poi.category is Category.RESTROOM:
            self.restroom, self.restaurant = poi, None
        else:
            self.restroom, self.restaurant = None, poi

    def clear(self) -> None:
        self.restroom = None
        self.restaurant = None

    def to_dict(self) -> Dict[str, Any]:
        poi = self.selected
        return {"selected": poi.to_dict() if poi else None}
