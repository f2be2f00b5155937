from pydantic import BaseModel, Field, model_validator
from typing import Optional

from poimap.models.poi import LngLat, Viewport


class LocationIn(BaseModel):
    lng: float = Field(ge=-180.0, le=180.0)
    lat: float = Field(ge=-90.0, le=90.0)

    def to_lnglat(self) -> LngLat:
        return LngLat(lng=self.lng, lat=self.lat)


class ViewportIn(BaseModel):
    south: float = Field(ge=-90.0, le=90.0)
    west: float = Field(ge=-180.0, le=180.0)
    north: float = Field(ge=-90.0, le=90.0)
    east: float = Field(ge=-180.0, le=180.0)
    zoom: float = Field(default=13.0, ge=0.0, le=24.0)

    @model_validator(mode="after")
    def check_bounds(self):
        if self.south > self.north:
            raise ValueError("south must not exceed north")
        if self.west > self.east:
            raise ValueError("west must not exceed east")
        return self

    def to_viewport(self) -> Viewport:
        return Viewport(south=self.south, west=self.west, north=self.north, east=self.east, zoom=self.zoom)


class SessionCreate(BaseModel):
    """Start a map session; without a location the default center is used."""
    location: Optional[LocationIn] = None
    viewport: Optional[ViewportIn] = None


class DirectionsIn(BaseModel):
    """Destination marker; omitted means the current selection."""
    marker_id: Optional[str] = None
