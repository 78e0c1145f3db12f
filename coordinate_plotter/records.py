from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from shapely.geometry import MultiPoint

LAT_RANGE = (-90.0, 90.0)
LON_RANGE = (-180.0, 180.0)


@dataclass(frozen=True)
class CoordinateRecord:
    """One validated (latitude, longitude, label) point."""
    latitude: float
    longitude: float
    label: str


# The view centers on this record at close zoom; None means no override.
ZoomIntent = Optional[CoordinateRecord]


@dataclass(frozen=True)
class ViewLayoutState:
    expanded: bool = False


@dataclass(frozen=True)
class BoundingBox:
    """Smallest lat/lon rectangle covering a set of points."""
    south: float
    west: float
    north: float
    east: float

    @classmethod
    def around(cls, records: Iterable[CoordinateRecord]) -> "BoundingBox":
        points = [(r.longitude, r.latitude) for r in records]
        if not points:
            raise ValueError("cannot bound an empty set of records")
        west, south, east, north = MultiPoint(points).bounds
        return cls(south=south, west=west, north=north, east=east)

    def corners(self):
        """[[south, west], [north, east]], the order Leaflet expects."""
        return [[self.south, self.west], [self.north, self.east]]

    def center(self) -> Tuple[float, float]:
        return ((self.south + self.north) * 0.5, (self.west + self.east) * 0.5)
