from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple

from ..records import BoundingBox


@dataclass(frozen=True)
class MarkerIcon:
    """Marker image handed to a surface once, at initialization."""
    url: str
    size: Tuple[int, int] = (25, 41)
    anchor: Tuple[int, int] = (12, 41)
    popup_anchor: Tuple[int, int] = (1, -34)


@dataclass
class HostRegion:
    """
    The page region a surface is attached to.

    The layout toggle resizes it in place; surfaces read the current size when
    ``invalidate_size`` runs.
    """
    width: Optional[int] = None  # None: fill the container width
    height: int = 500

    def resize(self, width: Optional[int], height: int) -> None:
        self.width, self.height = width, height


class RenderingSurface(Protocol):
    def initialize(self, host: HostRegion, icon: Optional[MarkerIcon] = None) -> Any: ...
    def place_marker(self, lat: float, lon: float, label: str) -> None: ...
    def remove_all_markers(self) -> None: ...
    def fit_bounds(self, box: BoundingBox, padding_px: int) -> None: ...
    def set_view(self, lat: float, lon: float, zoom: int) -> None: ...
    def invalidate_size(self) -> None: ...
