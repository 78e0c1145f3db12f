from .base import HostRegion, MarkerIcon, RenderingSurface
from .folium_surface import FoliumSurface
from .static_surface import StaticMapSurface

__all__ = ["HostRegion", "MarkerIcon", "RenderingSurface", "FoliumSurface", "StaticMapSurface"]
