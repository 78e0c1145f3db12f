"""
Static map surface: a matplotlib figure in Web Mercator with a contextily basemap.

Used for the PNG export. The viewport is kept as a Web Mercator center plus a
resolution in metres per pixel, the same way a slippy map keeps center and
zoom, so a resize keeps the center and scale and only changes the extent.
"""
from __future__ import annotations

import io
import logging
from typing import List, Optional, Tuple

import contextily as ctx
import geopandas as gpd
import matplotlib.pyplot as plt
import numpy as np
import pyproj

from ..records import BoundingBox
from .base import HostRegion, MarkerIcon

logger = logging.getLogger(__name__)

INITIAL_RES = 156543.03392804097  # m/px at z=0 (3857, 256px)
MAX_ZOOM = 18
DEFAULT_WIDTH_PX = 1000
MAX_LAT = 85.0511287798  # Web Mercator limit

_to_merc = pyproj.Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)
_to_geo = pyproj.Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


def _clamp_lat(lat: float) -> float:
    return max(-MAX_LAT, min(MAX_LAT, lat))


class StaticMapSurface:
    def __init__(self, tiles: str = "OpenStreetMap.Mapnik", basemap: bool = True,
                 dpi: int = 100, location=(0.0, 0.0), zoom_start: int = 2):
        self.tiles = tiles
        self.basemap = basemap
        self.dpi = dpi
        self.location = tuple(location)
        self.zoom_start = zoom_start
        self.fig = None
        self.ax = None
        self.host: Optional[HostRegion] = None
        self.icon: Optional[MarkerIcon] = None
        self.basemap_error: Optional[str] = None
        self._provider = None
        self._basemap_artists: List = []
        self._marker_artists: List = []
        self._markers: List[Tuple[float, float, str]] = []
        self._center_xy: Tuple[float, float] = (0.0, 0.0)
        self._m_per_px = INITIAL_RES / (2 ** zoom_start)

    # --- lifecycle ---------------------------------------------------

    def _resolve(self):
        if self.tiles.startswith(("http://", "https://")):
            return self.tiles
        prov = ctx.providers
        for p in self.tiles.split("."):
            if p: prov = getattr(prov, p)
        return prov

    def _pixel_size(self) -> Tuple[int, int]:
        host = self.host or HostRegion()
        return (host.width or DEFAULT_WIDTH_PX, host.height)

    def initialize(self, host: HostRegion, icon: Optional[MarkerIcon] = None):
        if self.fig is not None:
            return self.fig
        self.host = host
        self.icon = icon
        w_px, h_px = self._pixel_size()
        self.fig, self.ax = plt.subplots(figsize=(w_px / self.dpi, h_px / self.dpi), dpi=self.dpi)
        self.fig.subplots_adjust(left=0, right=1, bottom=0, top=1)
        self.ax.set_autoscale_on(False)
        if self.basemap:
            self._provider = self._resolve()
        lat, lon = self.location
        self.set_view(lat, lon, self.zoom_start)
        return self.fig

    def _require_axes(self):
        if self.ax is None:
            raise RuntimeError("surface is not initialized")
        return self.ax

    # --- markers -----------------------------------------------------

    def place_marker(self, lat: float, lon: float, label: str) -> None:
        ax = self._require_axes()
        x, y = _to_merc.transform(lon, _clamp_lat(lat))
        line, = ax.plot(x, y, marker='v', markersize=10, mec='black', mfc='#2a81cb', zorder=6)
        text = ax.annotate(label, (x, y), xytext=(5, 8), textcoords='offset points', fontsize=8,
                           bbox=dict(boxstyle="round,pad=0.25", fc="white", ec="gray", alpha=0.85),
                           zorder=7)
        self._marker_artists.extend([line, text])
        self._markers.append((lat, lon, label))

    def remove_all_markers(self) -> None:
        # basemap images stay; only marker artists go
        for artist in self._marker_artists:
            artist.remove()
        self._marker_artists = []
        self._markers = []

    @property
    def markers(self) -> List[Tuple[float, float, str]]:
        return list(self._markers)

    # --- viewport ----------------------------------------------------

    def _apply_extent(self) -> None:
        ax = self._require_axes()
        w_px, h_px = self._pixel_size()
        cx, cy = self._center_xy
        half_w, half_h = w_px * 0.5 * self._m_per_px, h_px * 0.5 * self._m_per_px
        ax.set_xlim(cx - half_w, cx + half_w)
        ax.set_ylim(cy - half_h, cy + half_h)

    def fit_bounds(self, box: BoundingBox, padding_px: int) -> None:
        corners = gpd.GeoSeries(
            gpd.points_from_xy([box.west, box.east], [_clamp_lat(box.south), _clamp_lat(box.north)]), crs="EPSG:4326"
        ).to_crs(epsg=3857)
        minx, miny, maxx, maxy = corners.total_bounds
        w_px, h_px = self._pixel_size()
        avail_w, avail_h = max(1, w_px - 2 * padding_px), max(1, h_px - 2 * padding_px)
        # a single point fits at the closest zoom
        floor = INITIAL_RES / (2 ** MAX_ZOOM)
        self._m_per_px = max((maxx - minx) / avail_w, (maxy - miny) / avail_h, floor)
        self._center_xy = ((minx + maxx) * 0.5, (miny + maxy) * 0.5)
        self._apply_extent()

    def set_view(self, lat: float, lon: float, zoom: int) -> None:
        self._center_xy = _to_merc.transform(lon, _clamp_lat(lat))
        self._m_per_px = INITIAL_RES / (2 ** zoom)
        self._apply_extent()

    def center(self) -> Tuple[float, float]:
        """Current viewport center as (lat, lon)."""
        lon, lat = _to_geo.transform(*self._center_xy)
        return lat, lon

    def zoom(self) -> float:
        return float(np.log2(INITIAL_RES / self._m_per_px))

    # --- drawing -----------------------------------------------------

    def _refresh_basemap(self) -> None:
        for artist in self._basemap_artists:
            artist.remove()
        self._basemap_artists = []
        if self._provider is None:
            return
        ax = self._require_axes()
        before = list(ax.images)
        try:
            ctx.add_basemap(ax, crs="EPSG:3857", source=self._provider, zoom='auto',
                            attribution_size=6, reset_extent=True)
            self.basemap_error = None
        except Exception as e:
            self.basemap_error = f"Could not add basemap: {e}"
            logger.warning(self.basemap_error)
        self._basemap_artists = [img for img in ax.images if img not in before]
        for img in self._basemap_artists:
            img.set_zorder(0)

    def _label_axes(self, num_ticks: int = 7) -> None:
        ax = self._require_axes()
        (x0, x1), (y0, y1) = ax.get_xlim(), ax.get_ylim()
        plot_xticks = np.linspace(x0, x1, num=num_ticks)
        plot_yticks = np.linspace(y0, y1, num=num_ticks)
        xticks_lon = [_to_geo.transform(x, y0)[0] for x in plot_xticks]
        yticks_lat = [_to_geo.transform(x0, y)[1] for y in plot_yticks]
        ax.set_xticks(plot_xticks); ax.set_xticklabels([f"{lon:.2f}°" for lon in xticks_lon], fontsize=7)
        ax.set_yticks(plot_yticks); ax.set_yticklabels([f"{lat:.2f}°" for lat in yticks_lat], fontsize=7)
        ax.grid(True, linestyle=":", linewidth=0.5, alpha=0.5, color='gray')

    def invalidate_size(self) -> None:
        """Resizes the figure to the host region and queues a redraw."""
        ax = self._require_axes()
        w_px, h_px = self._pixel_size()
        self.fig.set_size_inches(w_px / self.dpi, h_px / self.dpi)
        self._apply_extent()
        if self.basemap:
            self._refresh_basemap()
        self._label_axes()
        ax.figure.canvas.draw_idle()

    def to_png(self, dpi: int = 150) -> bytes:
        img_bytes = io.BytesIO()
        self.fig.savefig(img_bytes, format='png', dpi=dpi, bbox_inches='tight')
        img_bytes.seek(0)
        return img_bytes.getvalue()
