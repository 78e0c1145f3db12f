"""Plotter settings: defaults plus an optional JSON override file."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

from .surfaces.base import MarkerIcon
from .surfaces.folium_surface import OSM_ATTRIBUTION, OSM_TILES

CONFIG_ENV_VAR = "COORDINATE_PLOTTER_CONFIG"


@dataclass
class PlotterConfig:
    fit_padding_px: int = 50
    zoom_to_record_level: int = 10
    initial_center: list = field(default_factory=lambda: [0.0, 0.0])
    initial_zoom: int = 2
    tile_url: str = OSM_TILES
    tile_attribution: str = OSM_ATTRIBUTION
    tiles: str = "OpenStreetMap.Mapnik"  # contextily provider for the PNG export
    basemap: bool = True
    map_height_px: int = 500
    static_width_px: int = 1000
    marker_icon_url: Optional[str] = None

    def marker_icon(self) -> Optional[MarkerIcon]:
        return MarkerIcon(url=self.marker_icon_url) if self.marker_icon_url else None


def read_config_file(path: Optional[str]) -> dict:
    if not path:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(path)
    with config_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_config(path: Optional[str] = None) -> PlotterConfig:
    """Defaults, overridden by the JSON file at ``path`` or at $COORDINATE_PLOTTER_CONFIG."""
    cfg_dict = read_config_file(path or os.environ.get(CONFIG_ENV_VAR))
    known = {f.name for f in fields(PlotterConfig)}
    unknown = sorted(set(cfg_dict) - known)
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(unknown)}")
    return PlotterConfig(**cfg_dict)
