"""
Interactive Leaflet surface built with folium.

The map object lives for the whole session. Markers are added and removed as
children of the map; viewport commands (fitBounds, setView, invalidateSize)
are emitted as script elements that run, in insertion order, after the map
is created in the browser.
"""
from __future__ import annotations

import json
import logging
from typing import List, Optional

import folium
from branca.element import MacroElement
from jinja2 import Template

from ..records import BoundingBox
from .base import HostRegion, MarkerIcon

logger = logging.getLogger(__name__)

OSM_TILES = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
OSM_ATTRIBUTION = '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'


class MapCall(MacroElement):
    """One call on the Leaflet map object, optionally deferred to the next tick."""
    _template = Template(u"""
        {% macro script(this, kwargs) %}
            {%- if this.deferred %}
            setTimeout(function() {
                {{ this._parent.get_name() }}.{{ this.method }}({{ this.args }});
            }, 0);
            {%- else %}
            {{ this._parent.get_name() }}.{{ this.method }}({{ this.args }});
            {%- endif %}
        {% endmacro %}
        """)

    def __init__(self, method: str, *args, deferred: bool = False):
        super().__init__()
        self._name = 'MapCall'
        self.method = method
        self.args = ', '.join(json.dumps(a) for a in args)
        self.deferred = deferred


class FoliumSurface:
    def __init__(self, tiles: str = OSM_TILES, attribution: str = OSM_ATTRIBUTION,
                 location=(0.0, 0.0), zoom_start: int = 2):
        self.tiles = tiles
        self.attribution = attribution
        self.location = list(location)
        self.zoom_start = zoom_start
        self.map: Optional[folium.Map] = None
        self.host: Optional[HostRegion] = None
        self.icon: Optional[MarkerIcon] = None
        self._view_calls: List[MapCall] = []
        self._resize_call: Optional[MapCall] = None

    # --- lifecycle ---------------------------------------------------

    def initialize(self, host: HostRegion, icon: Optional[MarkerIcon] = None) -> folium.Map:
        if self.map is not None:
            return self.map
        self.host = host
        self.icon = icon
        fmap = folium.Map(location=self.location, zoom_start=self.zoom_start, tiles=None)
        folium.TileLayer(tiles=self.tiles, attr=self.attribution, name='OpenStreetMap').add_to(fmap)
        self.map = fmap
        logger.debug("folium surface initialized (%s)", fmap.get_name())
        return fmap

    def _require_map(self) -> folium.Map:
        if self.map is None:
            raise RuntimeError("surface is not initialized")
        return self.map

    def _detach(self, element) -> None:
        self._require_map()._children.pop(element.get_name(), None)

    def _attach(self, call: MapCall) -> MapCall:
        call.add_to(self._require_map())
        return call

    # --- markers -----------------------------------------------------

    def _marker_icon(self):
        if self.icon is None:
            return None
        # one icon element per marker; folium elements cannot be shared
        return folium.CustomIcon(
            self.icon.url,
            icon_size=self.icon.size,
            icon_anchor=self.icon.anchor,
            popup_anchor=self.icon.popup_anchor,
        )

    def place_marker(self, lat: float, lon: float, label: str) -> None:
        folium.Marker(
            location=[lat, lon],
            popup=folium.Popup(label, parse_html=True),
            icon=self._marker_icon(),
        ).add_to(self._require_map())

    def remove_all_markers(self) -> None:
        fmap = self._require_map()
        for name, child in list(fmap._children.items()):
            if isinstance(child, folium.Marker):
                del fmap._children[name]

    @property
    def markers(self) -> List[folium.Marker]:
        if self.map is None:
            return []
        return [c for c in self.map._children.values() if isinstance(c, folium.Marker)]

    # --- viewport ----------------------------------------------------

    def fit_bounds(self, box: BoundingBox, padding_px: int) -> None:
        # a new fit replaces every earlier viewport command
        for call in self._view_calls:
            self._detach(call)
        self._view_calls = [self._attach(
            MapCall('fitBounds', box.corners(), {'padding': [padding_px, padding_px]}))]

    def set_view(self, lat: float, lon: float, zoom: int) -> None:
        for call in [c for c in self._view_calls if c.method == 'setView']:
            self._detach(call)
            self._view_calls.remove(call)
        self._view_calls.append(self._attach(MapCall('setView', [lat, lon], zoom)))

    def invalidate_size(self) -> None:
        # kept last so it runs after the viewport commands
        if self._resize_call is not None:
            self._detach(self._resize_call)
        self._resize_call = self._attach(MapCall('invalidateSize', deferred=True))

    def render(self) -> folium.Map:
        return self._require_map()
