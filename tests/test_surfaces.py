"""Real rendering surfaces driven through the view synchronizer."""

import pytest
import pyproj

from coordinate_plotter import BoundingBox, CoordinateRecord, IdleScheduler, ViewSynchronizer
from coordinate_plotter.surfaces import FoliumSurface, HostRegion, MarkerIcon, StaticMapSurface

TO_MERCATOR = pyproj.Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


def _records():
    return [
        CoordinateRecord(48.85, 2.35, "Paris"),
        CoordinateRecord(51.5, -0.12, "London"),
        CoordinateRecord(40.4, -3.7, "Madrid"),
    ]


class TestFoliumSurface:
    def test_tile_layer_attached_once(self):
        import folium

        surface = FoliumSurface()
        sync = ViewSynchronizer(surface, HostRegion(), IdleScheduler())
        sync.recompute(_records())
        sync.recompute(_records())
        tiles = [c for c in surface.map._children.values() if isinstance(c, folium.TileLayer)]
        assert len(tiles) == 1

    def test_markers_replaced_not_accumulated(self):
        surface = FoliumSurface()
        sync = ViewSynchronizer(surface, HostRegion(), IdleScheduler())
        sync.recompute(_records())
        sync.recompute(_records()[:1])
        assert len(surface.markers) == 1

    def test_rendered_script_orders_fit_before_view_and_resize_last(self):
        surface = FoliumSurface()
        scheduler = IdleScheduler()
        sync = ViewSynchronizer(surface, HostRegion(), scheduler)
        records = _records()
        sync.recompute(records, zoom_intent=records[0])
        scheduler.run_pending()
        html = surface.render().get_root().render()
        assert html.index(".fitBounds(") < html.index(".setView(") < html.index(".invalidateSize(")
        assert "[48.85, 2.35], 10" in html
        assert '"padding": [50, 50]' in html

    def test_new_fit_replaces_old_view_calls(self):
        surface = FoliumSurface()
        sync = ViewSynchronizer(surface, HostRegion(), IdleScheduler())
        records = _records()
        sync.recompute(records, zoom_intent=records[0])
        sync.recompute(records)
        html = surface.render().get_root().render()
        assert html.count(".fitBounds(") == 1
        assert ".setView(" not in html

    def test_custom_icon(self):
        surface = FoliumSurface()
        sync = ViewSynchronizer(surface, HostRegion(), IdleScheduler(),
                                icon=MarkerIcon(url="https://example.com/marker.svg"))
        sync.recompute(_records()[:2])
        html = surface.render().get_root().render()
        assert html.count("https://example.com/marker.svg") == 2

    def test_uninitialized_surface_refuses_markers(self):
        with pytest.raises(RuntimeError):
            FoliumSurface().place_marker(1, 2, "x")


class TestStaticMapSurface:
    @pytest.fixture
    def static(self):
        import matplotlib.pyplot as plt

        surface = StaticMapSurface(basemap=False)
        yield surface
        if surface.fig is not None:
            plt.close(surface.fig)

    def test_zoom_override_centers_on_record(self, static):
        scheduler = IdleScheduler()
        sync = ViewSynchronizer(static, HostRegion(width=800, height=500), scheduler)
        records = _records()
        sync.recompute(records, zoom_intent=records[0])
        scheduler.run_pending()
        lat, lon = static.center()
        assert lat == pytest.approx(48.85, abs=1e-6)
        assert lon == pytest.approx(2.35, abs=1e-6)
        assert static.zoom() == pytest.approx(10)

    def test_fit_keeps_every_marker_inside_padded_view(self, static):
        sync = ViewSynchronizer(static, HostRegion(width=800, height=500), IdleScheduler())
        sync.recompute(_records())
        ax = static.ax
        for lat, lon, _ in static.markers:
            x, y = ax.transData.transform(TO_MERCATOR.transform(lon, lat))
            bbox = ax.get_window_extent()
            assert bbox.x0 + 49 <= x <= bbox.x1 - 49
            assert bbox.y0 + 49 <= y <= bbox.y1 - 49

    def test_single_point_fit_uses_closest_zoom(self, static):
        static.initialize(HostRegion(width=400, height=400))
        static.fit_bounds(BoundingBox(10, 10, 10, 10), 50)
        assert static.zoom() == pytest.approx(18)

    def test_remove_markers_leaves_other_artists(self, static):
        sync = ViewSynchronizer(static, HostRegion(width=400, height=300), IdleScheduler())
        sync.recompute(_records())
        assert len(static.ax.lines) == 3
        sync.recompute([])
        assert len(static.ax.lines) == 0
        assert static.markers == []

    def test_resize_keeps_center_and_scale(self, static):
        host = HostRegion(width=400, height=300)
        scheduler = IdleScheduler()
        sync = ViewSynchronizer(static, host, scheduler)
        sync.recompute(_records())
        scheduler.run_pending()
        center, zoom = static.center(), static.zoom()
        host.resize(1200, 300)
        static.invalidate_size()
        assert static.fig.get_size_inches()[0] == pytest.approx(12)
        assert static.center() == pytest.approx(center)
        assert static.zoom() == pytest.approx(zoom)

    def test_png_export(self, static):
        scheduler = IdleScheduler()
        sync = ViewSynchronizer(static, HostRegion(width=400, height=300), scheduler)
        sync.recompute(_records())
        scheduler.run_pending()
        assert static.to_png().startswith(b"\x89PNG")
