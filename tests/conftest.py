"""
Shared fixtures.

RecordingSurface stands in for a real map: it keeps the calls it received
and a simple model of the viewport, so tests can check what a recomputation
did without a browser or tile server.
"""

import os

import matplotlib
import pytest

matplotlib.use("Agg")

from coordinate_plotter import CoordinateRecord, IdleScheduler, PlotterConfig, PlotterSession
from coordinate_plotter.surfaces import HostRegion


class RecordingSurface:
    def __init__(self, fail_labels=()):
        self.calls = []
        self.markers = []
        self.tile_layers = 0
        self.init_count = 0
        self.center = None
        self.zoom = None
        self.fail_labels = set(fail_labels)
        self.host = None
        self.icon = None

    def initialize(self, host, icon=None):
        self.calls.append("initialize")
        self.init_count += 1
        self.tile_layers += 1
        self.host = host
        self.icon = icon
        return self

    def place_marker(self, lat, lon, label):
        if label in self.fail_labels:
            raise RuntimeError("marker layer unavailable")
        self.calls.append("place_marker")
        self.markers.append((lat, lon, label))

    def remove_all_markers(self):
        self.calls.append("remove_all_markers")
        self.markers = []

    def fit_bounds(self, box, padding_px):
        self.calls.append("fit_bounds")
        self.center = box.center()
        self.zoom = None
        self.last_fit = (box, padding_px)

    def set_view(self, lat, lon, zoom):
        self.calls.append("set_view")
        self.center = (lat, lon)
        self.zoom = zoom

    def invalidate_size(self):
        self.calls.append("invalidate_size")

    def count(self, name):
        return self.calls.count(name)


@pytest.fixture(autouse=True, scope="session")
def no_config_file():
    """Keep a developer's config file out of the test run."""
    os.environ.pop("COORDINATE_PLOTTER_CONFIG", None)


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def surface_factory():
    return RecordingSurface


@pytest.fixture
def scheduler():
    return IdleScheduler()


@pytest.fixture
def session(surface, scheduler):
    return PlotterSession.create(surface, PlotterConfig(basemap=False), scheduler=scheduler,
                                 host=HostRegion(height=500))


@pytest.fixture
def make_record():
    def _make(lat, lon, label=None):
        return CoordinateRecord(float(lat), float(lon), label or f"{lat}, {lon}")
    return _make
