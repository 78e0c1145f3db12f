"""Coordinate ingestion and map-view synchronization."""
from .config import PlotterConfig, load_config
from .csv_parser import parse_csv
from .errors import CoordinatePlotterError, FileReadError, MissingColumnsError, ParseError
from .file_reader import FileReader, ReadResult
from .idle import IdleScheduler
from .records import BoundingBox, CoordinateRecord, ViewLayoutState
from .session import ImportSummary, PlotterSession
from .store import CoordinateStore
from .validator import Rejected, validate
from .view_sync import MarkerWarning, RecomputeResult, ViewSynchronizer

__version__ = "0.1.0"
