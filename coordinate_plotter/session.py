"""
One user's plotting session.

``PlotterSession`` owns the coordinate store, the zoom intent, the layout
state and the most recent error message, and runs a view recomputation after
every change to any of them. Errors from parsing, validation and file reads
stop here and become ``last_error``; nothing raised below this layer reaches
the UI.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .config import PlotterConfig
from .csv_parser import parse_csv
from .errors import CoordinatePlotterError, FileReadError, MissingColumnsError
from .file_reader import ReadResult
from .idle import IdleScheduler
from .records import CoordinateRecord, ViewLayoutState, ZoomIntent
from .store import CoordinateStore
from .surfaces.base import HostRegion, RenderingSurface
from .validator import Rejected, validate
from .view_sync import MarkerWarning, RecomputeResult, ViewSynchronizer

logger = logging.getLogger(__name__)

MANUAL_ENTRY_INVALID = "Invalid coordinates. Please check your input."
NO_VALID_ROWS = "CSV did not contain any valid coordinates."


@dataclass(frozen=True)
class ImportSummary:
    accepted: int
    rejected: int

    @property
    def ok(self) -> bool:
        return self.accepted > 0

    def message(self) -> str:
        msg = f"Added {self.accepted} coordinate{'s' if self.accepted != 1 else ''}"
        if self.rejected:
            msg += f", skipped {self.rejected} invalid row{'s' if self.rejected != 1 else ''}"
        return msg + "."


class PlotterSession:
    def __init__(self, synchronizer: ViewSynchronizer, store: Optional[CoordinateStore] = None):
        self.sync = synchronizer
        self.store = store if store is not None else CoordinateStore()
        self.zoom_intent: ZoomIntent = None
        self.layout = ViewLayoutState()
        self.last_error: Optional[str] = None
        self.last_summary: Optional[ImportSummary] = None
        self.last_result: Optional[RecomputeResult] = None

    @classmethod
    def create(cls, surface: RenderingSurface, config: PlotterConfig,
               scheduler: Optional[IdleScheduler] = None,
               host: Optional[HostRegion] = None) -> "PlotterSession":
        sync = ViewSynchronizer(
            surface,
            host if host is not None else HostRegion(height=config.map_height_px),
            scheduler if scheduler is not None else IdleScheduler(),
            icon=config.marker_icon(),
            padding_px=config.fit_padding_px,
            zoom_level=config.zoom_to_record_level,
        )
        return cls(sync)

    @property
    def records(self):
        return self.store.snapshot()

    @property
    def warnings(self) -> List[MarkerWarning]:
        return list(self.last_result.warnings) if self.last_result else []

    def recompute(self) -> Optional[RecomputeResult]:
        """Redraws the surface. A surface failure becomes ``last_error``; the data change stands."""
        try:
            self.last_result = self.sync.recompute(self.store.snapshot(), self.zoom_intent, self.layout)
        except Exception as e:
            logger.exception("map update failed")
            self.last_error = f"Error updating map: {e}"
            return None
        return self.last_result

    # --- manual entry ------------------------------------------------

    def add_manual(self, lat_text: str, lon_text: str, label_text: str = "") -> bool:
        """Adds one typed coordinate. On failure the caller keeps the form fields as they are."""
        record = validate(lat_text, lon_text, label_text)
        if isinstance(record, Rejected):
            logger.debug("manual entry rejected: %s", record.reason)
            self.last_error = MANUAL_ENTRY_INVALID
            return False
        self.store.append(record)
        self.zoom_intent = None
        self.last_error = None
        self.recompute()
        return True

    def clear_all(self) -> None:
        self.store.clear()
        self.zoom_intent = None
        self.last_error = None
        self.last_summary = None
        self.recompute()

    # --- bulk import -------------------------------------------------

    def _import_rows(self, rows) -> ImportSummary:
        accepted: List[CoordinateRecord] = []
        rejected = 0
        for row in rows:
            record = validate(row.get('latitude'), row.get('longitude'), row.get('label'))
            if isinstance(record, Rejected):
                rejected += 1
                continue
            accepted.append(record)

        self.store.append_all(accepted)
        self.zoom_intent = accepted[0] if accepted else None
        summary = ImportSummary(accepted=len(accepted), rejected=rejected)
        self.last_summary = summary
        self.last_error = None if summary.ok else NO_VALID_ROWS
        logger.info("CSV import: %d accepted, %d rejected", summary.accepted, summary.rejected)
        self.recompute()
        return summary

    def import_text(self, text: str, source: str = "CSV") -> Optional[ImportSummary]:
        """Imports pasted CSV text. Returns None when the whole import was aborted."""
        try:
            rows = parse_csv(text)
        except MissingColumnsError as e:
            self.last_error = str(e)
            return None
        except CoordinatePlotterError as e:
            self.last_error = f"Error parsing {source}: {e}"
            return None
        except Exception as e:
            logger.exception("unexpected CSV parser failure")
            self.last_error = f"Error parsing {source}: {e}"
            return None
        return self._import_rows(rows)

    def import_file(self, name: str, data: bytes) -> Optional[ImportSummary]:
        try:
            if not name.lower().endswith('.csv'):
                raise FileReadError(f"Only .csv files are accepted, got {name!r}.")
            try:
                text = data.decode('utf-8-sig')
            except UnicodeDecodeError as e:
                raise FileReadError(f"Error reading CSV file {name!r}: not UTF-8 text ({e.reason}).") from e
        except FileReadError as e:
            self.last_error = str(e)
            return None
        return self.import_text(text, source="CSV file")

    def apply_read(self, result: ReadResult) -> Optional[ImportSummary]:
        """Continuation for a background file read."""
        if result.error is not None:
            self.last_error = str(result.error)
            return None
        return self.import_file(result.name, result.data)

    # --- layout ------------------------------------------------------

    def set_expanded(self, expanded: bool) -> None:
        if expanded == self.layout.expanded:
            return
        self.layout = ViewLayoutState(expanded=expanded)
        self.recompute()

    def toggle_expanded(self) -> None:
        self.set_expanded(not self.layout.expanded)
