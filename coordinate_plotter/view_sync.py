"""
Keeps a rendering surface consistent with the record set.

Every call to ``ViewSynchronizer.recompute`` is one full pass over a snapshot
of the records: reset markers, place markers, fit bounds, apply the zoom
override, and schedule a size invalidation for after layout. Nothing else
talks to the surface, so the surface never sees a half-finished update.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from .idle import IdleScheduler
from .records import BoundingBox, CoordinateRecord, ViewLayoutState, ZoomIntent
from .surfaces.base import HostRegion, MarkerIcon, RenderingSurface

logger = logging.getLogger(__name__)

FIT_PADDING_PX = 50
ZOOM_TO_RECORD_LEVEL = 10


@dataclass(frozen=True)
class MarkerWarning:
    """A record whose marker the surface refused. The record itself stays in the store."""
    record: CoordinateRecord
    message: str

    def __str__(self):
        return f"Could not place marker for {self.record.label!r}: {self.message}"


@dataclass
class RecomputeResult:
    markers_placed: int = 0
    warnings: List[MarkerWarning] = field(default_factory=list)
    fitted_bounds: Optional[BoundingBox] = None
    view_override: Optional[Tuple[float, float, int]] = None


class ViewSynchronizer:
    def __init__(self, surface: RenderingSurface, host: HostRegion, scheduler: IdleScheduler,
                 icon: Optional[MarkerIcon] = None,
                 padding_px: int = FIT_PADDING_PX, zoom_level: int = ZOOM_TO_RECORD_LEVEL):
        self.surface = surface
        self.host = host
        self.scheduler = scheduler
        self.icon = icon
        self.padding_px = padding_px
        self.zoom_level = zoom_level
        self.handle: Any = None
        self.initialized = False

    def _ensure_surface(self) -> None:
        if not self.initialized:
            self.handle = self.surface.initialize(self.host, self.icon)
            self.initialized = True
            logger.debug("rendering surface initialized")

    def recompute(self, records: Sequence[CoordinateRecord], zoom_intent: ZoomIntent = None,
                  layout: Optional[ViewLayoutState] = None) -> RecomputeResult:
        """
        Brings the surface in line with ``records``.

        ``records`` is copied first; later changes to the caller's sequence do
        not affect this pass. ``layout`` only matters through the host region
        size, which the resize step reads once layout has settled.
        """
        snapshot = tuple(records)
        self._ensure_surface()
        result = RecomputeResult()

        self.surface.remove_all_markers()

        placed: List[CoordinateRecord] = []
        for record in snapshot:
            try:
                self.surface.place_marker(record.latitude, record.longitude, record.label)
            except Exception as e:
                warning = MarkerWarning(record, str(e))
                logger.warning(str(warning))
                result.warnings.append(warning)
                continue
            placed.append(record)
        result.markers_placed = len(placed)

        if placed:
            box = BoundingBox.around(placed)
            self.surface.fit_bounds(box, self.padding_px)
            result.fitted_bounds = box

        if zoom_intent is not None:
            self.surface.set_view(zoom_intent.latitude, zoom_intent.longitude, self.zoom_level)
            result.view_override = (zoom_intent.latitude, zoom_intent.longitude, self.zoom_level)

        self.scheduler.call_soon(self.surface.invalidate_size)

        logger.debug(
            "recompute: %d record(s), %d marker(s), fit=%s, override=%s, expanded=%s",
            len(snapshot), result.markers_placed, result.fitted_bounds is not None,
            result.view_override is not None, layout.expanded if layout else None,
        )
        return result
