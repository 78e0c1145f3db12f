from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

import pandas as pd

from .records import LAT_RANGE, LON_RANGE, CoordinateRecord


@dataclass(frozen=True)
class Rejected:
    """A raw row that failed validation. Callers branch on it; it is never raised."""
    reason: str

    def __bool__(self):
        return False


def _raw_text(raw: Any) -> str:
    if raw is None:
        return ""
    return raw.strip() if isinstance(raw, str) else str(raw)


def _to_float(raw: Any) -> float:
    text = _raw_text(raw)
    if not text:
        return math.nan
    try:
        value = pd.to_numeric(text, errors='coerce')
    except (TypeError, ValueError):
        return math.nan
    return float(value)


def validate(lat_raw: Any, lon_raw: Any, label_raw: Optional[Any] = None) -> Union[CoordinateRecord, Rejected]:
    """Turns a raw (latitude, longitude, label) triple into a record, or a Rejected value."""
    lat, lon = _to_float(lat_raw), _to_float(lon_raw)

    if not math.isfinite(lat) or not math.isfinite(lon):
        return Rejected(f"non-numeric coordinates: {_raw_text(lat_raw)!r}, {_raw_text(lon_raw)!r}")
    if not LAT_RANGE[0] <= lat <= LAT_RANGE[1]:
        return Rejected(f"latitude {lat} outside [-90, 90]")
    if not LON_RANGE[0] <= lon <= LON_RANGE[1]:
        return Rejected(f"longitude {lon} outside [-180, 180]")

    # default label keeps the text as typed, e.g. "12.50" stays "12.50"
    label = _raw_text(label_raw) or f"{_raw_text(lat_raw)}, {_raw_text(lon_raw)}"
    return CoordinateRecord(latitude=lat, longitude=lon, label=label)
