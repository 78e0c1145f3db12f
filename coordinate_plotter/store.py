from __future__ import annotations

import io
from typing import Iterable, List, Tuple

import pandas as pd

from .records import CoordinateRecord

TABLE_COLUMNS = ['latitude', 'longitude', 'label']


class CoordinateStore:
    """
    Ordered, append-or-clear record set.

    Records are never edited or removed one by one; ``clear`` is the only way
    back to an empty store. Duplicates are kept.
    """

    def __init__(self, records: Iterable[CoordinateRecord] = ()):
        self._records: List[CoordinateRecord] = list(records)

    def __len__(self):
        return len(self._records)

    def append(self, record: CoordinateRecord) -> None:
        self._records.append(record)

    def append_all(self, records: Iterable[CoordinateRecord]) -> None:
        self._records.extend(records)

    def clear(self) -> None:
        self._records.clear()

    def snapshot(self) -> Tuple[CoordinateRecord, ...]:
        return tuple(self._records)

    # --- projections -------------------------------------------------

    def to_frame(self) -> pd.DataFrame:
        """Display table of the current snapshot."""
        rows = [(r.latitude, r.longitude, r.label) for r in self._records]
        return pd.DataFrame(rows, columns=TABLE_COLUMNS)

    def to_csv(self) -> str:
        """Snapshot as CSV text in the same format the importer accepts."""
        buf = io.StringIO()
        self.to_frame().to_csv(buf, index=False)
        return buf.getvalue()
