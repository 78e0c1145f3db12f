"""
Background reads of dropped files.

Reading happens on a worker thread; results are handed back to the UI thread
through ``drain``, in the order the reads finished. A result is dropped when
a read submitted later has already been delivered.
"""
from __future__ import annotations

import logging
import os
import queue
import weakref
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, List, Optional

from .errors import FileReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadResult:
    ticket: int
    name: str
    data: Optional[bytes] = None
    error: Optional[FileReadError] = None


def read_source(source: Any) -> bytes:
    """Bytes from raw bytes, a path, or a file-like object such as a Streamlit upload."""
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        with open(source, 'rb') as f:
            return f.read()
    if hasattr(source, 'read'):
        if hasattr(source, 'seek'):
            source.seek(0)  # Reset file pointer
        data = source.read()
        return data.encode('utf-8') if isinstance(data, str) else data
    raise TypeError(f"cannot read {type(source).__name__}")


class FileReader:
    def __init__(self, executor: Optional[Executor] = None):
        if executor is None:
            executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix='csv-read')
            # the pool goes away with the reader, e.g. when a browser session ends
            self._finalizer = weakref.finalize(self, executor.shutdown, wait=False)
        else:
            self._finalizer = None
        self._executor = executor
        self._completed: "queue.Queue[tuple]" = queue.Queue()
        self._next_ticket = 0
        self._delivered = -1
        self._pending = 0

    @property
    def pending(self) -> int:
        return self._pending

    def submit(self, name: str, source: Any) -> int:
        ticket = self._next_ticket
        self._next_ticket += 1
        self._pending += 1
        future = self._executor.submit(read_source, source)
        future.add_done_callback(lambda f: self._completed.put((ticket, name, f)))
        return ticket

    def _result(self, ticket: int, name: str, future: Future) -> ReadResult:
        try:
            return ReadResult(ticket, name, data=future.result())
        except (OSError, TypeError, ValueError) as e:
            return ReadResult(ticket, name, error=FileReadError(f"Error reading CSV file {name!r}: {e}"))

    def drain(self, wait: bool = False, timeout: Optional[float] = None) -> List[ReadResult]:
        """
        Returns finished reads in completion order.

        With ``wait=True`` blocks until every submitted read has finished.
        """
        results: List[ReadResult] = []
        while self._pending:
            try:
                ticket, name, future = self._completed.get(block=wait, timeout=timeout)
            except queue.Empty:
                break
            self._pending -= 1
            if ticket < self._delivered:
                logger.info("dropping read of %r, superseded by a newer file", name)
                continue
            self._delivered = ticket
            results.append(self._result(ticket, name, future))
        return results

    def shutdown(self) -> None:
        if self._finalizer is not None:
            self._finalizer()
        else:
            self._executor.shutdown(wait=False)
