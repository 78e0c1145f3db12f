from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque

logger = logging.getLogger(__name__)


class IdleScheduler:
    """
    Callbacks deferred until the current layout pass has settled.

    The UI calls ``run_pending`` once per pass, after the page layout for that
    pass is in place and before the map is drawn.
    """

    def __init__(self):
        self._pending: Deque[Callable[[], None]] = deque()

    def __len__(self):
        return len(self._pending)

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def run_pending(self) -> int:
        # callbacks scheduled from inside a callback wait for the next pass
        batch, self._pending = self._pending, deque()
        for callback in batch:
            callback()
        if batch:
            logger.debug("ran %d idle callback(s)", len(batch))
        return len(batch)
