from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional

from .models import ScanResult

log = logging.getLogger(__name__)


def sort_results(results: Iterable[ScanResult]) -> List[ScanResult]:
    return sorted(results, key=ScanResult.sort_key)


class ResultCollection:
    """
    Open ports reported by concurrent workers.

    Workers only hold the lock for the append itself, never while probing.
    Once finalize() has run the collection is read-only.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._items: List[ScanResult] = []
        self._final: Optional[List[ScanResult]] = None
        self.dropped = 0

    def add(self, result: ScanResult) -> bool:
        with self._lock:
            if self._final is not None:
                raise RuntimeError("result collection already finalized")
            try:
                self._items.append(result)
            except MemoryError:
                self.dropped += 1
                log.warning("Dropped result %s (out of memory)", result)
                return False
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    @property
    def finalized(self) -> bool:
        return self._final is not None

    def finalize(self) -> List[ScanResult]:
        with self._lock:
            if self._final is None:
                self._final = sort_results(self._items)
            return list(self._final)
