from __future__ import annotations

"""In-process ledger of workload results.

Every /workout appends one item. Nothing evicts items except a full clear
triggered by the working-set threshold, so without that valve the ledger
grows for the lifetime of the process.
"""

import gc
import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar


logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD_MB = 110

T = TypeVar("T")


class MemoryLedger(Generic[T]):
    def __init__(self, reclaim: Optional[Callable[[], object]] = None) -> None:
        self._items: List[T] = []
        self._lock = threading.Lock()
        self._reclaim = reclaim or gc.collect

    def append(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def clear(self) -> None:
        with self._lock:
            self._clear_locked()

    def length(self) -> int:
        with self._lock:
            return len(self._items)

    def __len__(self) -> int:
        return self.length()

    def maybe_reclaim(
        self, current_working_set_mb: int, threshold_mb: int = DEFAULT_THRESHOLD_MB
    ) -> bool:
        """Clear everything and force a collection once the threshold is met.

        Returns True when the ledger was cleared.
        """
        with self._lock:
            if current_working_set_mb < threshold_mb:
                return False
            dropped = len(self._items)
            self._clear_locked()
            self._reclaim()
        logger.info(
            "Ledger reclaimed: working_set=%sMB threshold=%sMB dropped=%s",
            current_working_set_mb,
            threshold_mb,
            dropped,
        )
        return True

    def _clear_locked(self) -> None:
        # Rebind rather than list.clear() so the old buffer is released too.
        self._items = []
