import threading
from typing import List, Tuple

from core.pagination import normalize_paging, paginate
from modules.logs.models import AttemptRecord


class AttemptLog:
    """
    Append-only, unbounded log of block-check attempts.

    append() is O(1) and safe from any number of threads. Reads work on a
    snapshot, so writers are never blocked by a slow page() call for longer
    than the copy.
    """

    def __init__(self):
        self._records: List[AttemptRecord] = []
        self._lock = threading.Lock()

    def append(self, record: AttemptRecord) -> None:
        with self._lock:
            self._records.append(record)

    def page(self, page_number: int = 1, page_size: int = 10) -> Tuple[List[AttemptRecord], int]:
        """
        Records ordered by timestamp descending, plus the total count.
        Out-of-range arguments are clamped (page -> 1, page_size -> 10).
        """
        page_number, page_size = normalize_paging(page_number, page_size)

        with self._lock:
            snapshot = list(self._records)

        # При равных timestamp более поздняя запись идёт первой
        ordered = sorted(reversed(snapshot), key=lambda r: r.timestamp, reverse=True)
        return paginate(ordered, page_number, page_size), len(ordered)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
