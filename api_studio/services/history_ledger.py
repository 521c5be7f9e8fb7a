"""
Bounded, newest-first log of completed executions.
"""

from collections import deque
from typing import Iterable, Iterator

from .. import config
from ..schemas.history import ExecutionRecord


class HistoryLedger:
    """
    In-memory history of execution records, newest first.

    Appending beyond ``capacity`` silently drops the oldest record.

    Args:
        capacity: Maximum number of records kept
        records: Initial records, newest first (e.g. restored from storage)
    """

    def __init__(
        self,
        capacity: int = config.HISTORY_CAPACITY,
        records: Iterable[ExecutionRecord] = (),
    ):
        if capacity < 1:
            raise ValueError("History capacity must be positive")
        self.capacity = capacity
        self._records: deque[ExecutionRecord] = deque(list(records)[:capacity], maxlen=capacity)

    def append(self, record: ExecutionRecord) -> None:
        self._records.appendleft(record)

    def clear(self) -> None:
        self._records.clear()

    def get(self, record_id: str) -> ExecutionRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def snapshot(self) -> list[ExecutionRecord]:
        """Records as a list, newest first."""
        return list(self._records)

    def __iter__(self) -> Iterator[ExecutionRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: int) -> ExecutionRecord:
        return self._records[index]
