"""Abstract ordered record collection with optimistic-concurrency writes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence

from record_cursor.errors import ConcurrentModification, NoSuchRecord
from record_cursor.notifications import NotificationTarget, RowsNotification
from record_cursor.records import Column, Record, records_differ
from record_cursor.runtime import telemetry

from .search import insertion_point

LOGGER_NAME = "record_cursor.datasource"


class DatasourceEvents(str, Enum):
    """Row-change notifications. None of them can be cancelled."""

    ROWS_INSERT = "ROWS_INSERT"
    ROWS_UPDATE = "ROWS_UPDATE"
    ROWS_DELETE = "ROWS_DELETE"

    @property
    def cancellable(self) -> bool:
        return False


class Datasource(NotificationTarget, ABC):
    """Ordered records plus a fixed column schema.

    Every accessor hands out copies, so callers can never mutate storage
    directly. Mutations dispatch a ``RowsNotification`` after the backing
    sequence has changed.

    ``get_count`` may return ``None`` for sources that do not know their
    size; cursors cope with that, although ``SimpleDatasource`` always knows.
    """

    @abstractmethod
    def get_columns(self) -> list[Column]:
        ...

    @abstractmethod
    def get_count(self) -> Optional[int]:
        ...

    @abstractmethod
    def get(self, index: int) -> Record:
        ...

    @abstractmethod
    def insert(self, index: int, record: Mapping[str, Any]) -> None:
        ...

    @abstractmethod
    def replace(self, index: int, record: Mapping[str, Any]) -> None:
        ...

    @abstractmethod
    def remove(self, index: int) -> None:
        ...

    def add(self, record: Mapping[str, Any]) -> int:
        """Append ``record`` and return its index."""

        index = self._known_count("add")
        self.insert(index, record)
        return index

    def assert_valid_row(self, index: int, max_index: Optional[int] = None) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise NoSuchRecord(f"Row index must be an integer, not {index!r}")
        if index < 0:
            raise NoSuchRecord(f"Impossible row index: {index}", index=index)

        if max_index is None:
            count = self.get_count()
            if count is None:
                return
            max_index = count - 1

        if index > max_index:
            raise NoSuchRecord(
                f"Row index {index} is greater than allowed: {max_index}",
                index=index,
            )

    def atomic_replace(
        self,
        index: int,
        expected: Mapping[str, Any],
        next_record: Mapping[str, Any],
    ) -> None:
        """Replace the row at ``index`` only if it still equals ``expected``.

        Raises ``ConcurrentModification`` carrying the actual record, without
        touching storage, when any key differs. This is a single-slot
        compare-and-swap; it relies on callers running on one thread.
        """

        if not isinstance(expected, Mapping) or not isinstance(next_record, Mapping):
            raise TypeError("atomic_replace expects mappings for both records")

        with telemetry.span(
            "datasource::atomic_replace",
            logger_name=LOGGER_NAME,
            metadata={"index": index},
        ) as handle:
            self.assert_valid_row(index)
            actual = self.get(index)
            if records_differ(expected, actual, strict_keys=False):
                handle.add_metadata("conflict", True)
                telemetry.record_event(
                    "datasource.conflict",
                    level="info",
                    data={"index": index},
                    logger_name=LOGGER_NAME,
                )
                raise ConcurrentModification(actual, index=index)
            self.replace(index, next_record)

    def binary_search(
        self, compare_row: Callable[[Any, Record], int], target: Any
    ) -> int:
        """Insertion point for ``target`` in rows sorted by ``compare_row``."""

        return insertion_point(
            self._known_count("binary_search"),
            lambda index: compare_row(target, self.get(index)),
        )

    def _known_count(self, operation: str) -> int:
        count = self.get_count()
        if count is None:
            raise NoSuchRecord(
                f"{operation} needs the row count, which this datasource "
                "does not know"
            )
        return count

    def _notify_rows(self, event: DatasourceEvents, rows: Sequence[int]) -> None:
        telemetry.record_event(
            f"datasource.{event.value.lower()}",
            data={"rows": list(rows), "count": self.get_count()},
            logger_name=LOGGER_NAME,
        )
        self.dispatch(RowsNotification(event, tuple(rows)))


__all__ = ["Datasource", "DatasourceEvents"]
