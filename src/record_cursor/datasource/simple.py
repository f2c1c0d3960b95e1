"""Array-backed reference implementation of the ``Datasource`` contract."""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping

from record_cursor.records import Column, Record, coerce_columns, copy_record

from .base import Datasource, DatasourceEvents


class SimpleDatasource(Datasource):
    """Keeps records in a plain list. Columns and records are copied in."""

    def __init__(
        self,
        columns: Iterable[Column | Mapping[str, Any] | str],
        records: Iterable[Mapping[str, Any]] = (),
    ) -> None:
        super().__init__()
        self._columns = coerce_columns(columns)
        self._records: list[Record] = [copy_record(record) for record in records]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return (dict(record) for record in self._records)

    def get_columns(self) -> list[Column]:
        return list(self._columns)

    def get_count(self) -> int:
        return len(self._records)

    def get(self, index: int) -> Record:
        self.assert_valid_row(index)
        return dict(self._records[index])

    def insert(self, index: int, record: Mapping[str, Any]) -> None:
        self.assert_valid_row(index, len(self._records))
        self._records.insert(index, copy_record(record))
        self._notify_rows(DatasourceEvents.ROWS_INSERT, [index])

    def replace(self, index: int, record: Mapping[str, Any]) -> None:
        self.assert_valid_row(index)
        self._records[index] = copy_record(record)
        self._notify_rows(DatasourceEvents.ROWS_UPDATE, [index])

    def remove(self, index: int) -> None:
        self.assert_valid_row(index)
        del self._records[index]
        self._notify_rows(DatasourceEvents.ROWS_DELETE, [index])


__all__ = ["SimpleDatasource"]
