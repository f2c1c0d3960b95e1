"""Column schema and record helpers shared by datasources and cursors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Union

Record = Dict[str, Any]

_MISSING = object()


@dataclass(frozen=True, slots=True)
class Column:
    """One entry of a datasource's column schema."""

    name: str
    caption: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("column name cannot be empty")
        if not self.caption:
            object.__setattr__(self, "caption", self.name)

    @classmethod
    def coerce(cls, value: Union["Column", Mapping[str, Any], str]) -> "Column":
        """Accept a ``Column``, a ``{"name", "caption"}`` mapping, or a bare name."""

        if isinstance(value, Column):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, Mapping):
            return cls(str(value["name"]), str(value.get("caption") or ""))
        raise TypeError(f"Cannot build a Column from {value!r}")


def coerce_columns(columns: Iterable[Any]) -> tuple[Column, ...]:
    return tuple(Column.coerce(column) for column in columns)


def copy_record(record: Mapping[str, Any]) -> Record:
    if not isinstance(record, Mapping):
        raise TypeError(f"A record must be a mapping, not {type(record).__name__}")
    return dict(record)


def project_record(record: Mapping[str, Any], columns: Iterable[Column]) -> Record:
    """Return ``record`` restricted to ``columns``; absent columns map to None."""

    return {column.name: record.get(column.name) for column in columns}


def records_differ(
    left: Mapping[str, Any], right: Mapping[str, Any], *, strict_keys: bool = True
) -> bool:
    """Symmetric, per-key comparison of two records using ``!=``.

    With ``strict_keys`` a key present on one side only counts as a
    difference. Without it, a missing key compares as ``None``.
    """

    for key in set(left) | set(right):
        old = left.get(key, _MISSING)
        new = right.get(key, _MISSING)
        if old is _MISSING or new is _MISSING:
            if strict_keys:
                return True
            old = None if old is _MISSING else old
            new = None if new is _MISSING else new
        if old != new:
            return True
    return False


__all__ = [
    "Column",
    "Record",
    "coerce_columns",
    "copy_record",
    "project_record",
    "records_differ",
]
