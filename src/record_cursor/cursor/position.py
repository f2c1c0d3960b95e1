"""Cursor positions: a sentinel (BOF, EOF, NEW) or an integer row index."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union


class Sentinel(str, Enum):
    BOF = "BOF"
    """Before the first record; nothing has been retrieved yet."""

    EOF = "EOF"
    """After the last record; the datasource has no more rows."""

    NEW = "NEW"
    """An uncommitted record being built in memory."""

    def __str__(self) -> str:
        return self.value


BOF = Sentinel.BOF
EOF = Sentinel.EOF
NEW = Sentinel.NEW

Position = Union[Sentinel, int]


def is_sentinel(position: object) -> bool:
    return isinstance(position, Sentinel)


def is_index(position: object) -> bool:
    return isinstance(position, int) and not isinstance(position, bool)


def has_record(position: object) -> bool:
    """True where field access is allowed: an index or NEW."""

    return is_index(position) or position is NEW


def is_valid(position: object, row_count: Optional[int]) -> bool:
    if is_sentinel(position):
        return True
    if not is_index(position):
        return False
    return position >= 0 and (row_count is None or position < row_count)


__all__ = [
    "BOF",
    "EOF",
    "NEW",
    "Position",
    "Sentinel",
    "has_record",
    "is_index",
    "is_sentinel",
    "is_valid",
]
