"""Cursor notification types and access-mode hints."""

from __future__ import annotations

from enum import Enum


class CursorEvents(str, Enum):
    MOVE_FIRST = "MOVE_FIRST"
    MOVE_BACKWARD = "MOVE_BACKWARD"
    MOVE_FORWARD = "MOVE_FORWARD"
    MOVE_LAST = "MOVE_LAST"
    MOVE_TO = "MOVE_TO"
    CREATE_NEW = "CREATE_NEW"
    DELETE_CURRENT_ROW = "DELETE_CURRENT_ROW"
    BEFORE_DISCARD = "BEFORE_DISCARD"
    DISCARD = "DISCARD"
    BEFORE_SAVE = "BEFORE_SAVE"
    SAVE = "SAVE"
    BEFORE_OVERWRITE = "BEFORE_OVERWRITE"
    OVERWRITE = "OVERWRITE"
    MODIFIED = "MODIFIED"

    @property
    def cancellable(self) -> bool:
        return self in _CANCELLABLE


_CANCELLABLE = frozenset(
    {
        CursorEvents.BEFORE_DISCARD,
        CursorEvents.BEFORE_OVERWRITE,
        CursorEvents.BEFORE_SAVE,
    }
)


class AccessMode(str, Enum):
    """How the caller intends to walk the cursor; a prefetch hint only."""

    ALL_SEQUENTIAL = "ALL_SEQUENTIAL"
    LINEAR_SEARCH = "LINEAR_SEARCH"
    BINARY_SEARCH = "BINARY_SEARCH"
    RANDOM = "RANDOM"


__all__ = ["AccessMode", "CursorEvents"]
