"""Exceptions raised by datasources and cursors.

All of them are recoverable: callers catch them and turn them into user
feedback (a confirmation prompt, a disabled button). Nothing here is retried
automatically.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional


class RecordCursorError(RuntimeError):
    """Base class for every error raised by this package."""


class NoSuchRecord(RecordCursorError):
    """Raised when a row index is outside the datasource's valid range."""

    def __init__(self, message: str, *, index: Optional[int] = None) -> None:
        super().__init__(message)
        self.index = index


class ConcurrentModification(RecordCursorError):
    """Raised by ``atomic_replace`` when the stored record no longer matches."""

    def __init__(
        self, current_values: Mapping[str, Any], *, index: Optional[int] = None
    ) -> None:
        super().__init__(
            "The current values of the row are different than the expected "
            "values. It appears that the row has been modified, so it will "
            "not be overwritten."
        )
        self.current_values = dict(current_values)
        self.index = index

    def get_current_values(self) -> dict[str, Any]:
        return dict(self.current_values)


class CursorMovementError(RecordCursorError):
    """Base class for illegal or blocked cursor movements."""

    def __init__(
        self,
        message: str,
        *,
        position: object | None = None,
        target: object | None = None,
    ) -> None:
        super().__init__(message)
        self.position = position
        self.target = target


class IllegalMove(CursorMovementError):
    """A transition the state machine never allows, e.g. backwards from BOF."""


class DiscardBlocked(CursorMovementError):
    """A ``BEFORE_DISCARD`` listener refused to let unsaved edits go."""


class OverwriteBlocked(CursorMovementError):
    """A ``BEFORE_OVERWRITE`` listener refused to clobber a changed record."""

    def __init__(
        self, *, position: object | None = None, target: object | None = None
    ) -> None:
        super().__init__(
            "The record in the datasource has changed since we loaded it, and "
            "the BEFORE_OVERWRITE event was cancelled, so the cursor has not "
            "saved the current record.",
            position=position,
            target=target,
        )


class SaveBlocked(RecordCursorError):
    """Reserved for a ``BEFORE_SAVE`` guard. Not raised by the cursor today."""


class NoCurrentRecord(RecordCursorError):
    """Field access attempted while the cursor sits at BOF or EOF."""

    def __init__(self, message: str, *, position: object | None = None) -> None:
        super().__init__(message)
        self.position = position


class NoSuchField(RecordCursorError):
    """The named field is not one of the datasource's columns."""

    def __init__(self, field_name: str, valid_fields: Iterable[str]) -> None:
        self.field_name = field_name
        self.valid_fields = tuple(valid_fields)
        super().__init__(
            f"The field {field_name!r} does not exist in this cursor. "
            f"Valid fields are: {' '.join(self.valid_fields)}"
        )


__all__ = [
    "RecordCursorError",
    "NoSuchRecord",
    "ConcurrentModification",
    "CursorMovementError",
    "IllegalMove",
    "DiscardBlocked",
    "OverwriteBlocked",
    "SaveBlocked",
    "NoCurrentRecord",
    "NoSuchField",
]
