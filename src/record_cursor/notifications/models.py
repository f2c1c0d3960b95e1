"""Notification payloads dispatched by datasources and cursors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Hashable, Optional


def is_cancellable(event_type: Hashable) -> bool:
    """Event enums opt in to cancellation through a ``cancellable`` attribute."""

    return bool(getattr(event_type, "cancellable", False))


@dataclass(slots=True)
class Notification:
    """Base payload: only the event type and the cancellation flag."""

    type: Hashable
    cancelled: bool = field(default=False, init=False, compare=False)

    @property
    def cancellable(self) -> bool:
        return is_cancellable(self.type)

    def cancel(self) -> None:
        """Veto a cancellable notification. Ignored for informational ones."""

        if self.cancellable:
            self.cancelled = True

    @property
    def type_name(self) -> str:
        return self.type.value if isinstance(self.type, Enum) else str(self.type)


@dataclass(slots=True)
class RowNotification(Notification):
    """Affects one row of a cursor.

    ``position`` is the affected or starting position. For ``SAVE`` it is the
    storage position of the saved record, which is not always where the
    cursor ends up (see ``Cursor.save``).
    """

    position: Any = None

    def get_position(self) -> Any:
        return self.position


@dataclass(slots=True)
class MovementNotification(RowNotification):
    """Moves the cursor from ``position`` to ``new_position``, or asks to."""

    new_position: Any = None

    def get_new_position(self) -> Any:
        return self.new_position


@dataclass(slots=True)
class RelativeMoveNotification(MovementNotification):
    """``MOVE_FORWARD`` payload: the requested delta and its resolved target."""

    delta: int = 0


@dataclass(slots=True)
class RowsNotification(Notification):
    """Datasource change affecting the listed row indexes."""

    rows: tuple[int, ...] = ()

    @property
    def affected_rows(self) -> tuple[int, ...]:
        return self.rows

    def first_row(self) -> Optional[int]:
        return self.rows[0] if self.rows else None


__all__ = [
    "Notification",
    "RowNotification",
    "MovementNotification",
    "RelativeMoveNotification",
    "RowsNotification",
    "is_cancellable",
]
