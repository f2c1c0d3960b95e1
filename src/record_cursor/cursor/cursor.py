"""Single-record cursor over a ``Datasource``.

The cursor keeps a position (BOF, EOF, NEW or a row index), the record as it
was last read (``loaded values``) and a working copy that callers edit
(``current values``). Moving away from an edited record goes through the
discard protocol; saving goes through ``Datasource.atomic_replace`` so that a
record changed by someone else is never clobbered silently.

Rows inserted or deleted ahead of the cursor shift its index without a
discard check, so an edit in progress survives. Deleting the current row
itself reloads whatever now sits at that index, or moves to EOF.

BOF and EOF are never the same position: from BOF at least one forward move
is needed to reach EOF, even when the datasource is empty, because at BOF the
cursor has not tried to fetch anything yet. Reaching either never raises;
moving past them does::

    cursor.move_forward()
    while not cursor.is_eof():
        ...
        cursor.move_forward()
"""

from __future__ import annotations

from typing import Any, Optional

from record_cursor.datasource import Datasource, DatasourceEvents
from record_cursor.errors import (
    ConcurrentModification,
    DiscardBlocked,
    IllegalMove,
    NoCurrentRecord,
    NoSuchField,
    OverwriteBlocked,
)
from record_cursor.notifications import (
    MovementNotification,
    NotificationTarget,
    RelativeMoveNotification,
    RowNotification,
    RowsNotification,
)
from record_cursor.records import Column, Record, project_record, records_differ
from record_cursor.runtime import telemetry

from .events import AccessMode, CursorEvents
from .position import BOF, EOF, NEW, Position, has_record, is_index, is_valid

LOGGER_NAME = "record_cursor.cursor"


class Cursor(NotificationTarget):
    """Wraps a datasource and a pointer to one current record."""

    def __init__(
        self, datasource: Datasource, access_mode: AccessMode | str | None = None
    ) -> None:
        super().__init__()
        self._datasource = datasource
        self.access_mode = AccessMode(access_mode) if access_mode is not None else None
        self._position: Position = BOF
        self._loaded_values: Optional[Record] = None
        self._current_values: Optional[Record] = None
        datasource.subscribe(
            DatasourceEvents.ROWS_INSERT, self._handle_rows_insert, scope=self
        )
        datasource.subscribe(
            DatasourceEvents.ROWS_DELETE, self._handle_rows_delete, scope=self
        )

    def __repr__(self) -> str:
        return f"<Cursor position={self._position!s} dirty={self.is_dirty()}>"

    def close(self) -> None:
        """Stop tracking datasource insertions and deletions."""

        self._datasource.unsubscribe_scope(self)

    # -- queries -----------------------------------------------------------

    @property
    def datasource(self) -> Datasource:
        return self._datasource

    def get_position(self) -> Position:
        return self._position

    def get_row_count(self) -> Optional[int]:
        """Row count of the datasource, or ``None`` if it is unknown."""

        return self._datasource.get_count()

    def get_columns(self) -> list[Column]:
        return list(self._datasource.get_columns())

    def is_bof(self) -> bool:
        return self._position is BOF

    def is_eof(self) -> bool:
        """True when any field access or forward move would raise."""

        return self._position is EOF

    def is_new(self) -> bool:
        return self._position is NEW

    def get_loaded_values(self) -> Record:
        """Field values as they were when the current record was loaded."""

        self._assert_current_record()
        return dict(self._loaded_values or {})

    def get_current_values(self) -> Record:
        """Current, possibly unsaved, field values."""

        self._assert_current_record()
        return dict(self._current_values or {})

    def get_field_value(self, field_name: str) -> Any:
        self._assert_current_record()
        self._assert_valid_field(field_name)
        return (self._current_values or {}).get(field_name)

    def is_dirty(self) -> bool:
        if self._current_values is None or self._loaded_values is None:
            return False
        return records_differ(
            self._loaded_values, self._current_values, strict_keys=True
        )

    # -- movement ----------------------------------------------------------

    def set_position(self, target: Position) -> None:
        """Move to ``target``, discarding edits first if listeners allow it.

        Raises ``IllegalMove`` for an out-of-range target and
        ``DiscardBlocked`` if a ``BEFORE_DISCARD`` listener says no. The
        discard check runs even when ``target`` is the current position.
        """

        self._assert_valid_position(target)
        self.maybe_discard(target)

        if target != self._position:
            self._move_internal(target)

    def move_relative(self, delta: int) -> bool:
        """Move ``delta`` rows forward (positive) or backward (negative).

        A zero delta still runs the discard check and sends ``MOVE_FORWARD``
        and, through ``set_position``, the usual movement checks. Targets
        before the first row clamp to BOF and past the last row to EOF.
        """

        if isinstance(delta, bool) or not isinstance(delta, int):
            raise TypeError(f"delta must be an integer, not {delta!r}")

        position = self._position
        row_count = self.get_row_count()
        target: Position = position

        if delta == 0:
            pass
        elif position is BOF:
            if delta < 0:
                raise IllegalMove(
                    "Currently at BOF; there is no previous record", position=position
                )
            target = delta - 1
        elif position is EOF or position is NEW:
            if delta > 0:
                raise IllegalMove(
                    f"Currently at {position}; there is no next record",
                    position=position,
                )
            if row_count is None:
                raise IllegalMove(
                    f"Currently at {position} and row count is unknown; cannot "
                    "calculate the new position; use move_first() instead",
                    position=position,
                )
            target = row_count + delta
        else:
            target = position + delta

        if is_index(target):
            if target < 0:
                target = BOF
            elif row_count is not None and target >= row_count:
                target = EOF

        self._assert_valid_position(target)
        self.maybe_discard(target)
        self.dispatch(
            RelativeMoveNotification(
                CursorEvents.MOVE_FORWARD,
                position=self._position,
                new_position=target,
                delta=delta,
            )
        )
        self.set_position(target)
        return True

    def move_forward(self) -> bool:
        return self.move_relative(1)

    def move_backward(self) -> bool:
        return self.move_relative(-1)

    def move_first(self) -> None:
        """Row 0, or EOF if the datasource is known to be empty."""

        target: Position = EOF if self.get_row_count() == 0 else 0
        self.dispatch(
            MovementNotification(
                CursorEvents.MOVE_FIRST, position=self._position, new_position=target
            )
        )
        self.set_position(target)

    def move_last(self) -> None:
        """Last row, or BOF if the datasource is empty."""

        row_count = self.get_row_count()
        if row_count is None:
            raise IllegalMove(
                "Cannot move to end with an unknown number of rows",
                position=self._position,
            )

        target: Position = row_count - 1 if row_count > 0 else BOF
        self.dispatch(
            MovementNotification(
                CursorEvents.MOVE_LAST, position=self._position, new_position=target
            )
        )
        self.set_position(target)

    def move_new(self) -> None:
        """Start a blank, uncommitted record."""

        self.dispatch(
            MovementNotification(
                CursorEvents.CREATE_NEW, position=self._position, new_position=NEW
            )
        )
        self.set_position(NEW)

    # -- editing -----------------------------------------------------------

    def set_field_value(self, field_name: str, value: Any) -> None:
        self._assert_current_record()
        self._assert_valid_field(field_name)
        assert self._current_values is not None
        self._current_values[field_name] = value
        self.dispatch(RowNotification(CursorEvents.MODIFIED, position=self._position))

    def maybe_discard(self, target_hint: Optional[Position] = None) -> bool:
        """Ask listeners whether unsaved edits may be thrown away.

        Does nothing unless the record is dirty. Otherwise sends a
        cancellable ``BEFORE_DISCARD`` carrying ``target_hint`` (so a
        listener can prompt the user and retry the navigation later) and
        raises ``DiscardBlocked`` if any listener cancels it. State is left
        untouched in that case.
        """

        if not self.is_dirty():
            return True

        self._assert_current_record()
        notification = MovementNotification(
            CursorEvents.BEFORE_DISCARD,
            position=self._position,
            new_position=target_hint,
        )
        if not self.dispatch(notification):
            telemetry.record_event(
                "cursor.discard_blocked",
                level="info",
                data={
                    "position": self._position,
                    "target": target_hint,
                },
                logger_name=LOGGER_NAME,
            )
            raise DiscardBlocked(
                "The cursor points to modified data, and the BEFORE_DISCARD "
                "event was cancelled, so the cursor cannot be moved.",
                position=self._position,
                target=target_hint,
            )

        self.discard(target_hint)
        return True

    def discard(self, target_hint: Optional[Position] = None) -> None:
        """Revert unsaved edits to the loaded values, without asking.

        The datasource is not queried again; use ``reload`` for that.
        Abandoning an edited NEW record moves the cursor onto the last real
        record.
        """

        self._assert_current_record()
        if not self.is_dirty():
            return

        self._current_values = dict(self._loaded_values or {})
        telemetry.record_event(
            "cursor.discard",
            data={"position": self._position},
            logger_name=LOGGER_NAME,
        )
        self.dispatch(
            MovementNotification(
                CursorEvents.DISCARD,
                position=self._position,
                new_position=target_hint,
            )
        )

        if self._position is NEW:
            self.set_position(self._last_record_position())

        self.dispatch(RowNotification(CursorEvents.MODIFIED, position=self._position))

    def reload(self) -> None:
        """Discard edits (subject to listeners) and re-read the record."""

        self.maybe_discard(self._position)
        self._reload_record()
        if has_record(self._position):
            self.dispatch(
                RowNotification(CursorEvents.MODIFIED, position=self._position)
            )

    def save(
        self,
        suppress_move_to: bool = False,
        force_overwrite: bool = False,
        attempted_position: Optional[Position] = None,
    ) -> Position:
        """Write the current record to the datasource.

        At NEW the record is appended; elsewhere it replaces the stored row
        only if that row still matches what was loaded. On a mismatch a
        cancellable ``BEFORE_OVERWRITE`` is sent (as a movement notification
        targeting ``attempted_position`` when one is given); cancelling it
        raises ``OverwriteBlocked``, otherwise the row is overwritten and
        ``OVERWRITE`` follows. ``force_overwrite`` skips the check and both
        notifications.

        ``SAVE`` carries the storage position of the saved record. With
        ``suppress_move_to`` a cursor saving a NEW record stays on NEW, now
        a blank record, so ``SAVE``'s position and ``get_position()``
        disagree. Returns the storage position.
        """

        self._assert_current_record()
        position = self._position
        values = dict(self._current_values or {})

        with telemetry.span(
            "cursor::save",
            logger_name=LOGGER_NAME,
            component="cursor",
            metadata={"position": position},
        ) as handle:
            new_position: Position = position
            if position is NEW:
                new_position = self._datasource.add(values)
            elif force_overwrite:
                self._datasource.replace(position, values)
            else:
                try:
                    self._datasource.atomic_replace(
                        position, dict(self._loaded_values or {}), values
                    )
                except ConcurrentModification:
                    handle.add_metadata("conflict", True)
                    self._overwrite_after_conflict(values, attempted_position)

            self._reload_record()
            telemetry.record_event(
                "cursor.save",
                data={"from": position, "stored_at": new_position},
                logger_name=LOGGER_NAME,
            )
            self.dispatch(RowNotification(CursorEvents.SAVE, position=new_position))

            if new_position != self._position and not suppress_move_to:
                self._move_internal(new_position)

        return new_position

    # -- internals ---------------------------------------------------------

    def _overwrite_after_conflict(
        self, values: Record, attempted_position: Optional[Position]
    ) -> None:
        notification: RowNotification
        if attempted_position is not None:
            notification = MovementNotification(
                CursorEvents.BEFORE_OVERWRITE,
                position=self._position,
                new_position=attempted_position,
            )
        else:
            notification = RowNotification(
                CursorEvents.BEFORE_OVERWRITE, position=self._position
            )

        if not self.dispatch(notification):
            telemetry.record_event(
                "cursor.overwrite_blocked",
                level="info",
                data={"position": self._position},
                logger_name=LOGGER_NAME,
            )
            raise OverwriteBlocked(position=self._position, target=attempted_position)

        self._datasource.replace(self._position, values)
        telemetry.record_event(
            "cursor.overwrite",
            level="info",
            data={"position": self._position},
            logger_name=LOGGER_NAME,
        )
        self.dispatch(RowNotification(CursorEvents.OVERWRITE, position=self._position))

    def _move_internal(self, new_position: Position, *, reload: bool = True) -> None:
        # Position first, then data, then MOVE_TO: listeners of MOVE_TO (which
        # cannot be cancelled) see the cursor already on the new record.
        old_position = self._position
        self._position = new_position
        if reload:
            self._reload_record()
        telemetry.record_event(
            "cursor.move",
            data={"from": old_position, "to": new_position},
            logger_name=LOGGER_NAME,
        )
        self.dispatch(
            MovementNotification(
                CursorEvents.MOVE_TO, position=old_position, new_position=new_position
            )
        )

    def _reload_record(self) -> None:
        position = self._position
        if position is BOF or position is EOF:
            self._loaded_values = None
            self._current_values = None
        elif position is NEW:
            self._loaded_values = {}
            self._current_values = {}
        else:
            record = self._datasource.get(position)
            self._loaded_values = project_record(record, self.get_columns())
            self._current_values = dict(self._loaded_values)

    def _handle_rows_insert(self, notification: RowsNotification) -> None:
        position = self._position
        if not is_index(position):
            return

        new_position = position
        for row in notification.affected_rows:
            if row <= new_position:
                new_position += 1

        if new_position != position:
            # Same record, new index: no discard check and no reload, so an
            # edit in progress survives.
            self._move_internal(new_position, reload=False)

    def _handle_rows_delete(self, notification: RowsNotification) -> None:
        position = self._position
        if not is_index(position):
            return

        # Current row gone: its edits go with it and the row now in its slot
        # (or EOF) is loaded.
        if position in notification.affected_rows:
            row_count = self.get_row_count()
            if row_count is not None and position >= row_count:
                self._move_internal(EOF)
            else:
                self._move_internal(position)
            return

        new_position = position - sum(
            1 for row in notification.affected_rows if row < position
        )
        if new_position != position:
            self._move_internal(new_position, reload=False)

    def _last_record_position(self) -> Position:
        row_count = self.get_row_count()
        if row_count is None:
            return EOF
        return row_count - 1 if row_count > 0 else BOF

    def _assert_valid_position(self, position: object) -> None:
        if not is_valid(position, self.get_row_count()):
            raise IllegalMove(
                f"Invalid position: {position!r}",
                position=self._position,
                target=position,
            )

    def _assert_current_record(self) -> None:
        if not has_record(self._position):
            raise NoCurrentRecord(
                f"The cursor is at {self._position} which is not a valid "
                "record, so the field values cannot be accessed or modified.",
                position=self._position,
            )

    def _assert_valid_field(self, field_name: str) -> None:
        names = [column.name for column in self._datasource.get_columns()]
        if field_name not in names:
            raise NoSuchField(field_name, names)


__all__ = ["Cursor"]
