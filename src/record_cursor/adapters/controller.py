"""Host adapter that wires a Cursor's notifications into UI callbacks.

The controller owns the conversation with the user: moving off an edited
record asks ``confirm_discard`` whether to save, discard or stay, and saving
over a record that changed underneath asks ``confirm_overwrite``. No widget
toolkit is imported; hosts pass plain callables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional

from record_cursor.cursor import Cursor, CursorEvents, Position
from record_cursor.cursor.position import has_record
from record_cursor.errors import DiscardBlocked, OverwriteBlocked
from record_cursor.notifications import Notification, RowNotification
from record_cursor.records import Record
from record_cursor.runtime import telemetry

LOGGER_NAME = "record_cursor.adapters"

DiscardChoice = Literal["save", "discard", "cancel"]

_REFRESHING_EVENTS = frozenset(
    {
        CursorEvents.MOVE_TO,
        CursorEvents.SAVE,
        CursorEvents.DISCARD,
        CursorEvents.OVERWRITE,
        CursorEvents.MODIFIED,
    }
)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def _stay(_position: Position, _target: Optional[Position]) -> DiscardChoice:
    return "cancel"


def _refuse(_position: Position) -> bool:
    return False


@dataclass(slots=True)
class RecordView:
    """Host-friendly snapshot of the cursor."""

    position: Position
    row_count: Optional[int]
    values: Optional[Record]
    dirty: bool


@dataclass(slots=True)
class CursorUIHooks:
    """Callbacks invoked by the controller to update and query the host."""

    update_record: Callable[[RecordView], None]
    update_status: Callable[[str], None] = _noop
    confirm_discard: Callable[[Position, Optional[Position]], DiscardChoice] = _stay
    confirm_overwrite: Callable[[Position], bool] = _refuse
    handle_event: Callable[[str, Notification], None] = _noop
    log: Callable[[str], None] = _noop


class CursorController:
    """Bridges Cursor notifications and blocked operations to host hooks."""

    def __init__(self, cursor: Cursor, hooks: CursorUIHooks) -> None:
        self.cursor = cursor
        self.hooks = hooks
        self._subscribe_events()
        self._refresh_record()

    def close(self) -> None:
        self.cursor.unsubscribe_scope(self)

    # -- navigation --------------------------------------------------------

    def navigate(self, target: Position) -> bool:
        return self._run_movement(
            "navigate", lambda: self.cursor.set_position(target)
        )

    def navigate_relative(self, delta: int) -> bool:
        return self._run_movement(
            "navigate_relative", lambda: self.cursor.move_relative(delta)
        )

    def move_first(self) -> bool:
        return self._run_movement("move_first", self.cursor.move_first)

    def move_last(self) -> bool:
        return self._run_movement("move_last", self.cursor.move_last)

    def move_new(self) -> bool:
        return self._run_movement("move_new", self.cursor.move_new)

    # -- editing -----------------------------------------------------------

    def set_field(self, field_name: str, value: object) -> None:
        self._log_state("edit ->", field=field_name, value=value)
        self.cursor.set_field_value(field_name, value)

    def discard(self) -> None:
        self.cursor.discard()
        self.hooks.update_status("discarded")

    def save(self) -> bool:
        """Save the current record; ``False`` if the user refused to overwrite."""

        return self._save()

    # -- internals ---------------------------------------------------------

    def _run_movement(self, label: str, move: Callable[[], object]) -> bool:
        with telemetry.span(
            f"controller::{label}",
            logger_name=LOGGER_NAME,
            component="adapters",
            metadata={"position": self.cursor.get_position()},
        ) as handle:
            try:
                move()
            except DiscardBlocked as blocked:
                if not self._resolve_dirty_movement(blocked):
                    handle.cancel("user stayed on the edited record")
                    return False
            resting = telemetry.render(self.cursor.get_position())
            self.hooks.update_status(f"{label}:{resting}")
            return True

    def _resolve_dirty_movement(self, blocked: DiscardBlocked) -> bool:
        choice = self.hooks.confirm_discard(blocked.position, blocked.target)
        self._log_state("confirm_discard <-", choice=choice, target=blocked.target)

        if choice == "cancel":
            self.hooks.update_status("cancelled")
            return False
        if choice == "save":
            if not self._save(suppress_move_to=True, attempted_position=blocked.target):
                return False
        elif choice == "discard":
            self.cursor.discard(blocked.target)
        else:
            raise ValueError(f"Unknown discard choice {choice!r}")

        if blocked.target is not None:
            self.cursor.set_position(blocked.target)
        return True

    def _save(
        self,
        *,
        suppress_move_to: bool = False,
        attempted_position: Optional[Position] = None,
    ) -> bool:
        try:
            stored_at = self.cursor.save(
                suppress_move_to=suppress_move_to,
                attempted_position=attempted_position,
            )
        except OverwriteBlocked:
            self.hooks.update_status("overwrite cancelled")
            return False
        self.hooks.update_status(f"saved:{telemetry.render(stored_at)}")
        return True

    def _subscribe_events(self) -> None:
        for event in CursorEvents:
            self.cursor.subscribe(event, self._handle_event, scope=self)
        self.cursor.subscribe(
            CursorEvents.BEFORE_DISCARD, self._hold_discard, scope=self
        )
        self.cursor.subscribe(
            CursorEvents.BEFORE_OVERWRITE, self._ask_overwrite, scope=self
        )

    def _hold_discard(self, notification: Notification) -> bool:
        # Always refuse here; _run_movement prompts once the move has unwound.
        del notification
        return False

    def _ask_overwrite(self, notification: RowNotification) -> bool:
        allowed = bool(self.hooks.confirm_overwrite(notification.position))
        self._log_state("confirm_overwrite <-", allowed=allowed)
        return allowed

    def _handle_event(self, notification: Notification) -> None:
        self._log_state("event ->", event=notification.type_name)
        self.hooks.handle_event(notification.type_name, notification)
        if notification.type in _REFRESHING_EVENTS:
            self._refresh_record()

    def _refresh_record(self) -> None:
        cursor = self.cursor
        position = cursor.get_position()
        values = cursor.get_current_values() if has_record(position) else None
        self.hooks.update_record(
            RecordView(
                position=position,
                row_count=cursor.get_row_count(),
                values=values,
                dirty=cursor.is_dirty(),
            )
        )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: dict[str, object] = {
            "position": telemetry.render(self.cursor.get_position()),
            "dirty": self.cursor.is_dirty(),
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


__all__ = ["CursorController", "CursorUIHooks", "DiscardChoice", "RecordView"]
