"""Single-record cursor engine for tabular data-editing widgets."""

from .cursor import BOF, EOF, NEW, AccessMode, Cursor, CursorEvents, Position, Sentinel
from .datasource import Datasource, DatasourceEvents, SimpleDatasource
from .errors import (
    ConcurrentModification,
    CursorMovementError,
    DiscardBlocked,
    IllegalMove,
    NoCurrentRecord,
    NoSuchField,
    NoSuchRecord,
    OverwriteBlocked,
    RecordCursorError,
    SaveBlocked,
)
from .notifications import (
    MovementNotification,
    Notification,
    NotificationTarget,
    RelativeMoveNotification,
    RowNotification,
    RowsNotification,
)
from .records import Column, Record

__all__ = [
    "AccessMode",
    "BOF",
    "Column",
    "ConcurrentModification",
    "Cursor",
    "CursorEvents",
    "CursorMovementError",
    "Datasource",
    "DatasourceEvents",
    "DiscardBlocked",
    "EOF",
    "IllegalMove",
    "MovementNotification",
    "NEW",
    "NoCurrentRecord",
    "NoSuchField",
    "NoSuchRecord",
    "Notification",
    "NotificationTarget",
    "OverwriteBlocked",
    "Position",
    "Record",
    "RecordCursorError",
    "RelativeMoveNotification",
    "RowNotification",
    "RowsNotification",
    "SaveBlocked",
    "Sentinel",
    "SimpleDatasource",
    "__version__",
]

__version__ = "0.1.0"
