"""Cursor state machine, positions, and notification types."""

from .cursor import Cursor
from .events import AccessMode, CursorEvents
from .position import BOF, EOF, NEW, Position, Sentinel

__all__ = [
    "AccessMode",
    "BOF",
    "Cursor",
    "CursorEvents",
    "EOF",
    "NEW",
    "Position",
    "Sentinel",
]
