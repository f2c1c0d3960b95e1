"""Adapters connecting cursors to host UIs."""

from .controller import CursorController, CursorUIHooks, DiscardChoice, RecordView

__all__ = ["CursorController", "CursorUIHooks", "DiscardChoice", "RecordView"]
