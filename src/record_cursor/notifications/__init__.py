"""Synchronous, optionally cancellable notifications."""

from .models import (
    MovementNotification,
    Notification,
    RelativeMoveNotification,
    RowNotification,
    RowsNotification,
    is_cancellable,
)
from .target import Handler, NotificationTarget, Subscription

__all__ = [
    "Handler",
    "MovementNotification",
    "Notification",
    "NotificationTarget",
    "RelativeMoveNotification",
    "RowNotification",
    "RowsNotification",
    "Subscription",
    "is_cancellable",
]
