"""Synchronous listener chains shared by datasources and cursors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Hashable, List, Optional

from .models import Notification

Handler = Callable[[Notification], object]


@dataclass(slots=True)
class Subscription:
    handler: Handler
    scope: object | None = None


class NotificationTarget:
    """Event source with FIFO, single-threaded, run-to-completion delivery.

    A listener vetoes a cancellable notification by returning ``False`` or by
    calling ``notification.cancel()``. Every listener still runs; the
    aggregate answer is "cancelled if anyone said no".
    """

    def __init__(self) -> None:
        self._subscribers: Dict[Hashable, List[Subscription]] = {}

    def subscribe(
        self, event_type: Hashable, handler: Handler, scope: object | None = None
    ) -> Subscription:
        if not callable(handler):
            raise TypeError("handler must be callable")
        subscription = Subscription(handler=handler, scope=scope)
        self._subscribers.setdefault(event_type, []).append(subscription)
        return subscription

    def unsubscribe(self, event_type: Hashable, handler: Handler) -> bool:
        bucket = self._subscribers.get(event_type, [])
        for index, subscription in enumerate(bucket):
            if subscription.handler == handler:
                del bucket[index]
                return True
        return False

    def unsubscribe_scope(self, scope: object) -> int:
        """Drop every subscription registered with ``scope``."""

        removed = 0
        for event_type, bucket in self._subscribers.items():
            kept = [sub for sub in bucket if sub.scope is not scope]
            removed += len(bucket) - len(kept)
            self._subscribers[event_type] = kept
        return removed

    def listener_count(self, event_type: Optional[Hashable] = None) -> int:
        if event_type is not None:
            return len(self._subscribers.get(event_type, []))
        return sum(len(bucket) for bucket in self._subscribers.values())

    def dispatch(self, notification: Notification) -> bool:
        """Deliver ``notification``; return ``False`` if it was cancelled."""

        # Copy so handlers may subscribe or unsubscribe while we iterate.
        for subscription in list(self._subscribers.get(notification.type, [])):
            if subscription.handler(notification) is False:
                notification.cancel()
        return not notification.cancelled


__all__ = ["Handler", "NotificationTarget", "Subscription"]
