from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from record_cursor import Cursor, CursorEvents, Notification, SimpleDatasource

COLUMNS = [{"name": "id", "caption": "ID"}, {"name": "name", "caption": "Name"}]
ROWS = [
    {"id": 1, "name": "John"},
    {"id": 2, "name": "James"},
    {"id": 5, "name": "Peter"},
]


def make_datasource(rows: Optional[List[Dict[str, Any]]] = None) -> SimpleDatasource:
    return SimpleDatasource(COLUMNS, ROWS if rows is None else rows)


def block_discards(cursor: Cursor) -> List[Notification]:
    """Refuse every BEFORE_DISCARD and return the list of refused events."""

    refused: List[Notification] = []

    def refuse(notification: Notification) -> bool:
        refused.append(notification)
        return False

    cursor.subscribe(CursorEvents.BEFORE_DISCARD, refuse)
    return refused


def record_events(cursor: Cursor, *events: CursorEvents) -> List[Notification]:
    seen: List[Notification] = []
    for event in events or tuple(CursorEvents):
        cursor.subscribe(event, seen.append)
    return seen


@pytest.fixture
def datasource() -> SimpleDatasource:
    return make_datasource()


@pytest.fixture
def cursor(datasource: SimpleDatasource) -> Cursor:
    return Cursor(datasource)
