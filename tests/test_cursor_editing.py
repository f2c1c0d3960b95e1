from __future__ import annotations

import pytest

from record_cursor import (
    BOF,
    EOF,
    NEW,
    Cursor,
    CursorEvents,
    DiscardBlocked,
    NoCurrentRecord,
    SimpleDatasource,
)

from conftest import block_discards, make_datasource, record_events


def test_discard_reverts_to_loaded_values(cursor: Cursor) -> None:
    cursor.set_position(1)
    assert cursor.get_loaded_values()["name"] == "James"

    cursor.set_field_value("name", "Joyce")
    assert cursor.is_dirty()

    cursor.discard()
    assert cursor.is_dirty() is False
    assert cursor.get_current_values()["name"] == "James"


def test_discard_copies_instead_of_aliasing(cursor: Cursor) -> None:
    cursor.set_position(1)
    cursor.set_field_value("name", "Joyce")
    cursor.discard()

    cursor.set_field_value("name", "Jocelyn")

    assert cursor.is_dirty()
    assert cursor.get_loaded_values()["name"] == "James"


def test_returned_values_are_copies(cursor: Cursor) -> None:
    cursor.set_position(0)

    cursor.get_current_values()["name"] = "mutated"
    cursor.get_loaded_values()["name"] = "mutated"

    assert cursor.is_dirty() is False
    assert cursor.get_current_values()["name"] == "John"


def test_discard_sends_discard_then_modified(cursor: Cursor) -> None:
    cursor.set_position(1)
    cursor.set_field_value("name", "Joyce")
    events = record_events(cursor, CursorEvents.DISCARD, CursorEvents.MODIFIED)

    cursor.discard(2)

    assert [event.type for event in events] == [
        CursorEvents.DISCARD,
        CursorEvents.MODIFIED,
    ]
    assert events[0].new_position == 2


def test_discard_on_clean_record_does_nothing(cursor: Cursor) -> None:
    cursor.set_position(1)
    events = record_events(cursor)

    cursor.discard()

    assert events == []


def test_discard_requires_a_record(cursor: Cursor) -> None:
    with pytest.raises(NoCurrentRecord):
        cursor.discard()


def test_discarding_new_record_collapses_onto_last_row(cursor: Cursor) -> None:
    cursor.move_new()
    cursor.set_field_value("name", "Nobody")

    cursor.discard()

    assert cursor.get_position() == 2
    assert cursor.get_current_values() == {"id": 5, "name": "Peter"}


def test_discarding_new_record_on_empty_datasource_goes_to_bof() -> None:
    cursor = Cursor(make_datasource([]))
    cursor.move_new()
    cursor.set_field_value("name", "Nobody")

    cursor.discard()

    assert cursor.get_position() is BOF


def test_allowed_discard_lets_the_move_happen(cursor: Cursor) -> None:
    events = record_events(cursor, CursorEvents.BEFORE_DISCARD, CursorEvents.DISCARD)
    cursor.set_position(0)
    cursor.set_field_value("name", "whee")

    cursor.move_relative(1)

    assert cursor.get_position() == 1
    assert [event.type for event in events] == [
        CursorEvents.BEFORE_DISCARD,
        CursorEvents.DISCARD,
    ]
    assert cursor.is_dirty() is False


def test_cancel_method_blocks_discard(cursor: Cursor) -> None:
    cursor.subscribe(CursorEvents.BEFORE_DISCARD, lambda event: event.cancel())
    cursor.set_position(0)
    cursor.set_field_value("name", "whee")

    with pytest.raises(DiscardBlocked):
        cursor.move_relative(1)
    assert cursor.get_position() == 0


def test_modified_sent_for_every_field_change(cursor: Cursor) -> None:
    cursor.set_position(0)
    events = record_events(cursor, CursorEvents.MODIFIED)

    cursor.set_field_value("name", "a")
    cursor.set_field_value("name", "b")

    assert len(events) == 2
    assert all(event.position == 0 for event in events)


def test_loose_equality_when_diffing(cursor: Cursor) -> None:
    cursor.set_position(0)

    cursor.set_field_value("id", 1.0)

    assert cursor.is_dirty() is False


def test_new_record_is_dirty_once_a_field_is_set(cursor: Cursor) -> None:
    block_discards(cursor)
    cursor.set_position(NEW)
    cursor.set_field_value("id", "foo")

    assert cursor.is_dirty()
    with pytest.raises(DiscardBlocked):
        cursor.move_relative(-1)
    assert cursor.get_position() is NEW


def test_get_field_value(cursor: Cursor) -> None:
    cursor.set_position(2)
    cursor.set_field_value("name", "Paul")

    assert cursor.get_field_value("name") == "Paul"
    assert cursor.get_field_value("id") == 5


def test_reload_picks_up_datasource_changes(
    cursor: Cursor, datasource: SimpleDatasource
) -> None:
    cursor.set_position(1)
    datasource.replace(1, {"id": 2, "name": "Jim"})
    assert cursor.get_current_values()["name"] == "James"

    cursor.reload()

    assert cursor.get_current_values()["name"] == "Jim"
    assert cursor.is_dirty() is False


def test_reload_respects_before_discard(
    cursor: Cursor, datasource: SimpleDatasource
) -> None:
    block_discards(cursor)
    cursor.set_position(1)
    cursor.set_field_value("name", "Joyce")

    with pytest.raises(DiscardBlocked):
        cursor.reload()
    assert cursor.get_current_values()["name"] == "Joyce"


def test_no_record_at_eof(cursor: Cursor) -> None:
    cursor.set_position(EOF)

    assert cursor.is_dirty() is False
    with pytest.raises(NoCurrentRecord):
        cursor.get_field_value("name")
