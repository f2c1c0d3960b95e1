from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Tuple

import pytest

from record_cursor import (
    BOF,
    EOF,
    NEW,
    ConcurrentModification,
    Cursor,
    CursorEvents,
    OverwriteBlocked,
)
from record_cursor.runtime import telemetry

from conftest import make_datasource


class RecordingLogger:
    """Stands in for a telelog logger and keeps every line it is given."""

    def __init__(self) -> None:
        self.lines: List[Tuple[str, str, Dict[str, str]]] = []
        self.context: Dict[str, str] = {}
        self.components: List[str] = []

    def _record(self, level: str, message: str, pairs: Any) -> None:
        self.lines.append((level, message, dict(pairs)))

    def debug_with(self, message: str, pairs: Any) -> None:
        self._record("debug", message, pairs)

    def info_with(self, message: str, pairs: Any) -> None:
        self._record("info", message, pairs)

    def warning_with(self, message: str, pairs: Any) -> None:
        self._record("warning", message, pairs)

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        yield

    @contextmanager
    def track_component(self, name: str) -> Iterator[None]:
        self.components.append(name)
        yield

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        del self.context[key]

    def messages(self, level: str) -> List[str]:
        return [message for lvl, message, _ in self.lines if lvl == level]


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    logger = RecordingLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: logger)
    return logger


def test_render_positions_and_records() -> None:
    assert telemetry.render(NEW) == "NEW"
    assert telemetry.render(3) == "3"
    assert telemetry.render({"id": 1, "name": None}) == "{id=1, name=None}"
    assert telemetry.render((EOF, 2)) == "[EOF, 2]"


def test_record_event_renders_positions(recorder: RecordingLogger) -> None:
    telemetry.record_event("cursor.move", data={"from": BOF, "to": 0})

    payload = {"event": "cursor.move", "from": "BOF", "to": "0"}
    assert recorder.lines == [("debug", "event::cursor.move", payload)]


def test_record_event_rejects_unknown_level(recorder: RecordingLogger) -> None:
    with pytest.raises(ValueError):
        telemetry.record_event("cursor.move", level="trace")


def test_span_context_lasts_for_the_block(recorder: RecordingLogger) -> None:
    with telemetry.span("cursor::save", component="cursor", metadata={"position": NEW}):
        assert recorder.context == {"position": "NEW"}

    assert recorder.context == {}
    assert recorder.components == ["cursor"]
    assert recorder.lines == []


def test_span_logs_refusals_at_info(recorder: RecordingLogger) -> None:
    with pytest.raises(ConcurrentModification):
        with telemetry.span("datasource::atomic_replace", metadata={"index": 1}):
            raise ConcurrentModification({"id": 2}, index=1)

    level, message, payload = recorder.lines[-1]
    assert (level, message) == ("info", "span::refused")
    assert payload["index"] == "1"
    assert payload["reason"].startswith("ConcurrentModification:")
    assert recorder.context == {}


def test_span_logs_other_failures_as_warnings(recorder: RecordingLogger) -> None:
    with pytest.raises(KeyError):
        with telemetry.span("tests::failing"):
            raise KeyError("boom")

    assert recorder.messages("warning") == ["span::fail"]


def test_refused_overwrite_is_not_a_warning(recorder: RecordingLogger) -> None:
    datasource = make_datasource()
    mine, theirs = Cursor(datasource), Cursor(datasource)
    mine.set_position(1)
    theirs.set_position(1)
    theirs.set_field_value("name", "Stuart")
    theirs.save()
    mine.subscribe(CursorEvents.BEFORE_OVERWRITE, lambda _event: False)
    mine.set_field_value("name", "Jonathan")

    with pytest.raises(OverwriteBlocked):
        mine.save()

    assert recorder.messages("warning") == []
    assert "event::cursor.overwrite_blocked" in recorder.messages("info")
    assert "span::refused" in recorder.messages("info")


def test_loggers_are_cached_until_reconfigured() -> None:
    first = telemetry.get_logger("record_cursor.tests")

    assert telemetry.get_logger("record_cursor.tests") is first

    telemetry.configure()
    assert telemetry.get_logger("record_cursor.tests") is not first
