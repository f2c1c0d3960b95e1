"""telelog wiring for cursors, datasources and the host controller.

Loggers share one configuration read from the environment:

``RECORD_CURSOR_LOG_LEVEL``        minimum level, ``WARNING`` by default
``RECORD_CURSOR_LOG_FILE``         additionally write to this file
``RECORD_CURSOR_DISABLE_CONSOLE``  no console output
``RECORD_CURSOR_NO_COLOR``         plain console output
``RECORD_CURSOR_PROFILE``          let telelog time every span

Values handed to ``record_event`` and ``span`` may be cursor positions,
records or row tuples; they are rendered here so callers never format them.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

from record_cursor.errors import RecordCursorError

tl = cast(Any, telelog)

ENV_PREFIX = "RECORD_CURSOR_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "record_cursor")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}")


def _env_flag(name: str) -> bool:
    return (_env(name) or "").lower() in {"1", "true", "yes", "on"}


def render(value: Any) -> str:
    """Log-friendly text for a position, record, row list or plain value."""

    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Mapping):
        return "{" + ", ".join(f"{k}={render(v)}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + ", ".join(render(item) for item in value) + "]"
    return str(value)


def build_config() -> Any:
    """A ``telelog.Config`` built from the ``RECORD_CURSOR_*`` variables."""

    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "WARNING").upper())

    console = not _env_flag("DISABLE_CONSOLE")
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR"))

    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    config.with_profiling(_env_flag("PROFILE"))
    return config


def configure(config: Optional[Any] = None) -> None:
    """Adopt ``config``, or re-read the environment, and drop cached loggers."""

    global _ACTIVE_CONFIG
    _ACTIVE_CONFIG = config if config is not None else build_config()
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = build_config()

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(
            logger_name, _ACTIVE_CONFIG
        )
    return _LOGGER_CACHE[logger_name]


def _emit(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    pairs = [(str(key), render(value)) for key, value in payload.items()]
    name = level.lower()

    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, pairs)
        return

    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str,
    *,
    level: str = "debug",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured event such as ``cursor.move`` or ``datasource.conflict``."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    logger: Any
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = value

    def _report(self, level: str, message: str, reason: Optional[str]) -> None:
        payload = {"span": self.name, **self.metadata}
        if reason:
            payload["reason"] = reason
        _emit(self.logger, level, message, payload)

    def fail(self, reason: str) -> None:
        self._report("warning", "span::fail", reason)

    def refuse(self, reason: str) -> None:
        self._report("info", "span::refused", reason)

    def cancel(self, reason: Optional[str] = None) -> None:
        self._report("info", "span::cancel", reason)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block; ``metadata`` is attached as logger context meanwhile.

    A ``RecordCursorError`` leaving the block is an expected refusal (a
    conflict, a blocked discard) and is logged at info. Anything else is
    logged as a failure. Both are re-raised.
    """

    log = get_logger(logger_name)
    context = dict(metadata or {})

    with ExitStack() as stack:
        if component:
            stack.enter_context(log.track_component(component))
        stack.enter_context(log.profile(name))
        for key, value in context.items():
            log.add_context(key, render(value))

        handle = SpanHandle(logger=log, name=name, metadata=context)
        try:
            yield handle
        except RecordCursorError as exc:
            handle.refuse(f"{type(exc).__name__}: {exc}")
            raise
        except Exception as exc:
            handle.fail(f"{type(exc).__name__}: {exc}")
            raise
        finally:
            for key in context:
                log.remove_context(key)


__all__ = [
    "SpanHandle",
    "build_config",
    "configure",
    "get_logger",
    "record_event",
    "render",
    "span",
]
