"""Logging pipeline for state-machine hosts."""

from __future__ import annotations

import json
import logging
import queue
from datetime import UTC, datetime
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path

from tickfsm.api.logging import LoggingConfig
from tickfsm.runtime.config import resolve_log_level_name

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_BUILTIN_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime"}

_listener: QueueListener | None = None


def record_extras(record: logging.LogRecord) -> dict[str, object]:
    """Return the fields passed to a log call through `extra=`."""
    return {k: v for k, v in vars(record).items() if k not in _BUILTIN_RECORD_ATTRS}


class JsonFormatter(logging.Formatter):
    """One JSON object per line; `extra=` fields are kept under `fields`."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        extras = record_extras(record)
        if extras:
            payload["fields"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


class StateMachineTextFormatter(logging.Formatter):
    """Plain text with any `fsm_*` context appended as key=value pairs."""

    def __init__(self) -> None:
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = [
            f"{key}={value}"
            for key, value in record_extras(record).items()
            if key == "fsm" or key.startswith("fsm_")
        ]
        if not context:
            return text
        return f"{text} [{' '.join(context)}]"


def configure_logging(config: LoggingConfig) -> None:
    """Replace root handlers; file output, when configured, is written off-thread."""
    stop_logging()
    handlers = [_console_handler(config)]
    if config.file_path:
        handlers.append(_file_handler(config))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(_level_of(config.level_name))
    if len(handlers) == 1:
        root.addHandler(handlers[0])
    else:
        _stream_through_queue(root, handlers)


def stop_logging() -> None:
    """Drain and stop the queue listener, if any."""
    global _listener

    listener, _listener = _listener, None
    if listener is not None:
        listener.stop()


def setup_logging() -> None:
    """Install console logging at the environment's level unless handlers exist."""
    if logging.getLogger().handlers:
        return
    configure_logging(LoggingConfig(level_name=resolve_log_level_name(default="INFO")))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _stream_through_queue(root: logging.Logger, handlers: list[logging.Handler]) -> None:
    global _listener

    records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    root.addHandler(QueueHandler(records))
    _listener = QueueListener(records, *handlers, respect_handler_level=True)
    _listener.start()


def _console_handler(config: LoggingConfig) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(_formatter_for(config.console_format))
    return handler


def _file_handler(config: LoggingConfig) -> logging.Handler:
    path = Path(config.file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
    handler.setFormatter(_formatter_for(config.file_format))
    return handler


def _level_of(level_name: str) -> int:
    return logging.getLevelNamesMapping().get(level_name.strip().upper(), logging.INFO)


def _formatter_for(kind: str) -> logging.Formatter:
    if kind.strip().lower() == "json":
        return JsonFormatter()
    return StateMachineTextFormatter()
