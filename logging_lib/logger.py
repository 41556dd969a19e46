"""Structured logging facade."""

from __future__ import annotations

import sys
import traceback
from contextlib import contextmanager
from contextvars import ContextVar, Token
from threading import RLock
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Protocol

from .config import LEVELS, LoggingSettings, get_settings
from .redaction import RedactorRegistry, build_registry
from .schema import build_log_record
from .sinks.memory import InMemorySink
from .sinks.stdout import StdoutSink


_CONTEXT: ContextVar[Mapping[str, Any]] = ContextVar("logging_lib_context", default={})


class Sink(Protocol):
    """A sink for log records."""

    def emit(self, record: Mapping[str, object]) -> None:  # pragma: no cover - protocol
        ...


class Dispatcher:
    """Synchronous fan-out to sinks.

    Invocations are short-lived, so records are written inline rather than
    queued for a background worker that could be frozen mid-flush.
    """

    def __init__(self, sinks: Iterable[Sink]) -> None:
        self._sinks: List[Sink] = list(sinks)
        self._lock = RLock()

    @property
    def sinks(self) -> List[Sink]:
        with self._lock:
            return list(self._sinks)

    def register_sink(self, sink: Sink) -> None:
        with self._lock:
            self._sinks.append(sink)

    def submit(self, record: Mapping[str, object]) -> None:
        for sink in self.sinks:
            try:
                sink.emit(record)
            except Exception as exc:  # noqa: BLE001 - a broken sink must not break the caller
                sys.stderr.write(f"logging_lib sink failure: {type(exc).__name__}: {exc}\n")


class StructuredLogger:
    """Structured logger for the logging library."""

    def __init__(self, name: str, manager: "LoggerManager") -> None:
        self._name = name # The component name stamped on every record
        self._manager = manager # The manager owning settings and sinks

    @property
    def name(self) -> str:
        return self._name

    def debug(self, message: str, **fields: Any) -> None:
        self._log("DEBUG", message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log("INFO", message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log("WARNING", message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log("ERROR", message, **fields)

    def critical(self, message: str, **fields: Any) -> None:
        self._log("CRITICAL", message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        """Log an error message with the active exception attached."""

        exc_type, exc, _tb = sys.exc_info()
        if exc is not None:
            fields.setdefault("error_type", exc_type.__name__ if exc_type else None)
            fields.setdefault("error", str(exc))
            fields.setdefault("stack", traceback.format_exc(limit=8))
        self._log("ERROR", message, **fields)

    def _log(self, level: str, message: str, **fields: Any) -> None:
        manager = self._manager
        settings = manager.settings

        if LEVELS.index(level) < LEVELS.index(settings.level):
            return

        runtime_context = dict(manager.base_context)
        runtime_context.update(_CONTEXT.get())

        explicit_context = fields.pop("context", {}) or {}
        if explicit_context:
            runtime_context.update(explicit_context)

        record = build_log_record(
            level=level,
            message=message,
            settings=settings,
            component=self._name,
            context=runtime_context,
            **fields,
        )
        redactor = manager.redactor
        sanitized = redactor.apply(record) if redactor else record

        manager.dispatcher.submit(sanitized)


class LoggerManager:
    """Manager for the structured loggers."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._loggers: Dict[str, StructuredLogger] = {}
        self._settings: LoggingSettings | None = None
        self._dispatcher: Dispatcher | None = None
        self._base_context: MutableMapping[str, Any] = {}
        self._redactor: Optional[RedactorRegistry] = None

    def configure(self, settings: LoggingSettings) -> None:
        """Configure the logger manager with a given settings."""

        with self._lock:
            self._settings = settings

            sinks: List[Sink] = []
            for sink_name in settings.sinks:
                name = sink_name.strip().lower()

                if name == "stdout":
                    sinks.append(StdoutSink(settings))

                elif name == "memory":
                    sinks.append(InMemorySink())

            if not sinks:
                sinks.append(StdoutSink(settings))

            self._dispatcher = Dispatcher(sinks)
            self._base_context = dict(settings.default_context)
            self._redactor = build_registry(settings.redaction)

    @property
    def dispatcher(self) -> Dispatcher:
        dispatcher = self._dispatcher

        if dispatcher is None:
            self.configure(get_settings())
            dispatcher = self._dispatcher

        assert dispatcher is not None

        return dispatcher

    @property
    def settings(self) -> LoggingSettings:
        settings = self._settings

        if settings is None:
            settings = get_settings()
            self.configure(settings)

        return settings

    @property
    def base_context(self) -> Mapping[str, Any]:
        return dict(self._base_context)

    @property
    def redactor(self) -> Optional[RedactorRegistry]:
        return self._redactor

    def get_logger(self, name: str) -> StructuredLogger:
        with self._lock:
            logger = self._loggers.get(name)

            if logger is None:
                logger = StructuredLogger(name, self)
                self._loggers[name] = logger

            return logger

    def memory_sink(self) -> Optional[InMemorySink]:
        """Return the first in-memory sink, if one is configured."""

        for sink in self.dispatcher.sinks:
            if isinstance(sink, InMemorySink):
                return sink
        return None

    def reset(self) -> None:
        with self._lock:
            self._loggers.clear()
            self._settings = None
            self._dispatcher = None
            self._base_context.clear()
            self._redactor = None


_MANAGER = LoggerManager()


def configure_manager(settings: LoggingSettings) -> None:
    _MANAGER.configure(settings)


def get_manager() -> LoggerManager:
    return _MANAGER


def get_logger(name: str) -> StructuredLogger:
    """Get a logger with a given name."""

    return _MANAGER.get_logger(name)


@contextmanager
def logger_context(**context: Any):
    """Context manager for temporary context variables."""

    token = push_context(**context)
    try:
        yield
    finally:
        pop_context(token)


def reset_loggers() -> None:
    _MANAGER.reset()


def push_context(**context: Any) -> Token:
    current = dict(_CONTEXT.get())
    current.update(context)
    return _CONTEXT.set(current)


def pop_context(token: Token) -> None:
    _CONTEXT.reset(token)


def get_context() -> Mapping[str, Any]:
    return dict(_CONTEXT.get())


def clear_context() -> None:
    _CONTEXT.set({})
