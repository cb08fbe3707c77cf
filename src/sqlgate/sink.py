"""Logging sink used by the gateway to report failures.

The gateway reports through a narrow ``emit(severity, message, detail)``
interface so hosts can route failures to their own telemetry. The default
sink forwards to structlog.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable

from sqlgate.logging import get_logger


class LogSeverity(str, Enum):
    """Severity levels understood by a :class:`LogSink`."""

    DEBUG = "debug"
    NORMAL = "normal"
    WARNING = "warning"
    ERROR = "error"


@runtime_checkable
class LogSink(Protocol):
    """Anything that accepts severity + message + optional detail."""

    def emit(self, severity: LogSeverity, message: str, detail: Any = None) -> None:
        ...


# NORMAL has no structlog counterpart
_LEVEL_METHODS = {
    LogSeverity.DEBUG: "debug",
    LogSeverity.NORMAL: "info",
    LogSeverity.WARNING: "warning",
    LogSeverity.ERROR: "error",
}


class StructlogSink:
    """Sink that forwards to a structlog logger."""

    def __init__(self, name: str = "sqlgate.gateway"):
        self._logger = get_logger(name)

    def emit(self, severity: LogSeverity, message: str, detail: Any = None) -> None:
        log = getattr(self._logger, _LEVEL_METHODS[LogSeverity(severity)])
        if detail is None:
            log(message)
        elif isinstance(detail, dict):
            log(message, **detail)
        else:
            log(message, detail=str(detail))


__all__ = ["LogSeverity", "LogSink", "StructlogSink"]
