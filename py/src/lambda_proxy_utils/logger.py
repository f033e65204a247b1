from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StructuredLogger(Protocol):
    def debug(self, message: str, *fields: dict[str, Any]) -> None: ...

    def info(self, message: str, *fields: dict[str, Any]) -> None: ...

    def warn(self, message: str, *fields: dict[str, Any]) -> None: ...

    def error(self, message: str, *fields: dict[str, Any]) -> None: ...

    def with_field(self, key: str, value: Any) -> StructuredLogger: ...

    def with_fields(self, fields: dict[str, Any]) -> StructuredLogger: ...

    def with_request_id(self, request_id: str) -> StructuredLogger: ...

    def flush(self) -> None: ...

    def close(self) -> None: ...

    def is_healthy(self) -> bool: ...

    def get_stats(self) -> dict[str, Any]: ...


class NoOpLogger:
    def debug(self, _message: str, *fields: dict[str, Any]) -> None:
        return None

    def info(self, _message: str, *fields: dict[str, Any]) -> None:
        return None

    def warn(self, _message: str, *fields: dict[str, Any]) -> None:
        return None

    def error(self, _message: str, *fields: dict[str, Any]) -> None:
        return None

    def with_field(self, _key: str, _value: Any) -> StructuredLogger:
        return self

    def with_fields(self, _fields: dict[str, Any]) -> StructuredLogger:
        return self

    def with_request_id(self, _request_id: str) -> StructuredLogger:
        return self

    def flush(self) -> None:
        return None

    def close(self) -> None:
        return None

    def is_healthy(self) -> bool:
        return True

    def get_stats(self) -> dict[str, Any]:
        return {}


class StdLogger:
    """Adapts a stdlib ``logging.Logger`` to ``StructuredLogger``.

    Bound and per-call fields are merged into ``extra`` so formatters such as
    a JSON formatter can pick them up. Messages are stripped of CR/LF.
    """

    def __init__(self, logger: logging.Logger | None = None, fields: dict[str, Any] | None = None) -> None:
        self._logger = logger or logging.getLogger("lambda_proxy_utils")
        self._fields = dict(fields or {})
        self._counts: dict[str, int] = {}

    def debug(self, message: str, *fields: dict[str, Any]) -> None:
        self._log(logging.DEBUG, "debug", message, fields)

    def info(self, message: str, *fields: dict[str, Any]) -> None:
        self._log(logging.INFO, "info", message, fields)

    def warn(self, message: str, *fields: dict[str, Any]) -> None:
        self._log(logging.WARNING, "warn", message, fields)

    def error(self, message: str, *fields: dict[str, Any]) -> None:
        self._log(logging.ERROR, "error", message, fields)

    def with_field(self, key: str, value: Any) -> StructuredLogger:
        return self.with_fields({key: value})

    def with_fields(self, fields: dict[str, Any]) -> StructuredLogger:
        merged = dict(self._fields)
        merged.update(fields or {})
        return StdLogger(self._logger, merged)

    def with_request_id(self, request_id: str) -> StructuredLogger:
        return self.with_field("request_id", str(request_id))

    def flush(self) -> None:
        for handler in self._logger.handlers:
            handler.flush()

    def close(self) -> None:
        self.flush()

    def is_healthy(self) -> bool:
        return True

    def get_stats(self) -> dict[str, Any]:
        return dict(self._counts)

    def _log(self, level: int, name: str, message: str, fields: tuple[dict[str, Any], ...]) -> None:
        self._counts[name] = self._counts.get(name, 0) + 1
        if not self._logger.isEnabledFor(level):
            return
        extra = dict(self._fields)
        for f in fields:
            extra.update(f or {})
        self._logger.log(level, sanitize_log_string(message), extra={"fields": extra})


def sanitize_log_string(value: str) -> str:
    v = str(value or "")
    if not v:
        return v
    return v.replace("\r", "").replace("\n", "")


_global_logger: StructuredLogger = NoOpLogger()


def get_logger() -> StructuredLogger:
    return _global_logger


def set_logger(logger: StructuredLogger | None) -> None:
    global _global_logger
    _global_logger = logger if logger is not None else NoOpLogger()


__all__ = [
    "NoOpLogger",
    "StdLogger",
    "StructuredLogger",
    "get_logger",
    "sanitize_log_string",
    "set_logger",
]
