from __future__ import annotations

"""Structured JSON logger with credential redaction."""

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, MutableMapping

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
TOKEN_RE = re.compile(r"(?:bearer\s+)?[A-Za-z0-9\-_=]{20,}", re.IGNORECASE)
URL_QUERY_RE = re.compile(r"https?://[^\s?]+\?[^\s]+")
PATH_QUERY_RE = re.compile(r"(/[^\s?'\"]*)\?[^\s)'\"]+")
CLIENT_ID_RE = re.compile(r"(client_?id=)[^&\s)'\"]+", re.IGNORECASE)

SENSITIVE_KEYS = frozenset({"client_id", "clientid", "api_key", "token", "authorization"})
LOGGER_PREFIX = "bgatlas"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_LOGGERS: dict[str, "JsonLogger"] = {}


def _scrub(value: str) -> str:
    value = URL_QUERY_RE.sub(lambda m: m.group(0).split("?")[0], value)
    value = PATH_QUERY_RE.sub(r"\1", value)
    value = CLIENT_ID_RE.sub(r"\1[redacted]", value)
    value = EMAIL_RE.sub("[redacted]", value)
    value = TOKEN_RE.sub("[redacted]", value)
    return value


def _sanitize(obj: Any) -> Any:
    if isinstance(obj, dict):
        cleaned: dict[str, Any] = {}
        for key, value in obj.items():
            if value is None:
                continue
            if str(key).lower() in SENSITIVE_KEYS:
                cleaned[str(key)] = "[redacted]"
            else:
                cleaned[str(key)] = _sanitize(value)
        return cleaned
    if isinstance(obj, (list, tuple)):
        return [_sanitize(v) for v in obj]
    if isinstance(obj, (int, float, bool)):
        return obj
    if obj is None:
        return None
    return _scrub(str(obj))


def _truncate(details: Mapping[str, Any] | Iterable[Any], max_bytes: int) -> Any:
    if max_bytes <= 0:
        return details
    serialized = json.dumps(details, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    blob = serialized.encode("utf-8")
    if len(blob) <= max_bytes:
        return details
    preview = blob[:max_bytes].decode("utf-8", errors="ignore")
    return {"note": "truncated", "preview": preview}


class _StderrHandler(logging.StreamHandler):
    """Stream handler that writes to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        super().__init__()

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


class JsonLogger:
    """Emit structured JSON events with consistent keys."""

    def __init__(
        self,
        service: str,
        *,
        logger: logging.Logger | None = None,
        level: int = logging.WARNING,
        max_details_bytes: int = 4096,
    ) -> None:
        self._service = service
        self._logger = logger or logging.getLogger(f"{LOGGER_PREFIX}.{service}.json")
        if not self._logger.handlers:
            handler = _StderrHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)
        self._logger.propagate = False
        self._logger.setLevel(level)
        self._max_details_bytes = max(0, int(max_details_bytes))
        _LOGGERS[self._logger.name] = self

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_level(self, level: int | str) -> None:
        if isinstance(level, str):
            level = _LEVEL_MAP.get(level.upper(), logging.WARNING)
        self._logger.setLevel(level)

    def debug(self, event: str, **fields: Any) -> None:
        return self._emit("DEBUG", event, fields)

    def info(self, event: str, **fields: Any) -> None:
        return self._emit("INFO", event, fields)

    def warning(self, event: str, **fields: Any) -> None:
        return self._emit("WARNING", event, fields)

    def error(self, event: str, **fields: Any) -> None:
        return self._emit("ERROR", event, fields)

    def emit(self, level: str, event: str, **fields: Any) -> None:
        return self._emit(level.upper(), event, dict(fields))

    def _emit(self, level: str, event: str, fields: MutableMapping[str, Any]) -> dict[str, Any] | None:
        numeric = _LEVEL_MAP.get(level.upper(), logging.INFO)
        if not self._logger.isEnabledFor(numeric):
            return None
        entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level.upper(),
            "service": self._service,
            "event": event,
        }
        for key in ("latency_ms", "status"):
            value = fields.pop(key, None)
            if value is not None:
                entry[key] = value
        details = fields.pop("details", None)
        if details is not None:
            entry["details"] = _truncate(_sanitize(details), self._max_details_bytes)
        if fields:
            residual = _truncate(_sanitize(fields), self._max_details_bytes)
            if "details" in entry and isinstance(entry["details"], dict) and isinstance(residual, dict):
                entry["details"].update(residual)
            else:
                entry["details"] = residual
        payload = json.dumps(entry, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
        self._logger.log(numeric, payload)
        return entry


def configure(level: int | str) -> None:
    """Apply ``level`` to every JSON logger created so far."""

    for json_logger in _LOGGERS.values():
        json_logger.set_level(level)


__all__ = ["JsonLogger", "SENSITIVE_KEYS", "configure"]
