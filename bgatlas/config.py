from __future__ import annotations

"""Typed settings for a single search invocation."""

from dataclasses import dataclass
from typing import Any

DEFAULT_LIMIT = 10
DEFAULT_SKIP = 0
DEFAULT_TIMEOUT = 10


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed."""


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Validated search settings collected from the command line."""

    query: str
    client_id: str
    limit: int = DEFAULT_LIMIT
    skip: int = DEFAULT_SKIP
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_options(
        cls,
        *,
        query: str | None,
        client_id: str | None,
        limit: Any = DEFAULT_LIMIT,
        skip: Any = DEFAULT_SKIP,
        timeout: Any = DEFAULT_TIMEOUT,
    ) -> "SearchConfig":
        if _is_blank(query):
            raise ConfigError("Please use --query to set the boardgame name to search")
        if _is_blank(client_id):
            raise ConfigError("Please use --clientId to set your Boardgame Atlas client_id")
        return cls(
            query=query,
            client_id=client_id,
            limit=_coerce_unsigned(limit, "limit"),
            skip=_coerce_unsigned(skip, "skip"),
            timeout=_coerce_unsigned(timeout, "timeout"),
        )


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _coerce_unsigned(value: Any, name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"--{name} must be an integer, got {value!r}") from exc
    if number < 0:
        raise ConfigError(f"--{name} must be non-negative, got {number}")
    return number


__all__ = ["ConfigError", "DEFAULT_LIMIT", "DEFAULT_SKIP", "DEFAULT_TIMEOUT", "SearchConfig"]
