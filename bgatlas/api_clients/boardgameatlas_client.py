"""Board Game Atlas search API client."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

import requests

from bgatlas import __version__
from bgatlas.utils.deadline import Deadline
from bgatlas.utils.log_json import JsonLogger

SEARCH_URL = "https://api.boardgameatlas.com/api/search"
_CHUNK_SIZE = 1024

_logger = JsonLogger("boardgameatlas-client")


class BoardgameAtlasError(RuntimeError):
    """Base class for Board Game Atlas client failures."""


class RequestBuildError(BoardgameAtlasError):
    """Raised when the outbound request cannot be prepared."""


class TransportError(BoardgameAtlasError):
    """Raised on connection failures, timeouts and cancelled deadlines."""


class HTTPStatusError(BoardgameAtlasError):
    """Raised when the API answers with a status code of 400 or above."""

    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        status = f"{status_code} {reason}".strip()
        super().__init__(f"error HTTP status: {status}")


class DecodeError(BoardgameAtlasError):
    """Raised when the response body does not match the search schema."""


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"field {key!r}: expected string, got {type(value).__name__}")
    return value


def _unsigned(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"field {key!r}: expected integer, got {type(value).__name__}")
    if value < 0:
        raise DecodeError(f"field {key!r}: expected non-negative integer, got {value}")
    return value


def _object(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"{what}: expected object, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class Game:
    """A single game entry from the search response."""

    id: str = ""
    name: str = ""
    price: str = ""
    year_published: int = 0
    description: str = ""
    url: str = ""
    image_url: str = ""
    rules_url: str = ""

    @classmethod
    def from_dict(cls, payload: Any) -> "Game":
        data = _object(payload, "game")
        return cls(
            id=_string(data, "id"),
            name=_string(data, "name"),
            price=_string(data, "price"),
            year_published=_unsigned(data, "year_published"),
            description=_string(data, "description"),
            url=_string(data, "official_url"),
            image_url=_string(data, "image_url"),
            rules_url=_string(data, "rules_url"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "year_published": self.year_published,
            "description": self.description,
            "official_url": self.url,
            "image_url": self.image_url,
            "rules_url": self.rules_url,
        }


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Games returned for one page plus the server-side match count."""

    games: Tuple[Game, ...] = ()
    count: int = 0

    @classmethod
    def from_dict(cls, payload: Any) -> "SearchResult":
        data = _object(payload, "search result")
        raw_games = data.get("games")
        if raw_games is None:
            raw_games = []
        if not isinstance(raw_games, list):
            raise DecodeError(f"field 'games': expected array, got {type(raw_games).__name__}")
        games = []
        for index, item in enumerate(raw_games):
            try:
                games.append(Game.from_dict(item))
            except DecodeError as exc:
                raise DecodeError(f"games[{index}]: {exc}") from exc
        return cls(games=tuple(games), count=_unsigned(data, "count"))

    def to_dict(self) -> Dict[str, Any]:
        return {"games": [game.to_dict() for game in self.games], "count": self.count}


@dataclass(frozen=True, slots=True)
class BoardgameAtlasClient:
    """Read-only client bound to one Board Game Atlas ``client_id``.

    Parameters
    ----------
    client_id:
        Credential sent as the ``client_id`` query parameter on every call.
    session:
        Optional :class:`requests.Session`; one is created per call otherwise.
    base_url:
        Search endpoint, overridable for tests.
    """

    client_id: str
    session: Optional[requests.Session] = field(default=None, compare=False, repr=False)
    base_url: str = SEARCH_URL

    def _build(self, session: requests.Session, query: str, limit: int, skip: int) -> requests.PreparedRequest:
        params = {
            "name": query,
            "limit": str(limit),
            "skip": str(skip),
            "client_id": self.client_id,
        }
        headers = {
            "Accept": "application/json",
            "User-Agent": f"bgatlas/{__version__}",
        }
        request = requests.Request("GET", self.base_url, params=params, headers=headers)
        try:
            return session.prepare_request(request)
        except (requests.RequestException, ValueError) as exc:
            raise RequestBuildError(f"cannot create HTTP request: {exc}") from exc

    def search(
        self,
        query: str,
        limit: int,
        skip: int,
        *,
        deadline: Deadline | None = None,
    ) -> SearchResult:
        """Search games by name and return one page of results.

        ``limit`` and ``skip`` are forwarded verbatim. The call is bounded by
        ``deadline``; an already cancelled or expired deadline fails with
        :class:`TransportError` before anything is sent, and the body read
        stops with the same error once the deadline passes mid-transfer.
        """
        session = self.session
        if session is None:
            session = requests.Session()
            session.trust_env = False
        try:
            prepared = self._build(session, query, limit, skip)
            return self._send(session, prepared, query, deadline)
        finally:
            if self.session is None:
                session.close()

    def _send(
        self,
        session: requests.Session,
        prepared: requests.PreparedRequest,
        query: str,
        deadline: Deadline | None,
    ) -> SearchResult:
        timeout = None
        if deadline is not None:
            if deadline.expired():
                _logger.error("api.request_failed", query=query, error=deadline.reason())
                raise TransportError(f"cannot invoke Board Game Atlas: {deadline.reason()}")
            timeout = deadline.remaining()

        _logger.info("api.request", url=prepared.url, query=query, timeout=timeout)
        started = time.perf_counter()
        try:
            resp = session.send(prepared, timeout=timeout, stream=True)
        except requests.Timeout as exc:
            _logger.error("api.request_failed", query=query, error="deadline exceeded")
            raise TransportError(f"cannot invoke Board Game Atlas: deadline exceeded ({exc})") from exc
        except requests.RequestException as exc:
            _logger.error("api.request_failed", query=query, error=str(exc))
            raise TransportError(f"cannot invoke Board Game Atlas: {exc}") from exc

        try:
            if resp.status_code >= 400:
                latency_ms = round((time.perf_counter() - started) * 1000, 2)
                _logger.error("api.response", status=resp.status_code, latency_ms=latency_ms)
                raise HTTPStatusError(resp.status_code, resp.reason or "")
            body = self._read_body(resp, query, deadline)
            latency_ms = round((time.perf_counter() - started) * 1000, 2)
            try:
                payload = json.loads(body)
            except ValueError as exc:
                _logger.error("api.invalid_json", status=resp.status_code, error=str(exc))
                raise DecodeError(f"cannot deserialize JSON payload: {exc}") from exc
            try:
                result = SearchResult.from_dict(payload)
            except DecodeError as exc:
                _logger.error("api.invalid_payload", status=resp.status_code, error=str(exc))
                raise DecodeError(f"cannot deserialize JSON payload: {exc}") from exc
        finally:
            resp.close()

        _logger.info(
            "api.response",
            status=resp.status_code,
            latency_ms=latency_ms,
            result_count=len(result.games),
            total=result.count,
        )
        return result

    @staticmethod
    def _read_body(resp: requests.Response, query: str, deadline: Deadline | None) -> bytes:
        """Collect the body chunk by chunk, giving up once ``deadline`` passes."""
        chunks: list[bytes] = []
        try:
            for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
                if deadline is not None and deadline.expired():
                    _logger.error("api.request_failed", query=query, error=deadline.reason())
                    raise TransportError(f"cannot invoke Board Game Atlas: {deadline.reason()}")
                chunks.append(chunk)
        except requests.RequestException as exc:
            _logger.error("api.request_failed", query=query, error=str(exc))
            raise TransportError(f"cannot invoke Board Game Atlas: {exc}") from exc
        if deadline is not None and deadline.expired():
            _logger.error("api.request_failed", query=query, error=deadline.reason())
            raise TransportError(f"cannot invoke Board Game Atlas: {deadline.reason()}")
        return b"".join(chunks)


def new_client(client_id: str, *, session: requests.Session | None = None) -> BoardgameAtlasClient:
    """Construct a :class:`BoardgameAtlasClient` for ``client_id``."""

    _logger.info("api.client.init", has_client_id=bool(client_id), shared_session=session is not None)
    return BoardgameAtlasClient(client_id, session=session)


__all__ = [
    "SEARCH_URL",
    "BoardgameAtlasClient",
    "BoardgameAtlasError",
    "DecodeError",
    "Game",
    "HTTPStatusError",
    "RequestBuildError",
    "SearchResult",
    "TransportError",
    "new_client",
]
