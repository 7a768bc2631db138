"""Re-exports for the Board Game Atlas API client."""

from .boardgameatlas_client import (
    SEARCH_URL,
    BoardgameAtlasClient,
    BoardgameAtlasError,
    DecodeError,
    Game,
    HTTPStatusError,
    RequestBuildError,
    SearchResult,
    TransportError,
    new_client,
)

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
