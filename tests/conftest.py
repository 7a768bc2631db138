from __future__ import annotations

import sys
from pathlib import Path

import pytest
from pytest_socket import disable_socket, enable_socket, socket_allow_hosts

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

SEARCH_URL = "https://api.boardgameatlas.com/api/search"


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "enable_socket: allow loopback sockets for this test")


@pytest.fixture(autouse=True)
def _disable_network(request: pytest.FixtureRequest):
    """Block real sockets unless a test opts in with ``enable_socket``."""

    if request.node.get_closest_marker("enable_socket"):
        socket_allow_hosts(["127.0.0.1", "::1"])
        enable_socket()
        try:
            yield
        finally:
            disable_socket()
        return
    disable_socket()
    try:
        yield
    finally:
        enable_socket()


@pytest.fixture
def catan_payload() -> dict:
    return {
        "games": [
            {
                "id": "1",
                "name": "Catan",
                "description": "d",
                "official_url": "u",
            }
        ],
        "count": 1,
    }
