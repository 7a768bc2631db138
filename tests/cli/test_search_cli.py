from __future__ import annotations

import json
from urllib.parse import parse_qs, urlsplit

import pytest
import requests
from click.testing import CliRunner

from bgatlas.cli.__main__ import cli, render_text
from bgatlas.api_clients import Game, SearchResult

SEARCH_URL = "https://api.boardgameatlas.com/api/search"


def test_prints_name_description_and_url(requests_mock, catan_payload):
    requests_mock.get(SEARCH_URL, json=catan_payload)
    runner = CliRunner()
    result = runner.invoke(cli, ["--query", "catan", "--clientId", "abc123"])
    assert result.exit_code == 0
    assert result.output == "Name: Catan\nDescription: d\nUrl: u\n\n"


def test_games_separated_by_blank_line(requests_mock):
    requests_mock.get(
        SEARCH_URL,
        json={
            "games": [
                {"name": "Root", "description": "war", "official_url": "r"},
                {"name": "Azul", "description": "tiles", "official_url": "a"},
            ],
            "count": 2,
        },
    )
    result = CliRunner().invoke(cli, ["--query", "x", "--client-id", "abc"])
    assert result.exit_code == 0
    assert result.output == (
        "Name: Root\nDescription: war\nUrl: r\n\n"
        "Name: Azul\nDescription: tiles\nUrl: a\n\n"
    )


def test_options_are_forwarded(requests_mock):
    m = requests_mock.get(SEARCH_URL, json={"games": [], "count": 0})
    result = CliRunner().invoke(
        cli,
        ["--query", "ticket to ride", "--clientId", "abc", "--limit", "5", "--skip", "10"],
    )
    assert result.exit_code == 0
    assert result.output == ""
    assert parse_qs(urlsplit(m.last_request.url).query) == {
        "name": ["ticket to ride"],
        "limit": ["5"],
        "skip": ["10"],
        "client_id": ["abc"],
    }


def test_defaults_limit_and_skip(requests_mock):
    m = requests_mock.get(SEARCH_URL, json={"games": [], "count": 0})
    CliRunner().invoke(cli, ["--query", "catan", "--clientId", "abc"])
    qs = parse_qs(urlsplit(m.last_request.url).query)
    assert qs["limit"] == ["10"]
    assert qs["skip"] == ["0"]


@pytest.mark.parametrize(
    "args, message",
    [
        (["--clientId", "abc"], "Please use --query"),
        (["--query", "   ", "--clientId", "abc"], "Please use --query"),
        (["--query", "catan"], "Please use --clientId"),
        (["--query", "catan", "--clientId", "\t "], "Please use --clientId"),
        ([], "Please use --query"),
    ],
)
def test_blank_required_options_exit_before_network(requests_mock, args, message):
    m = requests_mock.get(SEARCH_URL, json={"games": [], "count": 0})
    result = CliRunner().invoke(cli, args)
    assert result.exit_code == 1
    assert message in result.output
    assert m.call_count == 0


def test_http_error_exits_one(requests_mock):
    requests_mock.get(SEARCH_URL, status_code=404, reason="Not Found")
    result = CliRunner().invoke(cli, ["--query", "catan", "--clientId", "abc"])
    assert result.exit_code == 1
    assert "Cannot search for boardgame" in result.output
    assert "404" in result.output


def test_decode_error_exits_one(requests_mock):
    requests_mock.get(SEARCH_URL, text="{broken")
    result = CliRunner().invoke(cli, ["--query", "catan", "--clientId", "abc"])
    assert result.exit_code == 1
    assert "cannot deserialize JSON payload" in result.output


def test_transport_error_exits_one(requests_mock):
    requests_mock.get(SEARCH_URL, exc=requests.exceptions.ConnectionError("boom"))
    result = CliRunner().invoke(cli, ["--query", "catan", "--clientId", "abc"])
    assert result.exit_code == 1
    assert "boom" in result.output


def test_zero_timeout_fails_without_request(requests_mock):
    m = requests_mock.get(SEARCH_URL, json={"games": [], "count": 0})
    result = CliRunner().invoke(cli, ["--query", "catan", "--clientId", "abc", "--timeout", "0"])
    assert result.exit_code == 1
    assert "deadline exceeded" in result.output
    assert m.call_count == 0


def test_negative_limit_is_a_usage_error(requests_mock):
    m = requests_mock.get(SEARCH_URL, json={"games": [], "count": 0})
    result = CliRunner().invoke(cli, ["--query", "catan", "--clientId", "abc", "--limit", "-1"])
    assert result.exit_code == 2
    assert m.call_count == 0


def test_json_output(requests_mock, catan_payload):
    requests_mock.get(SEARCH_URL, json=catan_payload)
    result = CliRunner().invoke(cli, ["--query", "catan", "--clientId", "abc", "--json"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["count"] == 1
    assert data["games"][0]["name"] == "Catan"
    assert data["games"][0]["official_url"] == "u"
    assert data["games"][0]["year_published"] == 0


def test_color_flag_styles_labels(requests_mock, catan_payload):
    requests_mock.get(SEARCH_URL, json=catan_payload)
    result = CliRunner().invoke(cli, ["--query", "catan", "--clientId", "abc", "--color"])
    assert result.exit_code == 0
    assert "\x1b[" in result.output
    assert "Catan" in result.output


def test_render_text_empty_result():
    assert render_text(SearchResult()) == ""


def test_render_text_keeps_game_order():
    text = render_text(SearchResult(games=(Game(name="B"), Game(name="A")), count=2))
    assert text.index("B") < text.index("A")
