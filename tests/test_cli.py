"""Tests for the terminal client."""

import json

import httpx
import pytest
from rich.console import Console
from typer.testing import CliRunner

from pogo_accounts import cli
from pogo_accounts.client import PogoAccountsClient

ACCOUNT_ID = "507f1f77bcf86cd799439011"

runner = CliRunner()


@pytest.fixture
def api(monkeypatch):
    """Route the CLI's client through a recording mock transport."""

    state = {"requests": [], "handler": None}

    def handler(request):
        state["requests"].append(request)
        return state["handler"](request)

    transport = httpx.MockTransport(handler)
    monkeypatch.setattr(
        cli, "PogoAccountsClient", lambda base_url: PogoAccountsClient(base_url, transport=transport)
    )
    monkeypatch.setattr(cli, "console", Console(width=200))
    return state


def test_list_renders_values_as_text(api):
    api["handler"] = lambda request: httpx.Response(
        200,
        json=[{"id": ACCOUNT_ID, "username": "[bold]ash[/bold]", "email": "a@b.io", "team": "valor"}],
    )
    result = runner.invoke(cli.app, ["list"])
    assert result.exit_code == 0
    assert "[bold]ash[/bold]" in result.stdout
    assert ACCOUNT_ID in result.stdout


def test_list_empty(api):
    api["handler"] = lambda request: httpx.Response(200, json=[])
    result = runner.invoke(cli.app, ["list"])
    assert result.exit_code == 0
    assert "No accounts found" in result.stdout


def test_add_posts_only_given_fields(api):
    api["handler"] = lambda request: httpx.Response(
        201, json={"message": "Account created successfully", "id": ACCOUNT_ID}
    )
    result = runner.invoke(
        cli.app, ["add", "-u", "ash", "-e", "ash@example.com", "-t", "valor", "--level", "12"]
    )
    assert result.exit_code == 0
    assert json.loads(api["requests"][0].content) == {
        "username": "ash",
        "email": "ash@example.com",
        "team": "valor",
        "level": 12,
    }


def test_add_reports_server_error(api):
    api["handler"] = lambda request: httpx.Response(400, json={"error": "team is required"})
    result = runner.invoke(cli.app, ["add", "-u", "ash", "-e", "ash@example.com", "-t", "red"])
    assert result.exit_code == 1


def test_edit_merges_and_unescapes_current_values(api):
    current = {
        "id": ACCOUNT_ID,
        "username": "ash",
        "email": "o&amp;#x27;brien@example.com",
        "team": "valor",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }

    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json=current)
        return httpx.Response(200, json={"message": "Account updated successfully", "username": "ash"})

    api["handler"] = handler
    result = runner.invoke(cli.app, ["edit", ACCOUNT_ID, "--level", "30"])
    assert result.exit_code == 0
    assert json.loads(api["requests"][1].content) == {
        "username": "ash",
        "email": "o'brien@example.com",
        "team": "valor",
        "level": 30,
    }


def test_delete_rejects_bad_id_without_request(api):
    api["handler"] = lambda request: httpx.Response(500)
    result = runner.invoke(cli.app, ["delete", "short-id", "--yes"])
    assert result.exit_code == 1
    assert api["requests"] == []


def test_delete_asks_for_confirmation(api):
    api["handler"] = lambda request: httpx.Response(
        200, json={"message": "Account deleted successfully", "deletedId": ACCOUNT_ID}
    )
    result = runner.invoke(cli.app, ["delete", ACCOUNT_ID], input="n\n")
    assert result.exit_code == 0
    assert api["requests"] == []

    result = runner.invoke(cli.app, ["delete", ACCOUNT_ID], input="y\n")
    assert result.exit_code == 0
    assert [r.method for r in api["requests"]] == ["DELETE"]


def test_unescape_text_reverses_server_escaping():
    from pogo_accounts.services.sanitize import escape_text

    for value in ["o'brien", "<b>&amp;</b>", "a/b\\c`d\""]:
        assert cli.unescape_text(escape_text(value)) == value


def test_health_prints_status(api):
    api["handler"] = lambda request: httpx.Response(
        200, json={"status": "OK", "timestamp": "2024-01-01T00:00:00Z"}
    )
    result = runner.invoke(cli.app, ["health"])
    assert result.exit_code == 0
    assert "OK" in result.stdout
    assert "2024-01-01T00:00:00Z" in result.stdout
    assert api["requests"][0].url.path == "/health"


def test_health_reports_unreachable_api(api):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    api["handler"] = handler
    result = runner.invoke(cli.app, ["health"])
    assert result.exit_code == 1
