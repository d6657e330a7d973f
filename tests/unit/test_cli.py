"""Tests for the command line entry points."""

import pytest

from services.todo_api import __main__ as todo_cli
from services.voter_api import __main__ as voter_cli


@pytest.fixture
def uvicorn_calls(monkeypatch):
    """Record uvicorn.run calls instead of starting a server."""
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))
    return calls


@pytest.mark.parametrize("cli", [voter_cli, todo_cli])
def test_debug_flag_sets_log_level(cli, uvicorn_calls):
    cli.main(["--port", "9000", "--debug"])

    app, kwargs = uvicorn_calls[0]
    assert kwargs == {"host": cli.settings.HOST, "port": 9000, "log_level": "debug"}
    assert app.state.settings.DEBUG is True


@pytest.mark.parametrize("cli", [voter_cli, todo_cli])
def test_default_log_level(cli, uvicorn_calls):
    cli.main(["--store", "memory"])

    _, kwargs = uvicorn_calls[0]
    assert kwargs["log_level"] == "info"
    assert kwargs["port"] == cli.settings.PORT
