"""Tests for the server CLI entry point."""

import sys
import types

import pytest

from webhook_client import server_cli


@pytest.fixture
def uvicorn_runs(monkeypatch):
    calls = []
    fake_uvicorn = types.SimpleNamespace(run=lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setitem(sys.modules, "uvicorn", fake_uvicorn)
    monkeypatch.setenv("WEBHOOK_CLIENT_LOCAL_MODE", "0")
    # setenv first so teardown also removes a value written by main
    monkeypatch.setenv("WEBHOOK_CLIENT_LOG_LEVEL", "info")
    monkeypatch.delenv("WEBHOOK_CLIENT_LOG_LEVEL")
    return calls


def test_main_runs_uvicorn(uvicorn_runs):
    server_cli.main(["--host", "127.0.0.1", "--port", "9000", "--local"])

    assert uvicorn_runs == [
        ("webhook_client.main:app", {"host": "127.0.0.1", "port": 9000, "log_level": "info"}),
    ]
    assert server_cli.os.environ["WEBHOOK_CLIENT_LOCAL_MODE"] == "1"
    assert "WEBHOOK_CLIENT_LOG_LEVEL" not in server_cli.os.environ


def test_log_level_reaches_settings_and_uvicorn(uvicorn_runs):
    server_cli.main(["--log-level", "debug"])

    assert uvicorn_runs[0][1]["log_level"] == "debug"
    assert server_cli.os.environ["WEBHOOK_CLIENT_LOG_LEVEL"] == "debug"
    assert server_cli.os.environ["WEBHOOK_CLIENT_LOCAL_MODE"] == "0"


def test_unknown_log_level_is_rejected(uvicorn_runs):
    with pytest.raises(SystemExit):
        server_cli.main(["--log-level", "verbose"])
    assert uvicorn_runs == []
