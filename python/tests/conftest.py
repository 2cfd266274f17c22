"""Shared fixtures."""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from mcp_evals.eval import runner
from fakes import FakeServer

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fake_server(monkeypatch):
    """Swap the runner's transport and client for in-memory fakes."""
    server = FakeServer()
    monkeypatch.setattr(runner, "StdioTransport", server.transport)
    monkeypatch.setattr(runner, "ToolClient", SimpleNamespace(connect=server.connect))
    return server


@pytest.fixture
def no_argv_server(monkeypatch):
    """A command line without a server path."""
    monkeypatch.setattr(sys, "argv", ["pytest"])


@pytest.fixture
def calc_server() -> str:
    """Path of the stdio MCP server used by the integration tests."""
    return str(FIXTURES / "calc_server.py")
