"""Tests for the mcp-eval command line."""

import json

import pytest

from mcp_evals.eval import cli
from mcp_evals.utils.exceptions import TransportError

EVALS_FILE = """
def ok(model):
    return "fine"
"""


@pytest.fixture
def evals_file(tmp_path):
    path = tmp_path / "evals.py"
    path.write_text(EVALS_FILE, encoding="utf-8")
    return path


def fake_run(results=None, error=None, seen=None):
    async def run_all_evals(config, server_path, **kwargs):
        if seen is not None:
            seen.append((config, server_path))
        if error is not None:
            raise error
        return results
    return run_all_evals


def test_all_passing_exits_zero(monkeypatch, evals_file, capsys):
    seen = []
    monkeypatch.setattr(cli, "run_all_evals", fake_run({"ok": "fine"}, seen=seen))

    assert cli.main([str(evals_file), "server.py"]) == 0

    config, server_path = seen[0]
    assert [e.name for e in config.evals] == ["ok"]
    assert server_path == "server.py"
    out = capsys.readouterr().out
    assert "1 evals, 0 failed" in out


def test_failed_eval_exits_one_and_writes_output(monkeypatch, evals_file, tmp_path):
    results = {"ok": "fine", "bad": {"error": "boom"}}
    monkeypatch.setattr(cli, "run_all_evals", fake_run(results))
    output = tmp_path / "out" / "results.json"

    assert cli.main([str(evals_file), "server.py", "--output", str(output), "--log-level", "DEBUG"]) == 1
    assert json.loads(output.read_text(encoding="utf-8")) == results


def test_harness_error_exits_two(monkeypatch, evals_file):
    monkeypatch.setattr(cli, "run_all_evals", fake_run(error=TransportError("server.py", "spawn failed")))
    assert cli.main([str(evals_file), "server.py"]) == 2


def test_missing_evals_file_exits_two(tmp_path):
    assert cli.main([str(tmp_path / "nope.py"), "server.py"]) == 2


def test_requires_server_path():
    with pytest.raises(SystemExit):
        cli.main(["evals.py"])


def test_evals_file_syntax_error_exits_two(tmp_path):
    path = tmp_path / "evals.py"
    path.write_text("evals = [\n", encoding="utf-8")
    assert cli.main([str(path), "server.py"]) == 2
