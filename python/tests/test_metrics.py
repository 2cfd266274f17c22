"""Tests for evaluation metrics."""

import pytest
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from mcp_evals import EvalConfig, EvalSpec, run_all_evals
from mcp_evals.metrics import EvalMetrics, MetricsConfig

from fakes import FakeModel


@pytest.fixture
def reader():
    return InMemoryMetricReader()


@pytest.fixture
def eval_metrics(reader):
    return EvalMetrics(MeterProvider(metric_readers=[reader]))


def collect(reader):
    """Return {metric name: [data points]}."""
    found = {}
    data = reader.get_metrics_data()
    if data is None:
        return found
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                found.setdefault(metric.name, []).extend(metric.data.data_points)
    return found


def test_record_eval(reader, eval_metrics):
    eval_metrics.record_eval("weather", 0.5)
    eval_metrics.record_eval("broken", 0.1, error="boom")

    found = collect(reader)
    runs = {p.attributes["eval.name"]: p for p in found["mcp_evals.eval.runs"]}
    assert runs["weather"].attributes["eval.status"] == "ok"
    assert runs["broken"].attributes["eval.status"] == "error"
    assert runs["weather"].value == 1
    assert "mcp_evals.eval.duration" in found


@pytest.mark.asyncio
async def test_run_all_evals_records_metrics(fake_server, reader, eval_metrics):
    fake_server.add_tool("a")
    fake_server.add_tool("b")

    def fail(model):
        raise RuntimeError("nope")

    config = EvalConfig(model=FakeModel(), evals=[EvalSpec("ok", lambda m: 1), EvalSpec("bad", fail)])
    await run_all_evals(config, "server.py", metrics=eval_metrics)

    found = collect(reader)
    [tools] = found["mcp_evals.tools.discovered"]
    assert tools.value == 2
    assert tools.attributes["server.path"] == "server.py"
    statuses = sorted(p.attributes["eval.status"] for p in found["mcp_evals.eval.runs"])
    assert statuses == ["error", "ok"]


def test_configure_disabled_is_noop():
    m = EvalMetrics()
    assert m.configure(MetricsConfig(enabled=False)) is False
    m.shutdown()


def test_unconfigured_metrics_do_not_fail():
    m = EvalMetrics()
    m.record_eval("x", 0.0)
    m.record_tools("server.py", 3)
