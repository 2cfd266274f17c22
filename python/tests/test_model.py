"""Tests for OpenAIModel streaming and TextStream."""

from types import SimpleNamespace

import pytest

from mcp_evals import McpTool, OpenAIModel, TextStream, resolve_model
from mcp_evals.config import Settings


def text(content, finish_reason=None):
    delta = SimpleNamespace(content=content, tool_calls=None)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)])


def tool_call(index, id=None, name=None, arguments=None):
    fn = SimpleNamespace(name=name, arguments=arguments)
    tc = SimpleNamespace(index=index, id=id, function=fn)
    delta = SimpleNamespace(content=None, tool_calls=[tc])
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta, finish_reason=None)])


USAGE_ONLY = SimpleNamespace(choices=[])


class FakeCompletions:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    async def create(self, **params):
        self.requests.append(dict(params, messages=list(params["messages"])))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response

        async def stream():
            for chunk in response:
                if isinstance(chunk, Exception):
                    raise chunk
                yield chunk

        return stream()


class FakeOpenAI:
    def __init__(self, *responses):
        self.completions = FakeCompletions(responses)
        self.chat = SimpleNamespace(completions=self.completions)
        self.options = []

    def with_options(self, **kwargs):
        self.options.append(kwargs)
        return self


def make_tool(name, output="ok", calls=None):
    async def execute(args):
        if calls is not None:
            calls.append(args)
        if isinstance(output, Exception):
            raise output
        return output
    return McpTool(name=name, description=f"{name} tool", input_schema={"type": "object"}, execute=execute)


async def collect(stream):
    return [chunk async for chunk in stream]


@pytest.mark.asyncio
async def test_streams_text_deltas():
    client = FakeOpenAI([text("Hel"), USAGE_ONLY, text("lo", finish_reason="stop")])
    model = OpenAIModel("gpt-test", client=client)

    stream = model.stream_text(system="sys", prompt="hi", max_retries=1, max_steps=10)
    chunks = await collect(stream)

    assert [c["text_delta"] for c in chunks if c["type"] == "text-delta"] == ["Hel", "lo"]
    assert chunks[-1] == {"type": "finish", "steps": 1}
    assert await stream.text() == "Hello"
    request = client.completions.requests[0]
    assert request["model"] == "gpt-test"
    assert request["stream"] is True
    assert request["messages"] == [{"role": "system", "content": "sys"}, {"role": "user", "content": "hi"}]
    assert "tools" not in request
    assert client.options == [{"max_retries": 1}]


@pytest.mark.asyncio
async def test_executes_tool_calls_between_steps():
    calls = []
    client = FakeOpenAI(
        [
            tool_call(0, id="call_1", name="add", arguments='{"a": 2,'),
            tool_call(0, arguments=' "b": 3}'),
        ],
        [text("It is 5.")],
    )
    model = OpenAIModel("gpt-test", client=client)
    tools = {"add": make_tool("add", output="5", calls=calls)}

    stream = model.stream_text(system="s", prompt="2+3?", tools=tools)
    chunks = await collect(stream)

    assert calls == [{"a": 2, "b": 3}]
    kinds = [c["type"] for c in chunks]
    assert kinds == ["step-finish", "tool-call", "tool-result", "text-delta", "step-finish", "finish"]
    assert await stream.text() == "It is 5."

    first, second = client.completions.requests
    assert first["tools"][0]["function"]["name"] == "add"
    assert first["tool_choice"] == "auto"
    assert second["messages"][-2]["tool_calls"][0]["function"]["arguments"] == '{"a": 2, "b": 3}'
    assert second["messages"][-1] == {"role": "tool", "tool_call_id": "call_1", "content": "5"}


@pytest.mark.asyncio
async def test_max_steps_caps_model_calls():
    looping = [tool_call(0, id="c", name="add", arguments="{}")]
    client = FakeOpenAI(looping, looping, looping)
    model = OpenAIModel("gpt-test", client=client)

    chunks = await collect(model.stream_text(system="s", prompt="p", tools={"add": make_tool("add")}, max_steps=2))

    assert len(client.completions.requests) == 2
    assert chunks[-1] == {"type": "finish", "steps": 2}


@pytest.mark.asyncio
async def test_tool_failure_is_reported_and_not_fatal():
    errors = []
    client = FakeOpenAI(
        [tool_call(0, id="c1", name="missing", arguments="{}")],
        [text("Sorry.")],
    )
    model = OpenAIModel("gpt-test", client=client)

    stream = model.stream_text(system="s", prompt="p", tools={"add": make_tool("add")}, on_error=errors.append)
    chunks = await collect(stream)

    assert len(errors) == 1
    assert "missing" in str(errors[0])
    assert any(c["type"] == "error" for c in chunks)
    assert client.completions.requests[1]["messages"][-1]["content"].startswith("Error:")
    assert await stream.text() == "Sorry."


@pytest.mark.asyncio
async def test_api_failure_is_reported_and_raised():
    errors = []
    client = FakeOpenAI([text("par"), RuntimeError("connection reset")])
    model = OpenAIModel("gpt-test", client=client)

    with pytest.raises(RuntimeError, match="connection reset"):
        await collect(model.stream_text(system="s", prompt="p", on_error=errors.append))
    assert [str(e) for e in errors] == ["connection reset"]


@pytest.mark.asyncio
async def test_text_stream_text_drains_remainder():
    async def chunks():
        yield {"type": "text-delta", "text_delta": "a"}
        yield {"type": "other"}
        yield {"type": "text-delta", "text_delta": "b"}

    stream = TextStream(chunks())
    async for chunk in stream:
        break
    assert await stream.text() == "ab"
    assert stream.done


def test_resolve_model_defaults_from_settings():
    settings = Settings(model="gpt-default", api_key="k", base_url="http://localhost:1234/v1")
    model = resolve_model(None, settings)
    assert isinstance(model, OpenAIModel)
    assert model.model == "gpt-default"
    assert model.base_url == "http://localhost:1234/v1"

    assert resolve_model("gpt-named", settings).model == "gpt-named"

    fake = object()
    assert resolve_model(fake) is fake


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("MCP_EVALS_MODEL", "gpt-env")
    monkeypatch.setenv("MCP_EVALS_LOG_LEVEL", "debug")
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    settings = Settings.from_env()
    assert settings.model == "gpt-env"
    assert settings.log_level == "DEBUG"
    assert settings.base_url is None


def test_settings_default_model(monkeypatch):
    monkeypatch.delenv("MCP_EVALS_MODEL", raising=False)
    assert Settings.from_env().model == "gpt-4o"
