"""Model invocation: streaming tool-augmented completions."""

import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from openai import AsyncOpenAI

from .client import McpTool, convert_mcp_tool_to_openai
from .types import LanguageModel, Message, OnError, StreamChunk
from ..config import Settings
from ..utils.constants import (
    CHUNK_ERROR,
    CHUNK_FINISH,
    CHUNK_STEP_FINISH,
    CHUNK_TEXT_DELTA,
    CHUNK_TOOL_CALL,
    CHUNK_TOOL_RESULT,
    MAX_RETRIES,
    MAX_STEPS,
    ROLE_ASSISTANT,
    ROLE_SYSTEM,
    ROLE_TOOL,
    ROLE_USER,
)
from ..utils.exceptions import ToolExecutionError

logger = logging.getLogger(__name__)


class TextStream:
    """
    Async iterator over the chunks of one completion.

    Text-delta fragments are accumulated as they pass through; `await text()`
    drains whatever is left and returns the full text.
    """

    def __init__(self, chunks: AsyncIterator[StreamChunk]):
        self._chunks = chunks
        self._parts: List[str] = []
        self._done = False

    def __aiter__(self) -> AsyncIterator[StreamChunk]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[StreamChunk]:
        async for chunk in self._chunks:
            if chunk.get("type") == CHUNK_TEXT_DELTA:
                self._parts.append(chunk.get("text_delta", ""))
            yield chunk
        self._done = True

    @property
    def done(self) -> bool:
        return self._done

    async def text(self) -> str:
        if not self._done:
            async for _ in self:
                pass
        return "".join(self._parts)


def _report(on_error: Optional[OnError], error: BaseException) -> None:
    if on_error is not None:
        on_error(error)


class OpenAIModel:
    """
    LanguageModel backed by an OpenAI-compatible chat completions API.

    Tool calls requested by the model are executed against the given tools and
    fed back, up to `max_steps` model calls per completion.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.temperature = temperature
        self._client = client

    def __repr__(self) -> str:
        return f"OpenAIModel(model={self.model!r})"

    @property
    def client(self) -> AsyncOpenAI:
        # Created on first use so constructing a model needs no credentials
        if self._client is None:
            client_kwargs = {}
            if self.api_key:
                client_kwargs["api_key"] = self.api_key
            if self.base_url:
                client_kwargs["base_url"] = self.base_url
            self._client = AsyncOpenAI(**client_kwargs)
        return self._client

    def stream_text(
        self,
        *,
        system: str,
        prompt: str,
        tools: Optional[Dict[str, McpTool]] = None,
        max_retries: int = MAX_RETRIES,
        max_steps: int = MAX_STEPS,
        on_error: Optional[OnError] = None,
    ) -> TextStream:
        return TextStream(self._run(system, prompt, tools or {}, max_retries, max_steps, on_error))

    async def _run(
        self,
        system: str,
        prompt: str,
        tools: Dict[str, McpTool],
        max_retries: int,
        max_steps: int,
        on_error: Optional[OnError],
    ) -> AsyncIterator[StreamChunk]:
        client = self.client.with_options(max_retries=max_retries)
        tool_schemas = [convert_mcp_tool_to_openai(t) for t in tools.values()]
        messages: List[Message] = [
            {"role": ROLE_SYSTEM, "content": system},
            {"role": ROLE_USER, "content": prompt},
        ]

        step = 0
        for step in range(1, max_steps + 1):
            request_params: Dict[str, Any] = {
                "model": self.model,
                "messages": messages,
                "stream": True,
            }
            if self.temperature is not None:
                request_params["temperature"] = self.temperature
            if tool_schemas:
                request_params["tools"] = tool_schemas
                request_params["tool_choice"] = "auto"

            content = ""
            tool_calls: List[Dict[str, Any]] = []
            finish_reason = None
            try:
                stream = await client.chat.completions.create(**request_params)
                async for chunk in stream:
                    if not chunk.choices:
                        continue
                    choice = chunk.choices[0]
                    if choice.finish_reason:
                        finish_reason = choice.finish_reason
                    delta = choice.delta
                    if delta is None:
                        continue
                    if delta.content:
                        content += delta.content
                        yield {"type": CHUNK_TEXT_DELTA, "text_delta": delta.content}
                    if delta.tool_calls:
                        for tc_delta in delta.tool_calls:
                            idx = tc_delta.index or 0
                            while len(tool_calls) <= idx:
                                tool_calls.append({
                                    "id": "",
                                    "type": "function",
                                    "function": {"name": "", "arguments": ""},
                                })
                            if tc_delta.id:
                                tool_calls[idx]["id"] = tc_delta.id
                            if tc_delta.function:
                                if tc_delta.function.name:
                                    tool_calls[idx]["function"]["name"] = tc_delta.function.name
                                if tc_delta.function.arguments:
                                    tool_calls[idx]["function"]["arguments"] += tc_delta.function.arguments
            except Exception as e:
                _report(on_error, e)
                raise

            tool_calls = [tc for tc in tool_calls if tc.get("id")]
            assistant_msg: Message = {"role": ROLE_ASSISTANT, "content": content}
            if tool_calls:
                assistant_msg["tool_calls"] = tool_calls
            messages.append(assistant_msg)
            yield {"type": CHUNK_STEP_FINISH, "step": step, "finish_reason": finish_reason}

            if not tool_calls:
                break

            for tc in tool_calls:
                name = tc["function"]["name"]
                arguments = tc["function"]["arguments"] or "{}"
                yield {"type": CHUNK_TOOL_CALL, "tool_call_id": tc["id"], "tool_name": name, "args": arguments}
                try:
                    output = await self._execute_tool(tools, name, arguments)
                except Exception as e:
                    # Tool failures go back to the model instead of ending the completion
                    _report(on_error, e)
                    yield {"type": CHUNK_ERROR, "error": e}
                    output = f"Error: {e}"
                yield {"type": CHUNK_TOOL_RESULT, "tool_call_id": tc["id"], "tool_name": name, "result": output}
                messages.append({"role": ROLE_TOOL, "tool_call_id": tc["id"], "content": output})

        yield {"type": CHUNK_FINISH, "steps": step}

    @staticmethod
    async def _execute_tool(tools: Dict[str, McpTool], name: str, arguments: str) -> str:
        tool = tools.get(name)
        if tool is None:
            raise ToolExecutionError(name, "unknown tool")
        try:
            args = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise ToolExecutionError(name, f"invalid arguments JSON: {e}", e) from e
        if not isinstance(args, dict):
            raise ToolExecutionError(name, "arguments must be a JSON object")
        return await tool.execute(args)


def resolve_model(
    model: Union[LanguageModel, str, None] = None,
    settings: Optional[Settings] = None,
) -> LanguageModel:
    """
    Turn a model reference into a LanguageModel.

    None uses the configured default model name, a string is taken as a model
    name, and anything else is returned unchanged.
    """
    if model is not None and not isinstance(model, str):
        return model
    settings = settings or Settings.from_env()
    return OpenAIModel(
        model=model or settings.model,
        api_key=settings.api_key,
        base_url=settings.base_url,
    )
