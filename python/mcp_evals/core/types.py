"""Core types for model invocation and evaluation functions."""

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Optional, Protocol, Union

if TYPE_CHECKING:
    from .client import McpTool
    from .model import TextStream

# Core type aliases
JSON = Dict[str, Any]
Message = Dict[str, Any]

# Stream chunk: {"type": "text-delta", "text_delta": str} | {"type": "tool-call", ...} | {"type": "error", "error": ...} | ...
StreamChunk = Dict[str, Any]

# Error callback invoked for errors surfaced while a completion streams
OnError = Callable[[BaseException], None]


class LanguageModel(Protocol):
    """A backend that streams tool-augmented completions."""

    def stream_text(
        self,
        *,
        system: str,
        prompt: str,
        tools: Optional[Dict[str, "McpTool"]] = None,
        max_retries: int = 1,
        max_steps: int = 10,
        on_error: Optional[OnError] = None,
    ) -> "TextStream":
        ...


# Evaluation function: takes the model, returns a result (or an awaitable of one)
EvalFn = Callable[[LanguageModel], Union[Any, Awaitable[Any]]]

__all__ = ["JSON", "Message", "StreamChunk", "OnError", "LanguageModel", "EvalFn"]
