"""Core layer: tool server transport, MCP client and model invocation."""

from .types import JSON, Message, StreamChunk, OnError, LanguageModel, EvalFn
from .transport import StdioTransport, build_server_env, resolve_server_command
from .client import McpTool, ToolClient, convert_mcp_tool_to_openai
from .model import OpenAIModel, TextStream, resolve_model

__all__ = [
    # Types
    "JSON",
    "Message",
    "StreamChunk",
    "OnError",
    "LanguageModel",
    "EvalFn",
    # Transport
    "StdioTransport",
    "build_server_env",
    "resolve_server_command",
    # Client
    "McpTool",
    "ToolClient",
    "convert_mcp_tool_to_openai",
    # Model
    "OpenAIModel",
    "TextStream",
    "resolve_model",
]
