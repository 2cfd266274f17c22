"""Shared constants and exceptions."""

from .constants import MAX_RETRIES, MAX_STEPS, DEFAULT_MODEL
from .exceptions import (
    McpEvalsError,
    ServerPathError,
    TransportError,
    ToolExecutionError,
    EvalConfigError,
)

__all__ = [
    "MAX_RETRIES",
    "MAX_STEPS",
    "DEFAULT_MODEL",
    "McpEvalsError",
    "ServerPathError",
    "TransportError",
    "ToolExecutionError",
    "EvalConfigError",
]
