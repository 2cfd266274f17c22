"""mcp-evals - tool-use evaluations for language models against MCP servers."""

from .config import Settings
from .core import (
    LanguageModel,
    McpTool,
    OpenAIModel,
    StdioTransport,
    TextStream,
    ToolClient,
    resolve_model,
)
from .eval import (
    DEFAULT_GRADING_PROMPT,
    EvalConfig,
    EvalResults,
    EvalSpec,
    GradeOptions,
    grade,
    load_eval_config,
    run_all_evals,
    run_evals,
)
from .metrics import EvalMetrics, MetricsConfig, metrics
from .utils.exceptions import (
    EvalConfigError,
    McpEvalsError,
    ServerPathError,
    ToolExecutionError,
    TransportError,
)

__all__ = [
    # Evaluators
    "run_evals",
    "grade",
    "run_all_evals",
    # Config and types
    "EvalConfig",
    "EvalSpec",
    "EvalResults",
    "GradeOptions",
    "DEFAULT_GRADING_PROMPT",
    "Settings",
    "load_eval_config",
    # Model and transport
    "LanguageModel",
    "OpenAIModel",
    "TextStream",
    "resolve_model",
    "StdioTransport",
    "ToolClient",
    "McpTool",
    # Metrics
    "metrics",
    "MetricsConfig",
    "EvalMetrics",
    # Errors
    "McpEvalsError",
    "ServerPathError",
    "TransportError",
    "ToolExecutionError",
    "EvalConfigError",
]
