"""Custom exceptions for the evaluation harness."""


class McpEvalsError(Exception):
    """Base exception for harness errors."""
    pass


class ServerPathError(McpEvalsError):
    """Raised when no tool server path was given or found on the command line."""
    pass


class TransportError(McpEvalsError):
    """Raised when the tool server subprocess cannot be started."""
    def __init__(self, server_path: str, message: str, original_error: Exception | None = None):
        self.server_path = server_path
        self.original_error = original_error
        super().__init__(f"Tool server '{server_path}' failed: {message}")


class ToolExecutionError(McpEvalsError):
    """Raised when a tool call fails."""
    def __init__(self, tool_name: str, message: str, original_error: Exception | None = None):
        self.tool_name = tool_name
        self.original_error = original_error
        super().__init__(f"Tool '{tool_name}' execution failed: {message}")


class EvalConfigError(McpEvalsError):
    """Raised when an evaluation config file is invalid."""
    pass
