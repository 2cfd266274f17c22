"""Constants for the evaluation harness."""

# Caps handed to every model invocation
MAX_RETRIES = 1
MAX_STEPS = 10

# Stream chunk kinds
CHUNK_TEXT_DELTA = "text-delta"
CHUNK_TOOL_CALL = "tool-call"
CHUNK_TOOL_RESULT = "tool-result"
CHUNK_STEP_FINISH = "step-finish"
CHUNK_ERROR = "error"
CHUNK_FINISH = "finish"

# Message roles
ROLE_SYSTEM = "system"
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_TOOL = "tool"

# Environment variables
ENV_MODEL = "MCP_EVALS_MODEL"
ENV_LOG_LEVEL = "MCP_EVALS_LOG_LEVEL"

DEFAULT_MODEL = "gpt-4o"
