"""Harness configuration read from the environment."""

import os
from dataclasses import dataclass
from typing import Optional

from .utils.constants import DEFAULT_MODEL, ENV_LOG_LEVEL, ENV_MODEL


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for model access and logging.

    Attributes:
        model: Model name used when a caller does not pass a model
        api_key: API key for the OpenAI-compatible endpoint
        base_url: Base URL for the OpenAI-compatible endpoint
        log_level: Default logging level for the CLI
    """
    model: str = DEFAULT_MODEL
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from MCP_EVALS_* and OPENAI_* environment variables."""
        return cls(
            model=os.getenv(ENV_MODEL) or DEFAULT_MODEL,
            api_key=os.getenv("OPENAI_API_KEY"),
            base_url=os.getenv("OPENAI_BASE_URL"),
            log_level=(os.getenv(ENV_LOG_LEVEL) or "INFO").upper(),
        )
