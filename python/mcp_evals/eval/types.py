"""Evaluation config and result types."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from ..core.types import EvalFn, LanguageModel

# Numeric scores the built-in rubric asks the grader to return; overall_comments comes alongside
SCORE_KEYS: Tuple[str, ...] = ("accuracy", "completeness", "relevance", "clarity", "reasoning")

# name -> evaluation return value, or {"error": message}
EvalResults = Dict[str, Any]


@dataclass(frozen=True)
class EvalSpec:
    """A named evaluation function."""
    name: str
    run: EvalFn
    description: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("EvalSpec name is required")
        if not callable(self.run):
            raise ValueError(f"EvalSpec '{self.name}' run must be callable")


@dataclass(frozen=True)
class EvalConfig:
    """
    Evaluations to run against one tool server.

    Attributes:
        model: LanguageModel, model name, or None for the configured default
        evals: Evaluations, run in order
        env: Extra environment variables for the tool server
    """
    model: Union[LanguageModel, str, None] = None
    evals: Sequence[EvalSpec] = field(default_factory=tuple)
    env: Optional[Mapping[str, str]] = None


@dataclass(frozen=True)
class GradeOptions:
    """Normalized arguments of grade()."""
    prompt: str
    model: Union[LanguageModel, str, None] = None
    server_path: Optional[str] = None
    system_prompt: Optional[str] = None
    env: Optional[Mapping[str, str]] = None
