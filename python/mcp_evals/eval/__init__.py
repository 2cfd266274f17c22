"""Eval layer - answering, grading and batch runs against a tool server."""

from .prompts import ANSWER_SYSTEM_PROMPT, DEFAULT_GRADING_PROMPT, build_grading_prompt
from .types import EvalSpec, EvalConfig, EvalResults, GradeOptions, SCORE_KEYS
from .runner import run_evals, grade, run_all_evals, normalize_grade_args, server_path_from_argv
from .loader import load_eval_config, build_eval_config
from .report import format_report, parse_scores

__all__ = [
    # Prompts
    "ANSWER_SYSTEM_PROMPT",
    "DEFAULT_GRADING_PROMPT",
    "build_grading_prompt",
    # Types
    "EvalSpec",
    "EvalConfig",
    "EvalResults",
    "GradeOptions",
    "SCORE_KEYS",
    # Runner
    "run_evals",
    "grade",
    "run_all_evals",
    "normalize_grade_args",
    "server_path_from_argv",
    # Loading and reporting
    "load_eval_config",
    "build_eval_config",
    "format_report",
    "parse_scores",
]
