"""Text summary of batch results."""

import json
from typing import Any, Dict, List, Optional

from .types import EvalResults, SCORE_KEYS


def parse_scores(value: Any) -> Optional[Dict[str, Any]]:
    """Return the rubric object if `value` is (or encodes) one, else None."""
    if isinstance(value, str):
        text = value.strip()
        # Graders often wrap JSON in a markdown fence
        if text.startswith("```"):
            text = text.strip("`")
            if text.startswith("json"):
                text = text[4:]
        try:
            value = json.loads(text)
        except json.JSONDecodeError:
            return None
    if isinstance(value, dict) and all(k in value for k in SCORE_KEYS):
        return value
    return None


def is_error(value: Any) -> bool:
    return isinstance(value, dict) and set(value) == {"error"}


def format_report(results: EvalResults) -> str:
    """One line per evaluation: error, rubric scores, or the raw result."""
    lines: List[str] = []
    width = max((len(name) for name in results), default=0)
    for name, value in results.items():
        if is_error(value):
            lines.append(f"{name:<{width}}  ERROR  {value['error']}")
            continue
        scores = parse_scores(value)
        if scores is not None:
            score_str = " ".join(f"{k}={scores[k]}" for k in SCORE_KEYS)
            lines.append(f"{name:<{width}}  {score_str}")
            comments = scores.get("overall_comments")
            if comments:
                lines.append(f"{'':<{width}}  {comments}")
            continue
        lines.append(f"{name:<{width}}  {value}")

    failed = sum(1 for v in results.values() if is_error(v))
    lines.append("")
    lines.append(f"{len(results)} evals, {failed} failed")
    return "\n".join(lines)
