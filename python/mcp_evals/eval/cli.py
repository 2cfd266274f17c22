"""CLI interface: run an evals file against a tool server."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import Settings
from ..metrics import MetricsConfig, metrics
from ..utils.exceptions import McpEvalsError
from .loader import load_eval_config
from .report import format_report, is_error
from .runner import run_all_evals


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mcp-eval",
        description="Run tool-use evaluations against an MCP server",
    )
    p.add_argument("evals_file", type=Path, help="Python file defining `config` or `evals`")
    p.add_argument("server_path", help="Tool server to spawn (.py, .ts, .js or an executable)")
    p.add_argument("--output", type=Path, help="Write results as JSON to this file")
    p.add_argument("--metrics", action="store_true", help="Export OpenTelemetry metrics over OTLP/HTTP")
    p.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: MCP_EVALS_LOG_LEVEL or INFO)",
    )
    return p


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    settings = Settings.from_env()
    log_level = getattr(logging, (args.log_level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(level=log_level)
    logger = logging.getLogger(__name__)

    if args.metrics:
        metrics.configure(MetricsConfig())

    try:
        config = load_eval_config(args.evals_file)
        results = asyncio.run(run_all_evals(config, args.server_path))
    except McpEvalsError as e:
        logger.error(str(e))
        return 2
    finally:
        metrics.shutdown()

    print(format_report(results))

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(json.dumps(results, indent=2, ensure_ascii=False, default=str), encoding="utf-8")

    return 1 if any(is_error(v) for v in results.values()) else 0


if __name__ == "__main__":
    sys.exit(main())
