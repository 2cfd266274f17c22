"""Answer, grade and batch evaluation against a tool server."""

import inspect
import logging
import sys
import time
from contextvars import ContextVar
from typing import Any, Mapping, Optional

from ..core.client import ToolClient
from ..core.model import resolve_model
from ..core.transport import StdioTransport
from ..core.types import LanguageModel
from ..metrics import EvalMetrics, metrics as default_metrics
from ..utils.constants import CHUNK_TEXT_DELTA, MAX_RETRIES, MAX_STEPS
from ..utils.exceptions import ServerPathError
from .prompts import ANSWER_SYSTEM_PROMPT, DEFAULT_GRADING_PROMPT, build_grading_prompt
from .types import EvalConfig, EvalResults, GradeOptions

logger = logging.getLogger(__name__)

# Server of the batch currently running; grade() falls back to it before sys.argv
current_server_path: ContextVar[Optional[str]] = ContextVar("mcp_evals_server_path", default=None)


def _log_stream_error(error: BaseException) -> None:
    logger.error(f"Model stream error: {error}", exc_info=error)


def server_path_from_argv() -> Optional[str]:
    """Server path given on the command line as `mcp-eval EVALS_FILE SERVER_PATH`."""
    return sys.argv[2] if len(sys.argv) > 2 else None


async def _answer(model: LanguageModel, prompt: str, client: ToolClient) -> str:
    tools = await client.tools()
    result = model.stream_text(
        system=ANSWER_SYSTEM_PROMPT,
        prompt=prompt,
        tools=tools,
        max_retries=MAX_RETRIES,
        max_steps=MAX_STEPS,
        on_error=_log_stream_error,
    )

    full_text = ""
    try:
        async for chunk in result:
            if chunk.get("type") == CHUNK_TEXT_DELTA:
                full_text += chunk.get("text_delta", "")
    except Exception as e:
        logger.error(f"Error in run_evals: {e}")
        raise
    return full_text


async def run_evals(
    model: LanguageModel,
    prompt: str,
    server_path: str,
    env: Optional[Mapping[str, str]] = None,
    *,
    client: Optional[ToolClient] = None,
) -> str:
    """
    Answer a prompt with the tools of a tool server.

    Spawns the server at `server_path`, streams the model's tool-augmented
    answer and returns the concatenated text. The server is stopped before
    returning, on success or failure.

    Args:
        model: Model to answer with
        prompt: User prompt
        server_path: Tool server file or executable
        env: Extra environment variables for the server
        client: Already connected client to use instead of spawning the server;
                its owner stays responsible for closing it

    Returns:
        The answer text
    """
    if client is not None:
        return await _answer(model, prompt, client)

    async with StdioTransport(server_path, env=env) as transport:
        client = await ToolClient.connect(transport)
        return await _answer(model, prompt, client)


def normalize_grade_args(*args: Any, **kwargs: Any) -> GradeOptions:
    """
    Accept every supported grade() call form and return GradeOptions.

    Forms:
      - grade(GradeOptions(...))
      - grade({"prompt": ..., "model": ..., "server_path": ..., "system_prompt": ...})
      - grade(prompt=..., model=..., server_path=..., system_prompt=...)
      - grade(model, prompt, server_path=None)  (legacy, always uses the default rubric)
    """
    if len(args) == 1 and not kwargs and isinstance(args[0], GradeOptions):
        return args[0]
    if len(args) == 1 and not kwargs and isinstance(args[0], Mapping) and "prompt" in args[0]:
        return GradeOptions(**args[0])
    if not args:
        if "prompt" not in kwargs:
            raise TypeError("grade() requires a prompt")
        return GradeOptions(**kwargs)

    if len(args) > 3:
        raise TypeError(f"grade() takes at most 3 positional arguments ({len(args)} given)")
    model = args[0]
    prompt = args[1] if len(args) > 1 else kwargs.pop("prompt", None)
    server_path = args[2] if len(args) > 2 else kwargs.pop("server_path", None)
    if kwargs:
        raise TypeError(f"grade() got unexpected keyword arguments: {sorted(kwargs)}")
    if prompt is None:
        raise TypeError("grade() requires a prompt")
    return GradeOptions(prompt=prompt, model=model, server_path=server_path)


async def grade(*args: Any, **kwargs: Any) -> str:
    """
    Answer a prompt with run_evals(), then have the model grade the answer.

    See normalize_grade_args() for the accepted call forms. Without a system
    prompt the built-in rubric is used. Without a server path, the server of the
    enclosing run_all_evals() batch is used, then the one given on the command
    line.

    Returns:
        The grader's text verbatim (JSON per the rubric, not validated)

    Raises:
        ServerPathError: If no server path is available; raised before any
            model call or subprocess
    """
    options = normalize_grade_args(*args, **kwargs)

    server_path = options.server_path or current_server_path.get() or server_path_from_argv()
    if not server_path:
        raise ServerPathError("Server path not provided")

    model = resolve_model(options.model)
    system_prompt = options.system_prompt if options.system_prompt is not None else DEFAULT_GRADING_PROMPT

    answer = await run_evals(model, options.prompt, server_path, env=options.env)

    result = model.stream_text(
        system=system_prompt,
        prompt=build_grading_prompt(options.prompt, answer),
        max_retries=MAX_RETRIES,
        max_steps=MAX_STEPS,
        on_error=_log_stream_error,
    )
    async for _ in result:
        pass
    return await result.text()


async def run_all_evals(
    config: EvalConfig,
    server_path: str,
    *,
    metrics: Optional[EvalMetrics] = None,
) -> EvalResults:
    """
    Run every evaluation in `config`, in order, against one tool server.

    A failing evaluation is recorded as {"error": message} and the batch goes
    on. The server is stopped exactly once before returning or raising.

    Returns:
        Mapping of evaluation name to result; a repeated name keeps the last result
    """
    metrics = metrics or default_metrics
    results: EvalResults = {}
    model = resolve_model(config.model)

    token = current_server_path.set(server_path)
    transport = StdioTransport(server_path, env=config.env)
    try:
        client = await ToolClient.connect(transport)
        tools = await client.list_tools()
        logger.info(f"Connected to {server_path} ({len(tools)} tools)")
        metrics.record_tools(server_path, len(tools))

        for evaluation in config.evals:
            logger.info(f"Running {evaluation.name}...")
            t0 = time.perf_counter()
            error: Optional[str] = None
            try:
                result = evaluation.run(model)
                if inspect.isawaitable(result):
                    result = await result
                results[evaluation.name] = result
            except Exception as e:
                logger.error(f"Error running {evaluation.name}: {e}", exc_info=True)
                error = str(e)
                results[evaluation.name] = {"error": error}
            metrics.record_eval(evaluation.name, time.perf_counter() - t0, error)

        return results
    finally:
        await transport.close()
        current_server_path.reset(token)
