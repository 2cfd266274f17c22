"""Load an EvalConfig from a Python file."""

import importlib.util
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Mapping, Union

from ..utils.exceptions import EvalConfigError
from .types import EvalConfig, EvalSpec

logger = logging.getLogger(__name__)


def _import_file(path: Path) -> ModuleType:
    module_name = f"mcp_evals_config_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise EvalConfigError(f"Cannot import evals file: {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise EvalConfigError(f"Cannot import evals file {path}: {e}") from e
    return module


def _to_spec(entry: Any, index: int) -> EvalSpec:
    if isinstance(entry, EvalSpec):
        return entry
    if isinstance(entry, Mapping):
        try:
            return EvalSpec(
                name=entry["name"],
                run=entry["run"],
                description=entry.get("description", ""),
            )
        except (KeyError, ValueError) as e:
            raise EvalConfigError(f"Invalid eval at index {index}: {e}") from e
    if callable(entry) and getattr(entry, "__name__", None):
        return EvalSpec(name=entry.__name__, run=entry, description=(entry.__doc__ or "").strip())
    raise EvalConfigError(f"Invalid eval at index {index}: expected EvalSpec, mapping or function, got {type(entry).__name__}")


def build_eval_config(source: Union[EvalConfig, Mapping[str, Any]]) -> EvalConfig:
    """Build an EvalConfig from an EvalConfig or a mapping with model/evals/env."""
    if isinstance(source, EvalConfig):
        return source
    if not isinstance(source, Mapping):
        raise EvalConfigError(f"Expected EvalConfig or mapping, got {type(source).__name__}")
    evals = source.get("evals")
    if evals is None or isinstance(evals, (str, bytes)):
        raise EvalConfigError("Config has no 'evals' list")
    return EvalConfig(
        model=source.get("model"),
        evals=tuple(_to_spec(e, i) for i, e in enumerate(evals)),
        env=source.get("env"),
    )


def load_eval_config(path: Union[str, Path]) -> EvalConfig:
    """
    Import a Python evals file and return its EvalConfig.

    The file defines either `config` (an EvalConfig or a mapping) or a module
    level `evals` list, with optional `model` and `env`. Evals may be EvalSpec
    instances, mappings with name/run/description, or plain functions named
    after the evaluation.
    """
    path = Path(path)
    if not path.is_file():
        raise EvalConfigError(f"Evals file not found: {path}")

    module = _import_file(path)
    if hasattr(module, "config"):
        config = build_eval_config(module.config)
    elif hasattr(module, "evals"):
        config = build_eval_config({
            "model": getattr(module, "model", None),
            "evals": module.evals,
            "env": getattr(module, "env", None),
        })
    else:
        raise EvalConfigError(f"{path} defines neither 'config' nor 'evals'")

    logger.debug(f"Loaded {len(config.evals)} evals from {path}")
    return config
