"""Stdio transport to a tool server subprocess."""

import logging
import os
import sys
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any, AsyncContextManager, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from mcp import StdioServerParameters
from mcp.client.stdio import stdio_client

from ..utils.exceptions import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Runtime launcher by server file suffix
LAUNCHERS: Dict[str, str] = {
    ".ts": "tsx",
    ".mts": "tsx",
    ".cts": "tsx",
    ".js": "node",
    ".mjs": "node",
    ".cjs": "node",
}


def build_server_env(overrides: Optional[Mapping[str, Optional[str]]] = None) -> Dict[str, str]:
    """Merge the process environment with caller overrides; overrides win, None values are dropped."""
    env = {k: v for k, v in os.environ.items() if v is not None}
    for key, value in (overrides or {}).items():
        if value is not None:
            env[key] = value
    return env


def resolve_server_command(server_path: str, command: Optional[str] = None) -> Tuple[str, List[str]]:
    """
    Pick the launcher for a server file.

    Returns:
        (command, args) where args starts with the server path when a launcher is used
    """
    if command:
        return command, [server_path]
    suffix = Path(server_path).suffix.lower()
    if suffix == ".py":
        return sys.executable, [server_path]
    if suffix in LAUNCHERS:
        return LAUNCHERS[suffix], [server_path]
    # Anything else is treated as an executable
    return server_path, []


class StdioTransport:
    """
    A tool server subprocess and its stdio channel.

    The process is spawned on the first call to start(). close() tears down the
    session and the process; it may be called any number of times, including on
    a transport that never started.
    """

    def __init__(
        self,
        server_path: str,
        env: Optional[Mapping[str, Optional[str]]] = None,
        *,
        command: Optional[str] = None,
        args: Optional[Sequence[str]] = None,
        cwd: Optional[str] = None,
    ):
        self.server_path = server_path
        self.env = build_server_env(env)
        self.command, self.args = resolve_server_command(server_path, command)
        self.args = self.args + list(args or [])
        self.cwd = cwd
        self._stack = AsyncExitStack()
        self._streams: Optional[Tuple[Any, Any]] = None
        self._closed = False

    @property
    def started(self) -> bool:
        return self._streams is not None

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> Tuple[Any, Any]:
        """Spawn the server (once) and return its (read, write) streams."""
        if self._closed:
            raise TransportError(self.server_path, "transport is closed")
        if self._streams is not None:
            return self._streams

        params = StdioServerParameters(
            command=self.command,
            args=self.args,
            env=self.env,
            cwd=self.cwd,
        )
        logger.debug(f"Starting tool server: {self.command} {' '.join(self.args)}")
        try:
            self._streams = await self._stack.enter_async_context(stdio_client(params))
        except Exception as e:
            raise TransportError(self.server_path, f"could not start '{self.command}': {e}", e) from e
        return self._streams

    async def attach(self, context: AsyncContextManager[T]) -> T:
        """Enter an async context whose lifetime is bound to this transport."""
        if self._closed:
            raise TransportError(self.server_path, "transport is closed")
        return await self._stack.enter_async_context(context)

    async def close(self) -> None:
        """Close the session and stop the server process."""
        if self._closed:
            return
        self._closed = True
        logger.debug(f"Closing tool server: {self.server_path}")
        await self._stack.aclose()

    async def __aenter__(self) -> "StdioTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
