"""MCP client session over a transport, with tool discovery."""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp import ClientSession
from mcp.types import CallToolResult, Tool

from .transport import StdioTransport
from .types import JSON
from ..utils.exceptions import ToolExecutionError, TransportError

logger = logging.getLogger(__name__)


@dataclass
class McpTool:
    """A tool exposed by the server, callable by the model layer."""
    name: str
    description: str
    input_schema: JSON
    execute: Callable[[JSON], Awaitable[str]] = field(repr=False)


def convert_mcp_tool_to_openai(tool: McpTool) -> Dict[str, Any]:
    """Convert an MCP tool to OpenAI function calling format."""
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description or "",
            "parameters": tool.input_schema or {"type": "object", "properties": {}},
        }
    }


def result_text(result: CallToolResult) -> str:
    """Join the text content of a tool result."""
    text = "\n".join(item.text for item in result.content if getattr(item, "text", None) is not None)
    return text or str(result.content)


class ToolClient:
    """
    Wraps an initialized ClientSession.

    The tool list is fetched once per client; later calls return the cached list.
    """

    def __init__(self, session: ClientSession):
        self.session = session
        self._tools: Optional[List[Tool]] = None

    @classmethod
    async def connect(cls, transport: StdioTransport) -> "ToolClient":
        """Start the transport, open a session on it and perform the handshake."""
        read, write = await transport.start()
        try:
            session = await transport.attach(ClientSession(read, write))
            await session.initialize()
        except Exception as e:
            # Usually a server that exited right after spawning
            raise TransportError(transport.server_path, f"handshake failed: {e}", e) from e
        logger.debug(f"Connected to tool server: {transport.server_path}")
        return cls(session)

    async def list_tools(self) -> List[Tool]:
        """Return the server's tools, discovered on first call."""
        if self._tools is None:
            response = await self.session.list_tools()
            self._tools = list(response.tools or [])
            logger.debug(f"Discovered {len(self._tools)} tools: {[t.name for t in self._tools]}")
        return self._tools

    async def call_tool(self, name: str, arguments: Optional[JSON] = None) -> str:
        """Call a tool and return its text output."""
        result = await self.session.call_tool(name, arguments or {})
        if result.isError:
            raise ToolExecutionError(name, result_text(result))
        return result_text(result)

    async def tools(self) -> Dict[str, McpTool]:
        """Return the discovered tools keyed by name, bound to this session."""
        def make_execute(tool_name: str) -> Callable[[JSON], Awaitable[str]]:
            async def execute(args: JSON) -> str:
                return await self.call_tool(tool_name, args)
            return execute

        return {
            t.name: McpTool(
                name=t.name,
                description=t.description or "",
                input_schema=t.inputSchema or {},
                execute=make_execute(t.name),
            )
            for t in await self.list_tools()
        }
