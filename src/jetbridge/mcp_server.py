"""MCP server proxying JetBrains IDE tools.

The tool list is dynamic (it depends on which IDE is reachable), so this
uses the low-level ``mcp`` server rather than decorator-registered tools.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.session import ServerSession
from mcp.server.stdio import stdio_server

from .config import BridgeConfig, load_config
from .errors import ConfigError
from .models.tools import InvocationResult, ToolDescriptor
from .server import BridgeServer
from .utils.logging import configure_logging

logger = logging.getLogger(__name__)

SERVER_NAME = "jetbrains/proxy"
SERVER_VERSION = "0.1.0"


class ToolListNotifier:
    """Sends ``notifications/tools/list_changed`` to the connected client.

    The client session only exists inside request handling, so the most
    recent one is remembered whenever a request comes in.
    """

    def __init__(self, server: Server) -> None:
        self.server = server
        self._session: Optional[ServerSession] = None

    def remember_session(self) -> None:
        try:
            self._session = self.server.request_context.session
        except LookupError:
            pass

    async def __call__(self) -> None:
        session = self._session
        if session is None:
            logger.debug("No client session yet, skipping tools changed notification")
            return
        logger.debug("Sending tools changed notification.")
        await session.send_tool_list_changed()


def to_mcp_tool(tool: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=tool.name,
        description=tool.description,
        inputSchema=tool.input_schema,
    )


def to_call_result(result: InvocationResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=result.text)],
        isError=result.is_error,
    )


def create_server(bridge: BridgeServer) -> Tuple[Server, ToolListNotifier]:
    """Build the MCP server and bind its handlers to a bridge."""
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)
    notifier = ToolListNotifier(server)

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        notifier.remember_session()
        logger.debug("Handling list tools request.")
        tools = await bridge.list_tools()
        return [to_mcp_tool(tool) for tool in tools]

    # Arguments are forwarded verbatim; the IDE validates them
    @server.call_tool(validate_input=False)
    async def handle_call_tool(
        name: str, arguments: Optional[Dict[str, Any]]
    ) -> types.CallToolResult:
        notifier.remember_session()
        logger.debug("Handling call tool request: name=%s", name)
        result = await bridge.call_tool(name, arguments or {})
        return to_call_result(result)

    return server, notifier


async def run_server(config: BridgeConfig) -> None:
    """Resolve the IDE once, then serve MCP over stdio until the client leaves."""
    bridge = BridgeServer(config)
    server, notifier = create_server(bridge)
    bridge.on_tools_changed = notifier

    await bridge.start()
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.debug("Server connected to transport.")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(
                    notification_options=NotificationOptions(tools_changed=True),
                ),
            )
    finally:
        await bridge.stop()


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="jetbridge",
        description="MCP server proxying the tools of a running JetBrains IDE.",
    )
    parser.add_argument(
        "config_dir",
        nargs="?",
        default=None,
        help="Directory containing .jetbridge.toml (default: current directory)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the MCP server.

    Environment:
        IDE_PORT    - use this IDE port instead of scanning
        HOST        - IDE host (default 127.0.0.1)
        LOG_ENABLED - "true" for verbose diagnostics on stderr

    Example:
        IDE_PORT=63342 jetbridge
    """
    args = _parse_args(argv)
    config_dir = Path(args.config_dir).resolve() if args.config_dir else Path.cwd()

    try:
        config = load_config(config_dir)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    configure_logging(config.logging)

    # Stdout is reserved for the MCP protocol
    backend = config.backend
    if backend.port is not None:
        target = f"{backend.host}:{backend.port}"
    else:
        target = f"{backend.host}:{backend.port_range_start}-{backend.port_range_end}"
    print("🚀 Starting JetBrains MCP proxy", file=sys.stderr)
    print(f"🔌 IDE: {target}", file=sys.stderr)
    print("", file=sys.stderr)

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
