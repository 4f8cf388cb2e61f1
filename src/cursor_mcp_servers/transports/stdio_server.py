# Cursor MCP Servers
# File: transports/stdio_server.py
# Version: v3

"""STDIO entrypoint for the adapter servers.

This is the script behind the ``cursor-mcp-servers`` console command.

It:

- loads ``.env`` and configures stderr logging,
- builds the requested adapter's tool registry,
- binds it to a low-level MCP server, and
- serves newline-delimited JSON-RPC on stdin/stdout until stdin closes or
  SIGINT/SIGTERM arrives.

stdout carries protocol frames only; every log line goes to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .. import __version__
from ..config import log_level_from_env
from ..errors import ConfigurationError, ToolRegistrationError
from ..registry import ToolRegistry
from ..tools import SERVERS

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def build_server(registry: ToolRegistry) -> Server:
    """Bind a registry to an MCP server (tools/list and tools/call)."""
    server: Server = Server(registry.server_name, version=registry.version)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return registry.list_tools()

    # The registry validates arguments itself so it can phrase the errors.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        return await registry.dispatch(name, arguments)

    return server


async def run_stdio(registry: ToolRegistry, *, exit_on_signal: bool = True) -> None:
    """Serve ``registry`` over stdio.

    On SIGINT/SIGTERM the shutdown hooks run once and the process exits 0
    without waiting for the blocked stdin reader.
    """
    server = build_server(registry)
    loop = asyncio.get_running_loop()
    stop = asyncio.Event()

    def _on_signal(sig: signal.Signals) -> None:
        logger.info("Received %s. Shutting down...", sig.name)
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _on_signal, sig)
        except (NotImplementedError, RuntimeError):
            logger.debug("Signal handler for %s not supported on this platform", sig.name)

    async def _serve() -> None:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("%s started and ready to process requests", registry.server_name)
            await server.run(read_stream, write_stream, server.create_initialization_options())

    serve_task = asyncio.create_task(_serve())
    stop_task = asyncio.create_task(stop.wait())
    done, _ = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

    if serve_task in done:
        stop_task.cancel()
        try:
            serve_task.result()
        finally:
            await registry.aclose()
        return

    await registry.aclose()
    if exit_on_signal:
        logging.shutdown()
        sys.stdout.flush()
        os._exit(0)
    serve_task.cancel()


async def serve(adapter: str) -> None:
    build = SERVERS[adapter]
    registry = await build()
    logger.info(
        "Starting %s v%s with %d tools", registry.server_name, registry.version, len(registry.names())
    )
    await run_stdio(registry)


def main(argv: Optional[List[str]] = None) -> None:
    """Synchronous entrypoint for console_scripts."""
    parser = argparse.ArgumentParser(
        prog="cursor-mcp-servers",
        description="Run one MCP adapter server over stdio.",
    )
    parser.add_argument("adapter", nargs="?", choices=sorted(SERVERS), help="adapter to run")
    parser.add_argument("--list", action="store_true", help="list available adapters and exit")
    parser.add_argument("--log-level", default=None, help="overrides MCP_LOG_LEVEL (default INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    load_dotenv()
    configure_logging(args.log_level or log_level_from_env())

    if args.list:
        for name in sorted(SERVERS):
            print(name)
        return

    if not args.adapter:
        parser.error("an adapter name is required (see --list)")

    try:
        asyncio.run(serve(args.adapter))
    except (ConfigurationError, ToolRegistrationError) as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
