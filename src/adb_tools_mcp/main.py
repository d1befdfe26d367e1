#!/usr/bin/env python3
"""ADB tools MCP server - Python implementation."""

import asyncio
import logging
import subprocess
import sys
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

import structlog
import typer
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import (
    CallToolResult,
    TextContent,
    Tool,
)

from adb_tools_mcp import __version__
from adb_tools_mcp.config import ServerConfig, find_adb_path
from adb_tools_mcp.dispatch import Dispatcher
from adb_tools_mcp.operations import OPERATIONS
from adb_tools_mcp.results import ExecutionResult, Failure

logger = structlog.get_logger()


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


def configure_logging(level: LogLevel = LogLevel.INFO) -> None:
    """Send structlog output to stderr; stdout carries the MCP transport."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, LogLevel(level).value)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def check_adb_availability(adb_path: str) -> bool:
    """Check that the configured adb binary runs."""
    try:
        subprocess.run(
            [adb_path, "version"],
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        return True
    except (subprocess.CalledProcessError, OSError):
        return False


def to_call_result(result: ExecutionResult) -> CallToolResult:
    """Map a dispatch result onto the MCP tool result shape."""
    if isinstance(result, Failure):
        return CallToolResult(
            content=[TextContent(type="text", text=result.message)],
            isError=True,
        )
    return CallToolResult(content=[TextContent(type="text", text=result.stdout)])


class AdbToolsServer:
    """ADB tools MCP server implementation."""

    def __init__(self, config: ServerConfig):
        """Initialize the server."""
        self.config = config
        self.dispatcher = Dispatcher(config)
        self.server = Server("adb-tools", version=__version__)
        self.server.list_tools()(self.list_tools)
        self.server.call_tool()(self.call_tool)

    async def list_tools(self) -> List[Tool]:
        """List available tools."""
        return [
            Tool(
                name=operation.name,
                description=operation.description,
                inputSchema=operation.input_schema(),
            )
            for operation in OPERATIONS
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        """Call a tool with the given arguments."""
        try:
            if self.config.timeout is None:
                result = await self.dispatcher.dispatch(name, arguments)
            else:
                result = await asyncio.wait_for(
                    self.dispatcher.dispatch(name, arguments), self.config.timeout
                )
        except asyncio.TimeoutError:
            logger.warning("tool_call_timed_out", tool=name, timeout=self.config.timeout)
            result = self.dispatcher.cancelled(
                name, f"ADB command timed out after {self.config.timeout:g}s"
            )
        except Exception as e:
            logger.exception("tool_call_crashed", tool=name)
            return CallToolResult(
                content=[TextContent(type="text", text=f"Error: {str(e)}")],
                isError=True,
            )
        return to_call_result(result)

    async def run(self):
        """Run the server."""
        logger.info("server_starting", adb_path=self.config.adb_path, tools=len(OPERATIONS))
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


app = typer.Typer(
    name="adb-tools-mcp",
    help="MCP server exposing adb device-management tools over stdio",
    add_completion=False,
)


@app.command()
def serve(
    adb_path: Annotated[
        Optional[str],
        typer.Argument(help="Path to the adb binary (default: $ADB_PATH, then adb on PATH)"),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Abandon adb calls after this many seconds"),
    ] = None,
    log_level: Annotated[
        LogLevel,
        typer.Option("--log-level", case_sensitive=False, help="Minimum level written to stderr"),
    ] = LogLevel.INFO,
) -> None:
    """Serve the adb tool catalog over stdio."""
    configure_logging(log_level)

    resolved = find_adb_path(adb_path)
    if resolved is None or not check_adb_availability(resolved):
        typer.echo(
            "ADB is not available. Pass the adb path as an argument, set ADB_PATH, "
            "or install Android SDK Platform Tools and add it to your PATH.",
            err=True,
        )
        raise typer.Exit(code=1)

    server = AdbToolsServer(ServerConfig(adb_path=resolved, timeout=timeout))
    asyncio.run(server.run())


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
