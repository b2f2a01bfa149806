"""Azure DevOps PAT MCP Server.

This module wires configuration, logging, the tool catalog and the dispatcher into an
MCP server that talks to its client over stdio.
"""

import asyncio
import logfire
import os
import sys
from dotenv import find_dotenv, load_dotenv
from functools import partial
from loguru import logger
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from pathlib import Path
from tl.azure_devops_pat_mcp_server import __version__
from tl.azure_devops_pat_mcp_server.auth import ConnectionProvider
from tl.azure_devops_pat_mcp_server.catalog import ToolSpec, list_tools
from tl.azure_devops_pat_mcp_server.config import Settings, load_settings
from tl.azure_devops_pat_mcp_server.connection import AzureDevOpsConnection
from tl.azure_devops_pat_mcp_server.dispatcher import Dispatcher, ToolContext
from tl.azure_devops_pat_mcp_server.errors import ConfigurationError, ToolExecutionError
from typing import Any, Dict, Iterable, List, Optional


SERVER_NAME = 'tl.azure-devops-pat-mcp-server'


def load_config() -> None:
    """Load configuration from .env file.

    Looks for .env file in the package directory and up to 3 parent directories, then in
    the current working directory.
    """
    current_dir = Path(os.path.dirname(os.path.abspath(__file__)))

    for _ in range(4):
        env_file = current_dir / '.env'
        if env_file.exists():
            logger.info(f'Loading configuration from {env_file}')
            load_dotenv(dotenv_path=env_file)
            break
        current_dir = current_dir.parent
    else:
        env_file = find_dotenv(usecwd=True)
        if env_file:
            logger.info(f'Loading configuration from {env_file}')
            load_dotenv(dotenv_path=env_file)
        else:
            logger.warning('No .env file found. Using environment variables if available.')


SERVER_INSTRUCTIONS = """
You are an Azure DevOps expert assistant with direct access to one Azure DevOps
organization through its REST API. You can:

1. Browse projects, teams, identities and Git repositories
2. Work with branches, commits, pull requests and review threads
3. Read, create, update and link work items, backlogs and saved queries
4. Inspect builds, logs and artifacts, and start or retry pipeline runs
5. Read and edit wiki pages
6. Search code, wikis and work items across the organization
7. Manage test plans, suites, test cases and test results
8. Review Advanced Security alerts
9. Plan iterations and team capacity

Prefer listing tools to discover identifiers before calling tools that need them.
Tool results are the raw JSON returned by Azure DevOps; errors start with "Error:".
"""


def setup_logging(level: str = 'INFO') -> None:
    """Set up logging configuration.

    Application logs go to stderr (stdout carries the MCP stdio protocol) and, through
    the Logfire handler, to Logfire when ``LOGFIRE_WRITE_TOKEN`` is set.
    """
    logfire_write_token: str = os.environ.get('LOGFIRE_WRITE_TOKEN', '')
    logfire.configure(
        token=logfire_write_token or None,
        send_to_logfire='if-token-present',
        service_name=SERVER_NAME,
        service_version=__version__,
        console=False,
    )
    logger.configure(
        handlers=[
            {'sink': sys.stderr, 'level': level},
            logfire.loguru_handler(),
        ]
    )
    if not logfire_write_token:
        logger.info('LOGFIRE_WRITE_TOKEN not set; Logfire export disabled.')
    else:
        logger.info('LOGFIRE_WRITE_TOKEN successfully loaded.')


def create_dispatcher(settings: Settings, tools: Optional[Iterable[ToolSpec]] = None) -> Dispatcher:
    """Build the dispatcher; the connection itself is created on the first tool call."""
    provider = ConnectionProvider(partial(AzureDevOpsConnection, settings))
    return Dispatcher(ToolContext(provider), list_tools() if tools is None else tools)


def mcp_tools(tools: Iterable[ToolSpec]) -> List[Tool]:
    return [
        Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema)
        for spec in tools
    ]


async def call_tool(
    dispatcher: Dispatcher, name: str, arguments: Optional[Dict[str, Any]]
) -> List[TextContent]:
    """Run one tool call off the event loop.

    Raises:
        ToolExecutionError: If the call produced an error envelope; the MCP server turns
            it into an ``isError`` result carrying the envelope text
    """
    envelope = await asyncio.to_thread(dispatcher.invoke, name, arguments)
    if envelope.is_error:
        raise ToolExecutionError(envelope.text)
    return [TextContent(type='text', text=item['text']) for item in envelope.content]


def create_server(dispatcher: Dispatcher) -> Server:
    """Create the MCP server exposing every tool known to ``dispatcher``."""
    server = Server(SERVER_NAME, version=__version__, instructions=SERVER_INSTRUCTIONS)
    tools = mcp_tools(dispatcher.tools.values())

    @server.list_tools()
    async def handle_list_tools() -> List[Tool]:
        return tools

    @server.call_tool(validate_input=False)
    async def handle_call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        return await call_tool(dispatcher, name, arguments)

    return server


async def run_server(server: Server) -> None:
    """Serve MCP over stdio until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    """Main entry point to start the MCP server."""
    load_config()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.error(f'Configuration error: {str(e)}')
        sys.exit(1)

    setup_logging(settings.log_level)

    dispatcher = create_dispatcher(settings)
    server = create_server(dispatcher)

    logger.info(f'Created MCP server with {len(dispatcher.tools)} Azure DevOps tools')
    logfire.info('Azure DevOps MCP server starting', tools=len(dispatcher.tools))
    asyncio.run(run_server(server))


if __name__ == '__main__':
    main()
