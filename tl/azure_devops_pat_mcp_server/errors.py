"""Error types raised by the Azure DevOps PAT MCP server.

Every error that can surface to an MCP client derives from ``AzureDevOpsMcpError`` so the
dispatcher can turn it into an error-flagged envelope carrying ``str(error)``.
"""

from typing import Optional


class AzureDevOpsMcpError(Exception):
    """Base class for all server errors."""


class ConfigurationError(AzureDevOpsMcpError):
    """Missing or invalid organization URL or Personal Access Token."""


class UnknownToolError(AzureDevOpsMcpError):
    """The requested tool is not part of the catalog."""

    def __init__(self, name: str) -> None:
        """Initialize the error for the given tool name."""
        super().__init__(f'Unknown tool: {name}')
        self.name = name


class ValidationError(AzureDevOpsMcpError):
    """Tool arguments do not match the tool's declared input schema."""

    def __init__(self, tool_name: str, problems: list[str]) -> None:
        """Initialize the error.

        Args:
            tool_name: Name of the tool whose arguments were rejected
            problems: One human-readable line per offending field
        """
        super().__init__(f'Invalid arguments for {tool_name}: {"; ".join(problems)}')
        self.tool_name = tool_name
        self.problems = problems


class DownstreamCallError(AzureDevOpsMcpError):
    """Azure DevOps (or the transport in front of it) rejected or failed a request."""

    def __init__(
        self, message: str, status_code: Optional[int] = None, url: Optional[str] = None
    ) -> None:
        """Initialize the error.

        Args:
            message: Failure text, forwarded verbatim to the caller
            status_code: HTTP status code, if a response was received
            url: Request URL without query string
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.url = url


class ToolExecutionError(AzureDevOpsMcpError):
    """A tool call did not complete.

    Handlers raise it for failures detected locally (e.g. a missing branch); the MCP
    server raises it with the text of an error envelope so the protocol layer flags the
    result ``isError``.
    """
