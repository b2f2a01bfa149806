"""Tool dispatch: name plus argument bag in, text envelope out.

``Dispatcher.invoke`` is the only place errors are caught. Unknown tools, invalid
arguments, local failures and Azure DevOps errors all become an error-flagged envelope
whose text is ``Error: <message>``.
"""

import json
import logfire
from dataclasses import dataclass, field
from loguru import logger
from tl.azure_devops_pat_mcp_server.auth import ConnectionProvider
from tl.azure_devops_pat_mcp_server.catalog import ToolSpec
from tl.azure_devops_pat_mcp_server.errors import UnknownToolError
from tl.azure_devops_pat_mcp_server.models import BatchReport
from tl.azure_devops_pat_mcp_server.validation import validate_arguments
from typing import Any, Dict, Iterable, List, Mapping, Optional


class ToolContext:
    """What a handler needs to reach Azure DevOps."""

    def __init__(self, provider: ConnectionProvider) -> None:
        """Initialize the context.

        Args:
            provider: Provider of the shared, lazily built connection
        """
        self.provider = provider

    def connection(self) -> Any:
        return self.provider.get_connection()


@dataclass
class Envelope:
    """Tool result as sent to the MCP client."""

    content: List[Dict[str, str]] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text_result(cls, text: str, is_error: bool = False) -> 'Envelope':
        return cls(content=[{'type': 'text', 'text': text}], is_error=is_error)

    @classmethod
    def error(cls, message: str) -> 'Envelope':
        return cls.text_result(f'Error: {message}', is_error=True)

    @classmethod
    def from_result(cls, result: Any) -> 'Envelope':
        """Serialize a handler result.

        Strings are passed through verbatim, anything else is rendered as indented JSON.
        A bulk report with failed items is flagged as an error but still carries the
        full report.
        """
        if isinstance(result, str):
            return cls.text_result(result)
        text = json.dumps(result, indent=2, default=str)
        return cls.text_result(text, is_error=isinstance(result, BatchReport) and result.has_failures)

    @property
    def text(self) -> str:
        return '\n'.join(item['text'] for item in self.content)

    def to_dict(self) -> Dict[str, Any]:
        return {'content': self.content, 'isError': self.is_error}


def build_dispatch_table(tools: Iterable[ToolSpec]) -> Dict[str, ToolSpec]:
    """Index tools by name.

    Raises:
        ValueError: If two tools share a name
    """
    table: Dict[str, ToolSpec] = {}
    for spec in tools:
        if spec.name in table:
            raise ValueError(f'Duplicate tool name: {spec.name}')
        table[spec.name] = spec
    return table


class Dispatcher:
    """Routes tool calls to their handlers."""

    def __init__(self, context: ToolContext, tools: Iterable[ToolSpec]) -> None:
        """Initialize the dispatcher.

        Args:
            context: Context passed to every handler
            tools: Tool descriptors; each name must be unique
        """
        self.context = context
        self.tools = build_dispatch_table(tools)

    def invoke(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Envelope:
        """Run one tool call. Never raises."""
        try:
            spec = self.tools.get(name)
            if spec is None:
                raise UnknownToolError(name)
            args = validate_arguments(name, spec.arguments_model, arguments)
            envelope = Envelope.from_result(spec.handler(self.context, args))
        except Exception as e:
            logger.error(f'Tool {name} failed: {str(e)}')
            logfire.error('Tool call failed', tool=name, error=str(e))
            return Envelope.error(str(e))

        if envelope.is_error:
            logger.warning(f'Tool {name} completed with failed items')
            logfire.warn('Tool call completed with failed items', tool=name)
        else:
            logger.info(f'Tool {name} completed')
            logfire.info('Tool call completed', tool=name)
        return envelope
