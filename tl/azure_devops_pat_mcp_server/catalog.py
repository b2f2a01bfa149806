"""Declarative tool catalog.

Each tool is a ``ToolSpec``: its MCP name, description, JSON input schema and handler.
Handlers are declared next to their schema with the decorator returned by
``tool_registry``; the tools package collects every area's registry into one ordered
tuple that feeds both ``list_tools`` and the dispatcher.
"""

from dataclasses import dataclass, field
from pydantic import BaseModel
from tl.azure_devops_pat_mcp_server.validation import model_from_schema
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Type


Handler = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class ToolSpec:
    """One tool of the catalog."""

    name: str
    description: str
    input_schema: Dict[str, Any] = field(compare=False)
    handler: Handler = field(compare=False, repr=False)
    arguments_model: Type[BaseModel] = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'arguments_model', model_from_schema(self.name, self.input_schema))


def string(
    description: str, enum: Optional[Sequence[str]] = None, default: Optional[str] = None
) -> Dict[str, Any]:
    schema: Dict[str, Any] = {'type': 'string', 'description': description}
    if enum:
        schema['enum'] = list(enum)
    if default is not None:
        schema['default'] = default
    return schema


def integer(description: str, default: Optional[int] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {'type': 'integer', 'description': description}
    if default is not None:
        schema['default'] = default
    return schema


def number(description: str) -> Dict[str, Any]:
    return {'type': 'number', 'description': description}


def boolean(description: str, default: Optional[bool] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {'type': 'boolean', 'description': description}
    if default is not None:
        schema['default'] = default
    return schema


def array(items: Dict[str, Any], description: str) -> Dict[str, Any]:
    return {'type': 'array', 'items': items, 'description': description}


def obj(
    properties: Optional[Dict[str, Any]] = None,
    required: Iterable[str] = (),
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """Schema for a nested object; without properties any JSON object is accepted."""
    schema: Dict[str, Any] = {'type': 'object'}
    if description:
        schema['description'] = description
    if properties:
        schema['properties'] = properties
    required = list(required)
    if required:
        schema['required'] = required
    return schema


def input_schema(properties: Dict[str, Any], required: Iterable[str] = ()) -> Dict[str, Any]:
    """Top-level tool input schema; unknown arguments are rejected."""
    schema: Dict[str, Any] = {'type': 'object', 'properties': properties}
    required = list(required)
    if required:
        schema['required'] = required
    schema['additionalProperties'] = False
    return schema


def tool_registry(registry: List[ToolSpec]) -> Callable[..., Callable[[Handler], Handler]]:
    """Return a ``@tool(name, description, properties, required)`` decorator bound to ``registry``."""

    def tool(
        name: str,
        description: str,
        properties: Optional[Dict[str, Any]] = None,
        required: Iterable[str] = (),
    ) -> Callable[[Handler], Handler]:
        def decorator(handler: Handler) -> Handler:
            registry.append(
                ToolSpec(
                    name=name,
                    description=description,
                    input_schema=input_schema(properties or {}, required),
                    handler=handler,
                )
            )
            return handler

        return decorator

    return tool


def list_tools() -> Tuple[ToolSpec, ...]:
    """Return every tool descriptor in catalog order."""
    from tl.azure_devops_pat_mcp_server.tools import TOOLS

    return TOOLS
