"""Argument validation derived from each tool's JSON input schema.

Every tool gets a pydantic model built from its schema. Model attributes are the
snake_case form of the schema's camelCase property names, which stay as aliases, so
handlers read ``args.repository_id`` while callers send ``repositoryId``.
"""

import re
from pydantic import BaseModel, ConfigDict, Field, create_model
from pydantic import ValidationError as PydanticValidationError
from tl.azure_devops_pat_mcp_server.errors import ValidationError
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Type


_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')

_SCALARS: Dict[str, Any] = {
    'string': str,
    'integer': int,
    'number': float,
    'boolean': bool,
}

_TOP_LEVEL_CONFIG = ConfigDict(extra='forbid', populate_by_name=True)
_NESTED_CONFIG = ConfigDict(extra='allow', populate_by_name=True)


def attribute_name(property_name: str) -> str:
    """``repositoryId`` -> ``repository_id``; names clashing with model attributes get ``_``."""
    name = _CAMEL_BOUNDARY.sub('_', property_name).lower()
    if hasattr(BaseModel, name):
        name += '_'
    return name


def _model_name(name: str) -> str:
    return ''.join(part.capitalize() for part in re.split(r'[^0-9A-Za-z]+', name) if part)


def _annotation(schema: Mapping[str, Any], name: str) -> Any:
    if 'enum' in schema:
        return Literal[tuple(schema['enum'])]
    schema_type = schema.get('type')
    if schema_type in _SCALARS:
        return _SCALARS[schema_type]
    if schema_type == 'array':
        return List[_annotation(schema.get('items') or {}, f'{name}_item')]
    if schema_type == 'object':
        if schema.get('properties'):
            return model_from_schema(name, schema)
        return Dict[str, Any]
    return Any


def model_from_schema(name: str, schema: Mapping[str, Any]) -> Type[BaseModel]:
    """Build a pydantic model for an object schema.

    Args:
        name: Tool (or nested property) name, used to name the model
        schema: JSON schema of ``type: object``

    Returns:
        A model that forbids unknown properties when the schema sets
        ``additionalProperties: false`` and keeps them otherwise
    """
    required = set(schema.get('required', ()))
    fields: Dict[str, Tuple[Any, Any]] = {}
    for property_name, property_schema in schema.get('properties', {}).items():
        annotation = _annotation(property_schema, f'{name}_{property_name}')
        description = property_schema.get('description')
        if property_name in required:
            field = Field(..., alias=property_name, description=description)
        else:
            annotation = Optional[annotation]
            field = Field(property_schema.get('default'), alias=property_name, description=description)
        fields[attribute_name(property_name)] = (annotation, field)

    config = _TOP_LEVEL_CONFIG if schema.get('additionalProperties') is False else _NESTED_CONFIG
    return create_model(_model_name(name) + 'Arguments', __config__=config, **fields)


def _problem(error: Dict[str, Any]) -> str:
    location = '.'.join(str(part) for part in error.get('loc', ())) or 'arguments'
    return f'{location}: {error.get("msg")}'


def validate_arguments(
    tool_name: str, model: Type[BaseModel], arguments: Optional[Mapping[str, Any]]
) -> BaseModel:
    """Validate raw tool arguments.

    Args:
        tool_name: Name of the tool, used in the error message
        model: Model derived from the tool's input schema
        arguments: Argument bag from the caller; ``None`` is treated as ``{}``

    Returns:
        The validated arguments with schema defaults applied

    Raises:
        ValidationError: If the arguments do not match the schema
    """
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise ValidationError(tool_name, ['arguments: must be an object'])
    try:
        return model.model_validate(dict(arguments))
    except PydanticValidationError as e:
        raise ValidationError(tool_name, [_problem(error) for error in e.errors()]) from e
