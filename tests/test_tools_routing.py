"""Every catalog tool is reachable through the dispatcher with its minimal arguments."""

from __future__ import annotations

from typing import Any

import pytest
from conftest import ORG_URL, Reply, StubAdapter
from tl.azure_devops_pat_mcp_server.auth import ConnectionProvider
from tl.azure_devops_pat_mcp_server.catalog import ToolSpec, list_tools
from tl.azure_devops_pat_mcp_server.connection import AzureDevOpsConnection
from tl.azure_devops_pat_mcp_server.dispatcher import Dispatcher, ToolContext

# Answers every route. Carries the source branch head for repo_create_branch and a
# relation to work item 1 for wit_work_item_unlink.
ANY_ROUTE_BODY = {
    'value': [{'name': 'refs/heads/main', 'objectId': 'a' * 40}],
    'relations': [{'rel': 'x', 'url': f'{ORG_URL}/_apis/wit/workItems/1'}],
}

# Tools whose handler needs one of several optional arguments.
EXTRA_ARGUMENTS: dict[str, dict[str, Any]] = {
    'repo_list_pull_requests_by_repo_or_project': {'repositoryId': 'x'},
}


def minimal_value(schema: dict[str, Any]) -> Any:
    if 'enum' in schema:
        return schema['enum'][0]
    schema_type = schema.get('type')
    if schema_type == 'integer':
        return 1
    if schema_type == 'number':
        return 1.0
    if schema_type == 'boolean':
        return True
    if schema_type == 'array':
        return [minimal_value(schema.get('items') or {})]
    if schema_type == 'object':
        return minimal_arguments(schema)
    return 'x'


def minimal_arguments(schema: dict[str, Any]) -> dict[str, Any]:
    properties = schema.get('properties', {})
    return {name: minimal_value(properties[name]) for name in schema.get('required', ())}


def recording(spec: ToolSpec, calls: list[str]) -> ToolSpec:
    def handler(ctx: Any, args: Any) -> Any:
        calls.append(spec.name)
        return spec.handler(ctx, args)

    return ToolSpec(spec.name, spec.description, spec.input_schema, handler)


@pytest.mark.parametrize('spec', list_tools(), ids=lambda spec: spec.name)
def test_tool_routes_to_its_own_handler(
    spec: ToolSpec, connection: AzureDevOpsConnection, stub: StubAdapter
) -> None:
    stub.fallback = Reply(body=ANY_ROUTE_BODY)
    calls: list[str] = []
    dispatcher = Dispatcher(
        ToolContext(ConnectionProvider(lambda: connection)),
        [recording(tool, calls) for tool in list_tools()],
    )
    arguments = {**minimal_arguments(spec.input_schema), **EXTRA_ARGUMENTS.get(spec.name, {})}

    envelope = dispatcher.invoke(spec.name, arguments)

    assert not envelope.is_error, envelope.text
    assert calls == [spec.name]
    assert stub.requests
