"""Projects, teams and identities."""

from pydantic import BaseModel
from tl.azure_devops_pat_mcp_server.catalog import boolean, integer, string, tool_registry
from tl.azure_devops_pat_mcp_server.dispatcher import ToolContext
from tl.azure_devops_pat_mcp_server.utils import filter_by_name
from typing import Any, List


TOOLS: List = []
tool = tool_registry(TOOLS)


@tool(
    'core_list_project_teams',
    'Retrieve a list of teams for the specified Azure DevOps project.',
    {
        'project': string('The name or ID of the Azure DevOps project.'),
        'mine': boolean('If true, only return teams that the authenticated user is a member of.'),
        'top': integer('Maximum number of teams to return.'),
        'skip': integer('Number of teams to skip for pagination.'),
    },
    required=['project'],
)
def list_project_teams(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().core.get_teams(args.project, args.mine, args.top, args.skip)


@tool(
    'core_list_projects',
    'Retrieve a list of projects in your Azure DevOps organization.',
    {
        'stateFilter': string(
            'Filter projects by state.', enum=['all', 'wellFormed', 'createPending', 'deleted']
        ),
        'top': integer('Maximum number of projects to return.'),
        'skip': integer('Number of projects to skip.'),
        'projectNameFilter': string('Filter projects by name (case-insensitive substring).'),
    },
)
def list_projects(ctx: ToolContext, args: BaseModel) -> Any:
    projects = ctx.connection().core.get_projects(args.state_filter, args.top, args.skip)
    return filter_by_name(projects, args.project_name_filter)


@tool(
    'core_get_identity_ids',
    'Retrieve Azure DevOps identity IDs for a provided search filter.',
    {'searchFilter': string('Search filter (unique name, display name, email).')},
    required=['searchFilter'],
)
def get_identity_ids(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().identities.search_identities(args.search_filter)
