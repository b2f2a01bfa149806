"""Advanced Security alerts."""

from pydantic import BaseModel
from tl.azure_devops_pat_mcp_server import mappings
from tl.azure_devops_pat_mcp_server.catalog import (
    array,
    boolean,
    integer,
    string,
    tool_registry,
)
from tl.azure_devops_pat_mcp_server.dispatcher import ToolContext
from typing import Any, List


TOOLS: List = []
tool = tool_registry(TOOLS)

PROJECT = string('Project name or ID.')
REPOSITORY = string('Repository name or ID.')


@tool(
    'advsec_get_alerts',
    'Get Advanced Security alerts for a repository, most severe first.',
    {
        'project': PROJECT,
        'repository': REPOSITORY,
        'alertType': string('Filter by alert type: dependency, secret or code.'),
        'states': array(
            string('Alert state.'), 'Filter by states: active, dismissed, fixed, autoDismissed.'
        ),
        'severities': array(
            string('Alert severity.'),
            'Filter by severities: low, medium, high, critical, note, warning, error.',
        ),
        'top': integer('Maximum alerts.', default=100),
        'onlyDefaultBranch': boolean('Only alerts on the default branch.', default=True),
    },
    required=['project', 'repository'],
)
def get_alerts(ctx: ToolContext, args: BaseModel) -> Any:
    """Alerts of a repository, with friendly filter names mapped to API values."""
    return ctx.connection().alerts.get_alerts(
        args.project,
        args.repository,
        top=args.top,
        alert_type=mappings.map_enum(args.alert_type, mappings.ALERT_TYPE),
        states=mappings.map_enum_list(args.states, mappings.ALERT_STATE),
        severities=mappings.map_enum_list(args.severities, mappings.ALERT_SEVERITY),
        only_default_branch=args.only_default_branch,
    )


@tool(
    'advsec_get_alert_details',
    'Get details of a specific alert.',
    {
        'project': PROJECT,
        'repository': REPOSITORY,
        'alertId': integer('Alert ID.'),
        'ref': string('Git reference.'),
    },
    required=['project', 'repository', 'alertId'],
)
def get_alert_details(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().alerts.get_alert(
        args.project, args.repository, args.alert_id, args.ref
    )
