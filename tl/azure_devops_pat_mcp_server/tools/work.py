"""Iterations and team capacity."""

from pydantic import BaseModel
from tl.azure_devops_pat_mcp_server.catalog import (
    array,
    integer,
    number,
    obj,
    string,
    tool_registry,
)
from tl.azure_devops_pat_mcp_server.dispatcher import ToolContext
from tl.azure_devops_pat_mcp_server.models import BatchReport
from tl.azure_devops_pat_mcp_server.tools.batch import run_batch
from typing import Any, Dict, List


TOOLS: List = []
tool = tool_registry(TOOLS)

ITERATIONS_STRUCTURE_GROUP = 'iterations'
ITERATION_STRUCTURE_TYPE = 'iteration'

PROJECT = string('Project name or ID.')
TEAM = string('Team name or ID.')
ITERATION_ID = string('Iteration ID.')


def iteration_nodes(nodes: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        node
        for node in nodes
        if str(node.get('structureType') or '').lower() == ITERATION_STRUCTURE_TYPE
    ]


@tool(
    'work_list_team_iterations',
    'List iterations for a team.',
    {'project': PROJECT, 'team': TEAM, 'timeframe': string('Timeframe.', enum=['current'])},
    required=['project', 'team'],
)
def list_team_iterations(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work.get_team_iterations(args.project, args.team, args.timeframe)


@tool(
    'work_list_iterations',
    'List all iterations in a project.',
    {'project': PROJECT, 'depth': integer('Depth of children.', default=2)},
    required=['project'],
)
def list_iterations(ctx: ToolContext, args: BaseModel) -> Any:
    nodes = ctx.connection().work_item_tracking.get_classification_nodes(args.project, args.depth)
    return iteration_nodes(nodes)


@tool(
    'work_create_iterations',
    'Create new iterations; each iteration is created and reported separately.',
    {
        'project': PROJECT,
        'iterations': array(
            obj(
                {
                    'iterationName': string('Iteration name.'),
                    'startDate': string('Start date (ISO).'),
                    'finishDate': string('Finish date (ISO).'),
                },
                required=['iterationName'],
            ),
            'Iterations to create.',
        ),
    },
    required=['project', 'iterations'],
)
def create_iterations(ctx: ToolContext, args: BaseModel) -> BatchReport:
    """Create iteration nodes under the project's iteration root.

    Args:
        ctx: The tool context
        args: Validated arguments; each iteration may carry start and finish dates

    Returns:
        BatchReport keyed by iteration name
    """
    wit = ctx.connection().work_item_tracking

    def create(iteration: Any) -> Any:
        node: Dict[str, Any] = {'name': iteration.iteration_name}
        attributes = {
            key: value
            for key, value in (
                ('startDate', iteration.start_date),
                ('finishDate', iteration.finish_date),
            )
            if value
        }
        if attributes:
            node['attributes'] = attributes
        return wit.create_or_update_classification_node(
            node, args.project, ITERATIONS_STRUCTURE_GROUP
        )

    return run_batch(
        'Create iterations', args.iterations, lambda iteration: iteration.iteration_name, create
    )


@tool(
    'work_assign_iterations',
    'Assign iterations to a team; each iteration is assigned and reported separately.',
    {
        'project': PROJECT,
        'team': TEAM,
        'iterations': array(
            obj(
                {
                    'identifier': string('Iteration identifier (GUID).'),
                    'path': string('Iteration path.'),
                },
                required=['identifier'],
            ),
            'Iterations to assign.',
        ),
    },
    required=['project', 'team', 'iterations'],
)
def assign_iterations(ctx: ToolContext, args: BaseModel) -> BatchReport:
    """Add existing iterations to a team's settings, one call per iteration."""
    work = ctx.connection().work

    def assign(iteration: Any) -> Any:
        body: Dict[str, Any] = {'id': iteration.identifier}
        if iteration.path:
            body['path'] = iteration.path
        return work.post_team_iteration(body, args.project, args.team)

    return run_batch(
        'Assign iterations', args.iterations, lambda iteration: iteration.identifier, assign
    )


@tool(
    'work_get_team_capacity',
    'Get team capacity for an iteration.',
    {'project': PROJECT, 'team': TEAM, 'iterationId': ITERATION_ID},
    required=['project', 'team', 'iterationId'],
)
def get_team_capacity(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work.get_capacities_with_identity_ref_and_totals(
        args.project, args.team, args.iteration_id
    )


@tool(
    'work_update_team_capacity',
    "Update a team member's capacity for an iteration.",
    {
        'project': PROJECT,
        'team': TEAM,
        'iterationId': ITERATION_ID,
        'teamMemberId': string('Team member ID.'),
        'activities': array(
            obj(
                {
                    'name': string('Activity name, e.g. Development.'),
                    'capacityPerDay': number('Hours per day.'),
                },
                required=['name', 'capacityPerDay'],
            ),
            'Activities.',
        ),
        'daysOff': array(
            obj(
                {'start': string('Start date (ISO).'), 'end': string('End date (ISO).')},
                required=['start', 'end'],
            ),
            'Days off.',
        ),
    },
    required=['project', 'team', 'iterationId', 'teamMemberId', 'activities'],
)
def update_team_capacity(ctx: ToolContext, args: BaseModel) -> Any:
    """Replace a team member's activities and, when given, days off."""
    patch: Dict[str, Any] = {
        'activities': [
            {'name': activity.name, 'capacityPerDay': activity.capacity_per_day}
            for activity in args.activities
        ],
    }
    if args.days_off is not None:
        patch['daysOff'] = [{'start': day.start, 'end': day.end} for day in args.days_off]
    return ctx.connection().work.update_capacity_with_identity_ref(
        patch, args.project, args.team, args.iteration_id, args.team_member_id
    )


@tool(
    'work_get_iteration_capacities',
    'Get capacities for all teams in an iteration.',
    {'project': PROJECT, 'iterationId': ITERATION_ID},
    required=['project', 'iterationId'],
)
def get_iteration_capacities(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work.get_total_iteration_capacities(args.project, args.iteration_id)
