"""Work items: reads, writes, links, comments, backlogs and saved queries."""

from pydantic import BaseModel
from tl.azure_devops_pat_mcp_server import mappings
from tl.azure_devops_pat_mcp_server.catalog import array, integer, obj, string, tool_registry
from tl.azure_devops_pat_mcp_server.dispatcher import ToolContext
from tl.azure_devops_pat_mcp_server.errors import ToolExecutionError
from tl.azure_devops_pat_mcp_server.models import BatchReport
from tl.azure_devops_pat_mcp_server.tools.batch import run_batch
from tl.azure_devops_pat_mcp_server.utils import encode_formatted_value, escape_wiql_string
from typing import Any, Dict, List, Optional


TOOLS: List = []
tool = tool_registry(TOOLS)

WORK_ITEM_EXPANDS = ['all', 'fields', 'links', 'none', 'relations']
QUERY_EXPANDS = ['all', 'clauses', 'minimal', 'none', 'wiql']
ARTIFACT_LINK = 'ArtifactLink'

MY_WORK_ITEMS_WIQL = {
    'assignedtome': (
        'SELECT [System.Id] FROM WorkItems WHERE [System.AssignedTo] = @Me '
        "AND [System.TeamProject] = '{project}' ORDER BY [System.ChangedDate] DESC"
    ),
    'myactivity': (
        'SELECT [System.Id] FROM WorkItems WHERE '
        '([System.AssignedTo] = @Me OR [System.CreatedBy] = @Me) '
        "AND [System.TeamProject] = '{project}' ORDER BY [System.ChangedDate] DESC"
    ),
}

PROJECT = string('Project name or ID.')
TEAM = string('Team name or ID.')
WORK_ITEM_ID = integer('Work item ID.')

PATCH_OPERATION = obj(
    {
        'op': string('Operation.', enum=['add', 'replace', 'remove', 'test', 'copy', 'move']),
        'path': string('Target path, e.g. /fields/System.Title or /relations/-.'),
        'value': {'description': 'Value to set.'},
    },
    required=['op', 'path'],
    description='JSON Patch operation.',
)


def work_item_url(connection: Any, work_item_id: int) -> str:
    return connection.api_url(f'_apis/wit/workItems/{work_item_id}')


def add_relation(rel: str, url: str, attributes: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """JSON Patch operation appending a relation to a work item."""
    value: Dict[str, Any] = {'rel': rel, 'url': url}
    if attributes:
        value['attributes'] = attributes
    return {'op': 'add', 'path': '/relations/-', 'value': value}


def patch_document(operations: List[Any]) -> List[Dict[str, Any]]:
    """Render patch operations as sent by the caller; an explicit ``null`` value is kept."""
    return [operation.model_dump(by_alias=True, exclude_unset=True) for operation in operations]


@tool(
    'wit_get_work_item',
    'Get a single work item by ID.',
    {
        'id': WORK_ITEM_ID,
        'project': PROJECT,
        'fields': array(string('Field reference name.'), 'Fields to include.'),
        'expand': string('Expand options.', enum=WORK_ITEM_EXPANDS),
    },
    required=['id'],
)
def get_work_item(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.get_work_item(
        args.id, args.fields, mappings.work_item_expand(args.expand), args.project
    )


@tool(
    'wit_get_work_items_batch_by_ids',
    'Get multiple work items by IDs.',
    {
        'ids': array(integer('Work item ID.'), 'Work item IDs.'),
        'project': PROJECT,
        'fields': array(string('Field reference name.'), 'Fields to include.'),
        'expand': string('Expand options.', enum=WORK_ITEM_EXPANDS),
    },
    required=['ids'],
)
def get_work_items_batch_by_ids(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.get_work_items(
        args.ids, args.fields, mappings.work_item_expand(args.expand), args.project
    )


@tool(
    'wit_create_work_item',
    'Create a new work item.',
    {
        'project': PROJECT,
        'workItemType': string('Work item type, e.g. Task, Bug, User Story.'),
        'fields': array(
            obj(
                {
                    'name': string('Field reference name, e.g. System.Title.'),
                    'value': {'description': 'Field value.'},
                    'format': string('Value format.', enum=['Html', 'Markdown']),
                },
                required=['name', 'value'],
            ),
            'Fields to set.',
        ),
    },
    required=['project', 'workItemType', 'fields'],
)
def create_work_item(ctx: ToolContext, args: BaseModel) -> Any:
    """Create a work item from field values, HTML-escaping Markdown fields."""
    document = [
        {
            'op': 'add',
            'path': f'/fields/{field.name}',
            'value': encode_formatted_value(field.value, field.format),
        }
        for field in args.fields
    ]
    return ctx.connection().work_item_tracking.create_work_item(
        document, args.project, args.work_item_type
    )


@tool(
    'wit_update_work_item',
    'Update a work item with JSON Patch operations.',
    {
        'id': WORK_ITEM_ID,
        'updates': array(PATCH_OPERATION, 'Updates to apply.'),
    },
    required=['id', 'updates'],
)
def update_work_item(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.update_work_item(
        patch_document(args.updates), args.id
    )


@tool(
    'wit_update_work_items_batch',
    'Update several work items; each item is attempted and reported separately.',
    {
        'project': PROJECT,
        'workItems': array(
            obj(
                {'id': WORK_ITEM_ID, 'updates': array(PATCH_OPERATION, 'Updates to apply.')},
                required=['id', 'updates'],
            ),
            'Work items with updates.',
        ),
    },
    required=['project', 'workItems'],
)
def update_work_items_batch(ctx: ToolContext, args: BaseModel) -> BatchReport:
    wit = ctx.connection().work_item_tracking
    return run_batch(
        'Update work items',
        args.work_items,
        lambda item: item.id,
        lambda item: wit.update_work_item(patch_document(item.updates), item.id),
    )


@tool(
    'wit_my_work_items',
    'Retrieve work items assigned to, or recently touched by, the authenticated user.',
    {
        'project': PROJECT,
        'type': string('Query type.', enum=['assignedtome', 'myactivity'], default='assignedtome'),
        'top': integer('Maximum items.', default=50),
    },
    required=['project'],
)
def my_work_items(ctx: ToolContext, args: BaseModel) -> Any:
    wiql = MY_WORK_ITEMS_WIQL[args.type].format(project=escape_wiql_string(args.project))
    return ctx.connection().work_item_tracking.query_by_wiql(wiql, args.project, args.top)


@tool(
    'wit_list_backlogs',
    'List backlogs for a team.',
    {'project': PROJECT, 'team': TEAM},
    required=['project', 'team'],
)
def list_backlogs(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work.get_backlogs(args.project, args.team)


@tool(
    'wit_list_backlog_work_items',
    'List work items in a backlog.',
    {'project': PROJECT, 'team': TEAM, 'backlogId': string('Backlog ID.')},
    required=['project', 'team', 'backlogId'],
)
def list_backlog_work_items(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work.get_backlog_level_work_items(
        args.project, args.team, args.backlog_id
    )


@tool(
    'wit_list_work_item_comments',
    'List comments on a work item.',
    {'project': PROJECT, 'workItemId': WORK_ITEM_ID},
    required=['project', 'workItemId'],
)
def list_work_item_comments(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.get_comments(args.project, args.work_item_id)


@tool(
    'wit_add_work_item_comment',
    'Add a comment to a work item.',
    {'project': PROJECT, 'workItemId': WORK_ITEM_ID, 'text': string('Comment text.')},
    required=['project', 'workItemId', 'text'],
)
def add_work_item_comment(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.add_comment(
        args.text, args.project, args.work_item_id
    )


@tool(
    'wit_list_work_item_revisions',
    'List revisions of a work item.',
    {
        'workItemId': WORK_ITEM_ID,
        'top': integer('Maximum revisions.'),
        'skip': integer('Revisions to skip.'),
    },
    required=['workItemId'],
)
def list_work_item_revisions(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.get_revisions(
        args.work_item_id, args.top, args.skip
    )


@tool(
    'wit_get_work_items_for_iteration',
    'Get work items for a specific iteration.',
    {'project': PROJECT, 'team': TEAM, 'iterationId': string('Iteration ID.')},
    required=['project', 'team', 'iterationId'],
)
def get_work_items_for_iteration(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work.get_iteration_work_items(
        args.project, args.team, args.iteration_id
    )


@tool(
    'wit_add_child_work_items',
    'Add existing work items as children of a parent; each child is linked and reported separately.',
    {
        'parentId': integer('Parent work item ID.'),
        'childIds': array(integer('Child work item ID.'), 'Child work item IDs.'),
    },
    required=['parentId', 'childIds'],
)
def add_child_work_items(ctx: ToolContext, args: BaseModel) -> BatchReport:
    """Link each child under the parent, one update per child.

    Args:
        ctx: The tool context
        args: Validated arguments with ``parent_id`` and ``child_ids``

    Returns:
        BatchReport with one result per child, in the given order
    """
    connection = ctx.connection()
    wit = connection.work_item_tracking

    def link_child(child_id: int) -> Any:
        relation = add_relation(mappings.link_type('child'), work_item_url(connection, child_id))
        return wit.update_work_item([relation], args.parent_id)

    return run_batch('Add child work items', args.child_ids, lambda child_id: child_id, link_child)


@tool(
    'wit_work_items_link',
    'Create a link between work items.',
    {
        'sourceId': integer('Source work item ID.'),
        'targetId': integer('Target work item ID.'),
        'linkType': string(
            'Link type: parent, child, related, duplicate, duplicate-of, successor, '
            'predecessor, tested-by, tests, or a link type reference name.'
        ),
        'comment': string('Link comment.'),
    },
    required=['sourceId', 'targetId', 'linkType'],
)
def work_items_link(ctx: ToolContext, args: BaseModel) -> Any:
    connection = ctx.connection()
    attributes = {'comment': args.comment} if args.comment else None
    relation = add_relation(
        mappings.link_type(args.link_type), work_item_url(connection, args.target_id), attributes
    )
    return connection.work_item_tracking.update_work_item([relation], args.source_id)


@tool(
    'wit_work_item_unlink',
    'Remove a link between work items.',
    {
        'sourceId': integer('Source work item ID.'),
        'targetId': integer('Target work item ID.'),
        'linkType': string('Link type to remove (friendly name or reference name).'),
    },
    required=['sourceId', 'targetId', 'linkType'],
)
def work_item_unlink(ctx: ToolContext, args: BaseModel) -> Any:
    """Remove the first relation of the given type that points at the target.

    Args:
        ctx: The tool context
        args: Validated arguments with ``source_id``, ``target_id`` and ``link_type``

    Returns:
        The updated source work item

    Raises:
        ToolExecutionError: If the source has no such relation
    """
    wit = ctx.connection().work_item_tracking
    work_item = wit.get_work_item(args.source_id, expand=mappings.WORK_ITEM_EXPAND['relations'])
    rel = mappings.link_type(args.link_type)
    relations = (work_item or {}).get('relations') or []
    index = next(
        (
            position
            for position, relation in enumerate(relations)
            if str(relation.get('url') or '').endswith(f'/{args.target_id}')
            and rel in str(relation.get('rel') or '')
        ),
        None,
    )
    if index is None:
        raise ToolExecutionError('Link not found')
    return wit.update_work_item([{'op': 'remove', 'path': f'/relations/{index}'}], args.source_id)


@tool(
    'wit_link_work_item_to_pull_request',
    'Link a work item to a pull request.',
    {
        'workItemId': WORK_ITEM_ID,
        'repositoryId': string('Repository ID.'),
        'pullRequestId': integer('Pull request ID.'),
    },
    required=['workItemId', 'repositoryId', 'pullRequestId'],
)
def link_work_item_to_pull_request(ctx: ToolContext, args: BaseModel) -> Any:
    """Attach a pull request to a work item as an artifact link."""
    artifact_uri = f'vstfs:///Git/PullRequestId/{args.repository_id}/{args.pull_request_id}'
    relation = add_relation(ARTIFACT_LINK, artifact_uri, {'name': 'Pull Request'})
    return ctx.connection().work_item_tracking.update_work_item([relation], args.work_item_id)


@tool(
    'wit_add_artifact_link',
    'Add an artifact link (vstfs:/// URI) to a work item.',
    {
        'workItemId': WORK_ITEM_ID,
        'artifactUri': string('Artifact URI.'),
        'linkType': string('Link type.', default=ARTIFACT_LINK),
        'comment': string('Comment.'),
    },
    required=['workItemId', 'artifactUri'],
)
def add_artifact_link(ctx: ToolContext, args: BaseModel) -> Any:
    attributes = {'comment': args.comment} if args.comment else None
    relation = add_relation(args.link_type, args.artifact_uri, attributes)
    return ctx.connection().work_item_tracking.update_work_item([relation], args.work_item_id)


@tool(
    'wit_get_work_item_type',
    'Get work item type definition.',
    {'project': PROJECT, 'type': string('Work item type name.')},
    required=['project', 'type'],
)
def get_work_item_type(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.get_work_item_type(args.project, args.type)


@tool(
    'wit_get_query',
    'Get a saved query by path or ID.',
    {
        'project': PROJECT,
        'queryPath': string('Query path or ID.'),
        'expand': string('Expand options.', enum=QUERY_EXPANDS),
    },
    required=['project', 'queryPath'],
)
def get_query(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.get_query(
        args.project, args.query_path, mappings.query_expand(args.expand)
    )


@tool(
    'wit_get_query_results_by_id',
    'Execute a saved query and get results.',
    {'project': PROJECT, 'queryId': string('Query ID.'), 'team': TEAM},
    required=['project', 'queryId'],
)
def get_query_results_by_id(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().work_item_tracking.query_by_id(args.query_id, args.project, args.team)
