"""Code, wiki and work item search."""

from pydantic import BaseModel
from tl.azure_devops_pat_mcp_server.catalog import array, integer, string, tool_registry
from tl.azure_devops_pat_mcp_server.dispatcher import ToolContext
from typing import Any, List


TOOLS: List = []
tool = tool_registry(TOOLS)

SEARCH_TEXT = string('Search text.')
PROJECTS = array(string('Project name.'), 'Filter by projects.')
TOP = integer('Maximum results.', default=10)
SKIP = integer('Results to skip.', default=0)


@tool(
    'search_code',
    'Search for code in repositories.',
    {
        'searchText': SEARCH_TEXT,
        'project': PROJECTS,
        'repository': array(string('Repository name.'), 'Filter by repositories.'),
        'path': array(string('Path.'), 'Filter by paths.'),
        'branch': array(string('Branch name.'), 'Filter by branches.'),
        'top': TOP,
        'skip': SKIP,
    },
    required=['searchText'],
)
def search_code(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().search.search_code(
        args.search_text,
        projects=args.project,
        repositories=args.repository,
        paths=args.path,
        branches=args.branch,
        top=args.top,
        skip=args.skip,
    )


@tool(
    'search_wiki',
    'Search for wiki content.',
    {
        'searchText': SEARCH_TEXT,
        'project': PROJECTS,
        'wiki': array(string('Wiki name.'), 'Filter by wikis.'),
        'top': TOP,
        'skip': SKIP,
    },
    required=['searchText'],
)
def search_wiki(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().search.search_wiki(
        args.search_text, projects=args.project, wikis=args.wiki, top=args.top, skip=args.skip
    )


@tool(
    'search_workitem',
    'Search for work items.',
    {
        'searchText': SEARCH_TEXT,
        'project': PROJECTS,
        'workItemType': array(string('Work item type.'), 'Filter by work item types.'),
        'state': array(string('State.'), 'Filter by states.'),
        'assignedTo': array(string('User.'), 'Filter by assigned users.'),
        'top': TOP,
        'skip': SKIP,
    },
    required=['searchText'],
)
def search_workitem(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().search.search_work_items(
        args.search_text,
        projects=args.project,
        work_item_types=args.work_item_type,
        states=args.state,
        assigned_to=args.assigned_to,
        top=args.top,
        skip=args.skip,
    )
