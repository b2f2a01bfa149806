"""Wikis and wiki pages."""

from pydantic import BaseModel
from tl.azure_devops_pat_mcp_server.catalog import integer, string, tool_registry
from tl.azure_devops_pat_mcp_server.dispatcher import ToolContext
from typing import Any, List


TOOLS: List = []
tool = tool_registry(TOOLS)

WIKI_IDENTIFIER = string('Wiki name or ID.')
PROJECT = string('Project name or ID.')


@tool(
    'wiki_list_wikis',
    'List wikis for a project, or for the whole organization when no project is given.',
    {'project': PROJECT},
)
def list_wikis(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().wiki.get_all_wikis(args.project)


@tool(
    'wiki_get_wiki',
    'Get a specific wiki by identifier.',
    {'wikiIdentifier': WIKI_IDENTIFIER, 'project': PROJECT},
    required=['wikiIdentifier'],
)
def get_wiki(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().wiki.get_wiki(args.wiki_identifier, args.project)


@tool(
    'wiki_list_pages',
    'List pages in a wiki. Pass the returned continuationToken to fetch the next batch.',
    {
        'wikiIdentifier': WIKI_IDENTIFIER,
        'project': PROJECT,
        'top': integer('Maximum pages.', default=20),
        'continuationToken': string('Continuation token from a previous call.'),
    },
    required=['wikiIdentifier', 'project'],
)
def list_pages(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().wiki.get_pages_batch(
        args.wiki_identifier, args.project, args.top, args.continuation_token
    )


@tool(
    'wiki_get_page',
    'Get wiki page metadata.',
    {
        'wikiIdentifier': WIKI_IDENTIFIER,
        'project': PROJECT,
        'path': string('Page path, e.g. /Home.'),
        'recursionLevel': string('Recursion level.', enum=['None', 'OneLevel', 'Full']),
    },
    required=['wikiIdentifier', 'project', 'path'],
)
def get_page(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().wiki.get_page(
        args.wiki_identifier, args.project, args.path, args.recursion_level
    )


@tool(
    'wiki_get_page_content',
    'Get the markdown content of a wiki page.',
    {
        'wikiIdentifier': WIKI_IDENTIFIER,
        'project': PROJECT,
        'path': string('Page path.', default='/'),
    },
    required=['wikiIdentifier', 'project'],
)
def get_page_content(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().wiki.get_page_text(args.wiki_identifier, args.project, args.path)


@tool(
    'wiki_create_or_update_page',
    'Create a wiki page, or update it when it already exists.',
    {
        'wikiIdentifier': WIKI_IDENTIFIER,
        'project': PROJECT,
        'path': string('Page path.'),
        'content': string('Page content (markdown).'),
        'etag': string('ETag of the page version being updated.'),
    },
    required=['wikiIdentifier', 'path', 'content'],
)
def create_or_update_page(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().wiki.create_or_update_page(
        args.wiki_identifier, args.path, args.content, args.project, args.etag
    )
