"""Git repositories, branches, commits and pull requests."""

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
from tl.azure_devops_pat_mcp_server.errors import ToolExecutionError
from tl.azure_devops_pat_mcp_server.utils import (
    branch_ref,
    branch_refs,
    filter_by_name,
    page,
    short_branch_name,
)
from typing import Any, Dict, List


TOOLS: List = []
tool = tool_registry(TOOLS)

EMPTY_OBJECT_ID = '0' * 40
COMMENT_TYPE_TEXT = 1
PULL_REQUEST_QUERY_COMMITS = 1

PULL_REQUEST_STATUSES = ['Active', 'Abandoned', 'Completed', 'All', 'NotSet']
THREAD_STATUSES = ['active', 'fixed', 'wontFix', 'closed', 'pending']

REPOSITORY_ID = string('The repository name or ID.')
PULL_REQUEST_ID = integer('The pull request ID.')
THREAD_ID = integer('The thread ID.')


@tool(
    'repo_list_repos_by_project',
    'Retrieve a list of repositories for a given project.',
    {
        'project': string('The project name or ID.'),
        'top': integer('Maximum repositories to return.', default=100),
        'skip': integer('Repositories to skip.', default=0),
        'repoNameFilter': string('Filter by name (case-insensitive substring).'),
    },
    required=['project'],
)
def list_repos_by_project(ctx: ToolContext, args: BaseModel) -> Any:
    repositories = ctx.connection().git.get_repositories(args.project)
    return page(filter_by_name(repositories, args.repo_name_filter), args.skip, args.top)


@tool(
    'repo_get_repo_by_name_or_id',
    'Get a repository by its name or ID.',
    {'repositoryId': REPOSITORY_ID, 'project': string('The project name or ID.')},
    required=['repositoryId'],
)
def get_repo_by_name_or_id(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().git.get_repository(args.repository_id, args.project)


@tool(
    'repo_list_branches_by_repo',
    'Retrieve the branch names of a repository.',
    {
        'repositoryId': REPOSITORY_ID,
        'top': integer('Maximum branches to return.', default=100),
        'filterContains': string('Only branches whose name contains this text.'),
    },
    required=['repositoryId'],
)
def list_branches_by_repo(ctx: ToolContext, args: BaseModel) -> Any:
    """Short names of the repository's branches."""
    refs = ctx.connection().git.get_refs(
        args.repository_id, filter='heads/', filter_contains=args.filter_contains
    )
    names = [short_branch_name(ref['name']) for ref in branch_refs(refs)]
    return page(names, top=args.top)


@tool(
    'repo_list_my_branches_by_repo',
    'Retrieve branches of a repository (the API cannot filter by creator, so all branches are returned).',
    {
        'repositoryId': REPOSITORY_ID,
        'top': integer('Maximum branches to return.', default=100),
    },
    required=['repositoryId'],
)
def list_my_branches_by_repo(ctx: ToolContext, args: BaseModel) -> Any:
    refs = ctx.connection().git.get_refs(args.repository_id, filter='heads/')
    return page(branch_refs(refs), top=args.top)


@tool(
    'repo_get_branch_by_name',
    'Get a branch by its name.',
    {'repositoryId': REPOSITORY_ID, 'branchName': string('The branch name.')},
    required=['repositoryId', 'branchName'],
)
def get_branch_by_name(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().git.get_branch(args.repository_id, short_branch_name(args.branch_name))


@tool(
    'repo_create_branch',
    'Create a new branch in the repository.',
    {
        'repositoryId': REPOSITORY_ID,
        'branchName': string('The new branch name.'),
        'sourceBranchName': string('The source branch name.', default='main'),
        'sourceCommitId': string('The commit ID to branch from; overrides sourceBranchName.'),
    },
    required=['repositoryId', 'branchName'],
)
def create_branch(ctx: ToolContext, args: BaseModel) -> Any:
    """Create a branch from a commit or from the head of another branch.

    Args:
        ctx: The tool context
        args: Validated arguments; ``source_commit_id`` wins over ``source_branch_name``

    Returns:
        The ref update results reported by the service

    Raises:
        ToolExecutionError: If the source branch does not exist
    """
    git = ctx.connection().git
    commit_id = args.source_commit_id
    if not commit_id:
        source_ref = branch_ref(args.source_branch_name)
        refs = git.get_refs(args.repository_id, filter=source_ref[len('refs/'):])
        head = next((ref for ref in refs if ref.get('name') == source_ref), None)
        if not head or not head.get('objectId'):
            raise ToolExecutionError(f"Source branch '{args.source_branch_name}' not found")
        commit_id = head['objectId']

    ref_update = {
        'name': branch_ref(args.branch_name),
        'newObjectId': commit_id,
        'oldObjectId': EMPTY_OBJECT_ID,
    }
    return git.update_refs([ref_update], args.repository_id)


@tool(
    'repo_list_pull_requests_by_repo_or_project',
    'Retrieve pull requests for a repository or, when no repository is given, for a project.',
    {
        'repositoryId': REPOSITORY_ID,
        'project': string('The project name or ID.'),
        'top': integer('Maximum PRs to return.', default=100),
        'skip': integer('PRs to skip.', default=0),
        'status': string('Filter by status.', enum=PULL_REQUEST_STATUSES, default='Active'),
    },
)
def list_pull_requests_by_repo_or_project(ctx: ToolContext, args: BaseModel) -> Any:
    """List pull requests of one repository, or of a whole project.

    Args:
        ctx: The tool context
        args: Validated arguments; ``repository_id`` takes precedence over ``project``

    Returns:
        The matching pull requests

    Raises:
        ToolExecutionError: If neither a repository nor a project was given
    """
    status = mappings.pull_request_status(args.status)
    git = ctx.connection().git
    if args.repository_id:
        return git.get_pull_requests(args.repository_id, status, args.project, args.skip, args.top)
    if args.project:
        return git.get_pull_requests_by_project(args.project, status, args.skip, args.top)
    raise ToolExecutionError('Either repositoryId or project required')


@tool(
    'repo_get_pull_request_by_id',
    'Get a pull request by its ID.',
    {
        'repositoryId': REPOSITORY_ID,
        'pullRequestId': PULL_REQUEST_ID,
        'includeWorkItemRefs': boolean('Include work item references.'),
    },
    required=['repositoryId', 'pullRequestId'],
)
def get_pull_request_by_id(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().git.get_pull_request(
        args.repository_id, args.pull_request_id, args.include_work_item_refs
    )


@tool(
    'repo_create_pull_request',
    'Create a new pull request.',
    {
        'repositoryId': REPOSITORY_ID,
        'sourceRefName': string('Source branch (short name or refs/heads/...).'),
        'targetRefName': string('Target branch (short name or refs/heads/...).'),
        'title': string('PR title.'),
        'description': string('PR description.'),
        'isDraft': boolean('Create as draft.'),
        'reviewers': array(string('Reviewer ID.'), 'Reviewer IDs.'),
    },
    required=['repositoryId', 'sourceRefName', 'targetRefName', 'title'],
)
def create_pull_request(ctx: ToolContext, args: BaseModel) -> Any:
    """Open a pull request; optional fields are sent only when given."""
    pull_request: Dict[str, Any] = {
        'sourceRefName': branch_ref(args.source_ref_name),
        'targetRefName': branch_ref(args.target_ref_name),
        'title': args.title,
    }
    if args.description is not None:
        pull_request['description'] = args.description
    if args.is_draft is not None:
        pull_request['isDraft'] = args.is_draft
    if args.reviewers:
        pull_request['reviewers'] = [{'id': reviewer} for reviewer in args.reviewers]
    return ctx.connection().git.create_pull_request(pull_request, args.repository_id)


@tool(
    'repo_update_pull_request',
    'Update the title, description, status or target branch of a pull request.',
    {
        'repositoryId': REPOSITORY_ID,
        'pullRequestId': PULL_REQUEST_ID,
        'title': string('New title.'),
        'description': string('New description.'),
        'status': string('New status.', enum=['active', 'abandoned', 'completed']),
        'targetRefName': string('New target branch.'),
    },
    required=['repositoryId', 'pullRequestId'],
)
def update_pull_request(ctx: ToolContext, args: BaseModel) -> Any:
    update: Dict[str, Any] = {}
    if args.title:
        update['title'] = args.title
    if args.description:
        update['description'] = args.description
    if args.status:
        update['status'] = mappings.pull_request_status(args.status)
    if args.target_ref_name:
        update['targetRefName'] = branch_ref(args.target_ref_name)
    return ctx.connection().git.update_pull_request(
        update, args.repository_id, args.pull_request_id
    )


@tool(
    'repo_update_pull_request_reviewers',
    'Add or update a reviewer on a pull request.',
    {
        'repositoryId': REPOSITORY_ID,
        'pullRequestId': PULL_REQUEST_ID,
        'reviewerId': string('The reviewer ID.'),
        'vote': integer(
            'Vote: 10=approved, 5=approved with suggestions, 0=no vote, -5=waiting, -10=rejected.',
            default=0,
        ),
        'isRequired': boolean('Is required reviewer.'),
    },
    required=['repositoryId', 'pullRequestId', 'reviewerId'],
)
def update_pull_request_reviewers(ctx: ToolContext, args: BaseModel) -> Any:
    reviewer: Dict[str, Any] = {'vote': args.vote}
    if args.is_required is not None:
        reviewer['isRequired'] = args.is_required
    return ctx.connection().git.create_pull_request_reviewer(
        reviewer, args.repository_id, args.pull_request_id, args.reviewer_id
    )


@tool(
    'repo_list_pull_request_threads',
    'List comment threads on a pull request.',
    {'repositoryId': REPOSITORY_ID, 'pullRequestId': PULL_REQUEST_ID},
    required=['repositoryId', 'pullRequestId'],
)
def list_pull_request_threads(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().git.get_threads(args.repository_id, args.pull_request_id)


@tool(
    'repo_list_pull_request_thread_comments',
    'List comments in a specific thread.',
    {'repositoryId': REPOSITORY_ID, 'pullRequestId': PULL_REQUEST_ID, 'threadId': THREAD_ID},
    required=['repositoryId', 'pullRequestId', 'threadId'],
)
def list_pull_request_thread_comments(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().git.get_comments(
        args.repository_id, args.pull_request_id, args.thread_id
    )


@tool(
    'repo_create_pull_request_thread',
    'Create a new comment thread on a pull request, optionally anchored to a file line.',
    {
        'repositoryId': REPOSITORY_ID,
        'pullRequestId': PULL_REQUEST_ID,
        'content': string('Comment content.'),
        'status': string('Thread status.', enum=THREAD_STATUSES),
        'filePath': string('File path for inline comment.'),
        'lineNumber': integer('Line number for inline comment.', default=1),
    },
    required=['repositoryId', 'pullRequestId', 'content'],
)
def create_pull_request_thread(ctx: ToolContext, args: BaseModel) -> Any:
    """Start a comment thread, anchored to a file line when ``file_path`` is set."""
    thread: Dict[str, Any] = {
        'comments': [{'content': args.content, 'commentType': COMMENT_TYPE_TEXT}],
        'status': mappings.thread_status(args.status),
    }
    if args.file_path:
        position = {'line': args.line_number or 1, 'offset': 1}
        thread['threadContext'] = {
            'filePath': args.file_path,
            'rightFileStart': position,
            'rightFileEnd': dict(position),
        }
    return ctx.connection().git.create_thread(thread, args.repository_id, args.pull_request_id)


@tool(
    'repo_update_pull_request_thread',
    'Update a comment thread status.',
    {
        'repositoryId': REPOSITORY_ID,
        'pullRequestId': PULL_REQUEST_ID,
        'threadId': THREAD_ID,
        'status': string('New status.', enum=THREAD_STATUSES),
    },
    required=['repositoryId', 'pullRequestId', 'threadId', 'status'],
)
def update_pull_request_thread(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().git.update_thread(
        {'status': mappings.thread_status(args.status)},
        args.repository_id,
        args.pull_request_id,
        args.thread_id,
    )


@tool(
    'repo_reply_to_comment',
    'Reply to an existing comment thread.',
    {
        'repositoryId': REPOSITORY_ID,
        'pullRequestId': PULL_REQUEST_ID,
        'threadId': THREAD_ID,
        'content': string('Reply content.'),
    },
    required=['repositoryId', 'pullRequestId', 'threadId', 'content'],
)
def reply_to_comment(ctx: ToolContext, args: BaseModel) -> Any:
    comment = {'content': args.content, 'commentType': COMMENT_TYPE_TEXT}
    return ctx.connection().git.create_comment(
        comment, args.repository_id, args.pull_request_id, args.thread_id
    )


@tool(
    'repo_search_commits',
    'Search for commits in a repository.',
    {
        'repositoryId': REPOSITORY_ID,
        'project': string('The project name or ID.'),
        'searchText': string('Case-insensitive text to look for in commit messages.'),
        'author': string('Filter by author.'),
        'fromDate': string('From date (ISO format).'),
        'toDate': string('To date (ISO format).'),
        'top': integer('Maximum commits to return.', default=100),
    },
    required=['repositoryId'],
)
def search_commits(ctx: ToolContext, args: BaseModel) -> Any:
    """Commits matching the criteria whose comment contains ``search_text``."""
    criteria = {
        '$top': args.top,
        'author': args.author,
        'fromDate': args.from_date,
        'toDate': args.to_date,
    }
    commits = ctx.connection().git.get_commits(args.repository_id, criteria, args.project)
    return filter_by_name(commits, args.search_text, key='comment')


@tool(
    'repo_list_pull_requests_by_commits',
    'Get pull requests associated with specific commits.',
    {
        'repositoryId': REPOSITORY_ID,
        'project': string('The project name or ID.'),
        'commitIds': array(string('Commit ID.'), 'Commit IDs.'),
    },
    required=['repositoryId', 'commitIds'],
)
def list_pull_requests_by_commits(ctx: ToolContext, args: BaseModel) -> Any:
    queries = [{'type': PULL_REQUEST_QUERY_COMMITS, 'items': [commit]} for commit in args.commit_ids]
    return ctx.connection().git.get_pull_request_query(queries, args.repository_id, args.project)
