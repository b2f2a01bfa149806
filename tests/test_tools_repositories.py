"""Core and repository tool handlers, exercised through the dispatcher."""

from __future__ import annotations

from conftest import ORG_URL, StubAdapter, payload
from tl.azure_devops_pat_mcp_server.dispatcher import Dispatcher

REPO_URL = f'{ORG_URL}/_apis/git/repositories/web'
PROJECT_REPOS_URL = f'{ORG_URL}/Fabrikam/_apis/git/repositories'


def test_list_projects_filters_by_name(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add(
        'GET',
        f'{ORG_URL}/_apis/projects',
        body={'value': [{'name': 'Fabrikam Web'}, {'name': 'Contoso'}, {'name': 'fabrikam-api'}]},
    )

    envelope = dispatcher.invoke('core_list_projects', {'projectNameFilter': 'FABRIKAM'})

    assert payload(envelope) == [{'name': 'Fabrikam Web'}, {'name': 'fabrikam-api'}]


def test_list_project_teams_sends_paging(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('GET', f'{ORG_URL}/_apis/projects/Fabrikam/teams', body={'value': [{'name': 'Team A'}]})

    envelope = dispatcher.invoke('core_list_project_teams', {'project': 'Fabrikam', 'mine': True, 'top': 10})

    assert payload(envelope) == [{'name': 'Team A'}]
    seen = stub.requests[0]
    assert seen.param('$mine') == 'true'
    assert seen.param('$top') == '10'
    assert seen.param('$skip') is None


def test_list_repos_filters_and_slices(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    repos = [{'name': f'service-{i}'} for i in range(5)] + [{'name': 'docs'}]
    stub.add('GET', PROJECT_REPOS_URL, body={'value': repos})

    envelope = dispatcher.invoke(
        'repo_list_repos_by_project',
        {'project': 'Fabrikam', 'repoNameFilter': 'service', 'skip': 1, 'top': 2},
    )

    assert payload(envelope) == [{'name': 'service-1'}, {'name': 'service-2'}]


def test_list_branches_returns_short_names(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add(
        'GET',
        f'{REPO_URL}/refs',
        body={'value': [{'name': 'refs/heads/main'}, {'name': 'refs/tags/v1'}, {'name': 'refs/heads/feature/x'}]},
    )

    envelope = dispatcher.invoke('repo_list_branches_by_repo', {'repositoryId': 'web', 'filterContains': 'a'})

    assert payload(envelope) == ['main', 'feature/x']
    assert stub.requests[0].param('filter') == 'heads/'
    assert stub.requests[0].param('filterContains') == 'a'


def test_create_branch_resolves_source_head(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add(
        'GET',
        f'{REPO_URL}/refs',
        body={'value': [{'name': 'refs/heads/develop-old', 'objectId': 'f' * 40}, {'name': 'refs/heads/develop', 'objectId': 'a' * 40}]},
    )
    stub.add('POST', f'{REPO_URL}/refs', body={'value': [{'success': True}]})

    envelope = dispatcher.invoke(
        'repo_create_branch',
        {'repositoryId': 'web', 'branchName': 'feature/login', 'sourceBranchName': 'develop'},
    )

    assert not envelope.is_error
    assert stub.calls('GET')[0].param('filter') == 'heads/develop'
    assert stub.calls('POST')[0].json() == [
        {'name': 'refs/heads/feature/login', 'newObjectId': 'a' * 40, 'oldObjectId': '0' * 40}
    ]


def test_create_branch_from_commit_skips_lookup(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('POST', f'{REPO_URL}/refs', body={'value': [{'success': True}]})

    dispatcher.invoke('repo_create_branch', {'repositoryId': 'web', 'branchName': 'hotfix', 'sourceCommitId': 'abc123'})

    assert stub.calls('GET') == []
    assert stub.calls('POST')[0].json()[0]['newObjectId'] == 'abc123'


def test_create_branch_missing_source(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('GET', f'{REPO_URL}/refs', body={'value': []})

    envelope = dispatcher.invoke('repo_create_branch', {'repositoryId': 'web', 'branchName': 'feature/x'})

    assert envelope.is_error
    assert envelope.text == "Error: Source branch 'main' not found"
    assert stub.calls('POST') == []


def test_list_pull_requests_defaults_to_active(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('GET', f'{REPO_URL}/pullrequests', body={'value': [{'pullRequestId': 7}]})

    envelope = dispatcher.invoke('repo_list_pull_requests_by_repo_or_project', {'repositoryId': 'web'})

    assert payload(envelope) == [{'pullRequestId': 7}]
    seen = stub.requests[0]
    assert seen.param('searchCriteria.status') == '1'
    assert seen.param('$top') == '100'
    assert seen.param('$skip') == '0'


def test_list_pull_requests_by_project_not_set(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('GET', f'{ORG_URL}/Fabrikam/_apis/git/pullrequests', body={'value': []})

    dispatcher.invoke('repo_list_pull_requests_by_repo_or_project', {'project': 'Fabrikam', 'status': 'NotSet'})

    assert stub.requests[0].param('searchCriteria.status') == '0'


def test_list_pull_requests_needs_repository_or_project(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    envelope = dispatcher.invoke('repo_list_pull_requests_by_repo_or_project', {})

    assert envelope.is_error
    assert envelope.text == 'Error: Either repositoryId or project required'
    assert stub.requests == []


def test_create_pull_request_normalizes_refs(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('POST', f'{REPO_URL}/pullrequests', body={'pullRequestId': 12})

    envelope = dispatcher.invoke(
        'repo_create_pull_request',
        {
            'repositoryId': 'web',
            'sourceRefName': 'feature/login',
            'targetRefName': 'refs/heads/main',
            'title': 'Login page',
            'reviewers': ['u1'],
        },
    )

    assert payload(envelope) == {'pullRequestId': 12}
    assert stub.requests[0].json() == {
        'sourceRefName': 'refs/heads/feature/login',
        'targetRefName': 'refs/heads/main',
        'title': 'Login page',
        'reviewers': [{'id': 'u1'}],
    }


def test_update_pull_request_maps_status(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('PATCH', f'{REPO_URL}/pullrequests/12', body={'pullRequestId': 12})

    dispatcher.invoke('repo_update_pull_request', {'repositoryId': 'web', 'pullRequestId': 12, 'status': 'abandoned'})

    assert stub.requests[0].json() == {'status': 2}


def test_inline_thread_carries_file_context(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('POST', f'{REPO_URL}/pullRequests/12/threads', body={'id': 3})

    dispatcher.invoke(
        'repo_create_pull_request_thread',
        {'repositoryId': 'web', 'pullRequestId': 12, 'content': 'nit', 'filePath': '/src/app.py', 'lineNumber': 42},
    )

    assert stub.requests[0].json() == {
        'comments': [{'content': 'nit', 'commentType': 1}],
        'status': 1,
        'threadContext': {
            'filePath': '/src/app.py',
            'rightFileStart': {'line': 42, 'offset': 1},
            'rightFileEnd': {'line': 42, 'offset': 1},
        },
    }


def test_search_commits_filters_messages(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add(
        'GET',
        f'{ORG_URL}/Fabrikam/_apis/git/repositories/web/commits',
        body={'value': [{'comment': 'Fix login bug'}, {'comment': 'Bump deps'}]},
    )

    envelope = dispatcher.invoke(
        'repo_search_commits',
        {'repositoryId': 'web', 'project': 'Fabrikam', 'searchText': 'LOGIN', 'author': 'ann'},
    )

    assert payload(envelope) == [{'comment': 'Fix login bug'}]
    seen = stub.requests[0]
    assert seen.param('searchCriteria.author') == 'ann'
    assert seen.param('searchCriteria.$top') == '100'
    assert seen.param('searchCriteria.fromDate') is None


def test_pull_requests_by_commits_builds_one_query_per_commit(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('POST', f'{REPO_URL}/pullrequestquery', body={'results': []})

    dispatcher.invoke('repo_list_pull_requests_by_commits', {'repositoryId': 'web', 'commitIds': ['c1', 'c2']})

    assert stub.requests[0].json() == {
        'queries': [{'type': 1, 'items': ['c1']}, {'type': 1, 'items': ['c2']}]
    }
