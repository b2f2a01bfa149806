"""Connection and resource client request construction tests."""

from __future__ import annotations

import base64

import pytest
import requests
from conftest import ORG_URL, StubAdapter
from tl.azure_devops_pat_mcp_server.config import Settings
from tl.azure_devops_pat_mcp_server.connection import AzureDevOpsConnection, organization_name
from tl.azure_devops_pat_mcp_server.errors import ConfigurationError, DownstreamCallError


@pytest.mark.parametrize(
    ('url', 'name'),
    [
        ('https://dev.azure.com/contoso', 'contoso'),
        ('https://dev.azure.com/contoso/', 'contoso'),
        ('https://contoso.visualstudio.com', 'contoso'),
        ('https://contoso.visualstudio.com/DefaultCollection', 'contoso'),
    ],
)
def test_organization_name(url: str, name: str) -> None:
    assert organization_name(url) == name


@pytest.mark.parametrize(
    ('url', 'pat'),
    [('', 'pat'), ('dev.azure.com/contoso', 'pat'), ('ftp://dev.azure.com/contoso', 'pat'), (ORG_URL, ' ')],
)
def test_invalid_settings_are_rejected(url: str, pat: str) -> None:
    with pytest.raises(ConfigurationError):
        AzureDevOpsConnection(Settings(organization_url=url, personal_access_token=pat))


def test_requests_carry_auth_user_agent_and_api_version(
    connection: AzureDevOpsConnection, stub: StubAdapter
) -> None:
    stub.add('GET', f'{ORG_URL}/_apis/projects', body={'value': []})

    connection.core.get_projects(state_filter='wellFormed', top=5)

    seen = stub.requests[0]
    assert base64.b64decode(seen.headers['Authorization'].split(' ')[1]) == b':secret-pat'
    assert seen.headers['User-Agent'].startswith('azure-devops-pat-mcp-server/')
    assert seen.param('api-version') == '7.1'
    assert seen.param('stateFilter') == 'wellFormed'
    assert seen.param('$top') == '5'
    assert seen.param('$skip') is None


def test_query_parameters_render_booleans_and_lists(
    connection: AzureDevOpsConnection, stub: StubAdapter
) -> None:
    stub.add('GET', f'{ORG_URL}/_apis/wit/workitems', body={'value': [{'id': 1}, {'id': 2}]})

    items = connection.work_item_tracking.get_work_items([1, 2], fields=['System.Title', 'System.State'])

    assert items == [{'id': 1}, {'id': 2}]
    seen = stub.requests[0]
    assert seen.param('ids') == '1,2'
    assert seen.param('fields') == 'System.Title,System.State'
    assert seen.param('$expand') is None


def test_project_and_team_are_path_segments(connection: AzureDevOpsConnection, stub: StubAdapter) -> None:
    stub.add('GET', f'{ORG_URL}/My Project/Team A/_apis/work/backlogs', body={'value': ['b']})

    assert connection.work.get_backlogs('My Project', 'Team A') == ['b']
    assert '/My%20Project/Team%20A/' in stub.requests[0].url


def test_error_status_becomes_downstream_error_with_service_message(
    connection: AzureDevOpsConnection, stub: StubAdapter
) -> None:
    stub.add('GET', f'{ORG_URL}/p/_apis/git/repositories/missing', status=404, body={'message': 'TF401019: not found'})

    with pytest.raises(DownstreamCallError) as exc_info:
        connection.git.get_repository('missing', 'p')

    error = exc_info.value
    assert error.status_code == 404
    assert 'TF401019: not found' in str(error)
    assert error.url == f'{ORG_URL}/p/_apis/git/repositories/missing'


def test_transport_failure_becomes_downstream_error(
    connection: AzureDevOpsConnection, stub: StubAdapter
) -> None:
    stub.add('GET', f'{ORG_URL}/_apis/projects', requests.exceptions.ConnectionError('connection refused'))

    with pytest.raises(DownstreamCallError, match='connection refused') as exc_info:
        connection.core.get_projects()

    assert exc_info.value.status_code is None


def test_service_hosts(connection: AzureDevOpsConnection, stub: StubAdapter) -> None:
    stub.add('GET', 'https://vssps.dev.azure.com/contoso/_apis/identities', body={'value': [{'id': 'abc'}]})

    result = connection.identities.search_identities('someone@contoso.com')

    assert result == {'value': [{'id': 'abc'}]}
    assert stub.requests[0].param('filterValue') == 'someone@contoso.com'
    assert stub.requests[0].param('searchFilter') == 'General'


def test_continuation_token_header_is_surfaced(connection: AzureDevOpsConnection, stub: StubAdapter) -> None:
    stub.add(
        'GET',
        f'{ORG_URL}/p/_apis/testplan/plans',
        body={'value': [{'id': 1}]},
        headers={'x-ms-continuationtoken': 'next-page'},
    )

    result = connection.test_plans.get_test_plans('p', filter_active_plans=True)

    assert result == {'value': [{'id': 1}], 'continuationToken': 'next-page'}
    assert stub.requests[0].param('filterActivePlans') == 'true'


def test_work_item_writes_use_json_patch(connection: AzureDevOpsConnection, stub: StubAdapter) -> None:
    stub.add('PATCH', f'{ORG_URL}/_apis/wit/workitems/5', body={'id': 5})

    connection.work_item_tracking.update_work_item([{'op': 'add', 'path': '/fields/System.Title', 'value': 't'}], 5)

    seen = stub.requests[0]
    assert seen.headers['Content-Type'] == 'application/json-patch+json'
    assert seen.json() == [{'op': 'add', 'path': '/fields/System.Title', 'value': 't'}]


class TestWikiUpsert:
    URL = f'{ORG_URL}/p/_apis/wiki/wikis/w/pages'

    def test_first_put_success(self, connection: AzureDevOpsConnection, stub: StubAdapter) -> None:
        stub.add('PUT', self.URL, body={'path': '/Home'})

        result = connection.wiki.create_or_update_page('w', 'Home', '# hi', project='p', etag='"1"')

        assert result == {'path': '/Home'}
        seen = stub.requests[0]
        assert seen.param('path') == '/Home'
        assert seen.headers['If-Match'] == '"1"'
        assert seen.json() == {'content': '# hi'}

    def test_retries_once_with_current_etag(self, connection: AzureDevOpsConnection, stub: StubAdapter) -> None:
        stub.add('PUT', self.URL, status=409, body={'message': 'page exists'})
        stub.add('PUT', self.URL, body={'path': '/Home', 'updated': True})
        stub.add('GET', self.URL, body={'path': '/Home'}, headers={'ETag': '"7"'})

        result = connection.wiki.create_or_update_page('w', '/Home', 'text', project='p')

        assert result == {'path': '/Home', 'updated': True}
        puts = stub.calls('PUT')
        assert 'If-Match' not in puts[0].headers
        assert puts[1].headers['If-Match'] == '"7"'

    def test_surfaces_first_failure_when_retry_fails(
        self, connection: AzureDevOpsConnection, stub: StubAdapter
    ) -> None:
        stub.add('PUT', self.URL, status=409, body={'message': 'first failure'})
        stub.add('PUT', self.URL, status=412, body={'message': 'second failure'})
        stub.add('GET', self.URL, body={}, headers={'ETag': '"7"'})

        with pytest.raises(DownstreamCallError, match='first failure'):
            connection.wiki.create_or_update_page('w', '/Home', 'text', project='p')

    def test_surfaces_first_failure_without_etag(
        self, connection: AzureDevOpsConnection, stub: StubAdapter
    ) -> None:
        stub.add('PUT', self.URL, status=400, body={'message': 'bad page'})
        stub.add('GET', self.URL, status=404, body={'message': 'missing'})

        with pytest.raises(DownstreamCallError, match='bad page'):
            connection.wiki.create_or_update_page('w', '/Home', 'text', project='p')

        assert len(stub.calls('PUT')) == 1


def test_unexpected_route_is_reported(connection: AzureDevOpsConnection) -> None:
    with pytest.raises(AssertionError):
        connection.core.get_projects()


