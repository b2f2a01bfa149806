"""Authenticated connection to an Azure DevOps organization.

The connection owns one ``requests.Session`` carrying the PAT Basic auth header and hands
out lazily created API clients, one per resource area. Every area client funnels its
requests through ``AzureDevOpsConnection.request`` so timeouts, error translation and
response decoding behave the same for all tools.
"""

import logfire
import requests
from functools import cached_property
from loguru import logger
from tl.azure_devops_pat_mcp_server.apis import (
    AlertApi,
    BuildApi,
    CoreApi,
    GitApi,
    IdentityApi,
    PipelinesApi,
    SearchApi,
    TestPlanApi,
    TestResultsApi,
    WikiApi,
    WorkApi,
    WorkItemTrackingApi,
)
from tl.azure_devops_pat_mcp_server.apis.base import API_VERSION, decode_response, segment
from tl.azure_devops_pat_mcp_server.auth import auth_header
from tl.azure_devops_pat_mcp_server.config import Settings
from tl.azure_devops_pat_mcp_server.errors import ConfigurationError, DownstreamCallError
from typing import Any, Dict, Optional
from urllib.parse import urlparse


def organization_name(organization_url: str) -> str:
    """Derive the organization name from its URL.

    ``https://dev.azure.com/contoso`` and ``https://contoso.visualstudio.com`` both yield
    ``contoso``.

    Raises:
        ConfigurationError: If no organization name can be derived
    """
    parsed = urlparse(organization_url)
    host = parsed.hostname or ''
    if host.endswith('.visualstudio.com'):
        return host.split('.')[0]
    path_parts = [part for part in parsed.path.split('/') if part]
    if path_parts:
        return path_parts[-1]
    raise ConfigurationError(
        f'Cannot determine the organization name from {organization_url!r}; '
        'expected https://dev.azure.com/<organization>'
    )


def _format_param(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return ','.join(str(item) for item in value)
    return str(value)


def _error_message(response: requests.Response) -> str:
    message = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get('message')
    detail = message or response.text.strip() or response.reason
    return f'Azure DevOps API error {response.status_code} ({response.reason}): {detail}'


class AzureDevOpsConnection:
    """A PAT-authenticated session against one Azure DevOps organization."""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None) -> None:
        """Initialize the connection.

        Args:
            settings: Server settings holding the organization URL, PAT and timeout
            session: Optional pre-built session (tests mount stub adapters on it)

        Raises:
            ConfigurationError: If the organization URL or PAT is empty or malformed
        """
        organization_url = (settings.organization_url or '').strip().rstrip('/')
        parsed = urlparse(organization_url)
        if not organization_url:
            raise ConfigurationError('Organization URL is required')
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ConfigurationError(
                f'Organization URL must be an absolute http(s) URL, got {organization_url!r}'
            )
        if not (settings.personal_access_token or '').strip():
            raise ConfigurationError('Personal Access Token is required for authentication')

        self.organization_url = organization_url
        self.organization = organization_name(organization_url)
        self.timeout = settings.timeout

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                'Authorization': auth_header(settings.personal_access_token),
                'Accept': 'application/json',
                'User-Agent': settings.user_agent,
            }
        )

        logger.info(f'Initialized Azure DevOps connection for organization: {self.organization}')
        logfire.info(
            'Azure DevOps connection initialized',
            organization=self.organization,
            organization_url=self.organization_url,
        )

    def api_url(
        self,
        path: str,
        project: Optional[str] = None,
        team: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> str:
        """Build an API URL of the form ``<base>/<project>/<team>/<path>``."""
        parts = [(base_url or self.organization_url).rstrip('/')]
        if project:
            parts.append(segment(project))
        if team:
            parts.append(segment(team))
        parts.append(path.lstrip('/'))
        return '/'.join(parts)

    def service_url(self, host_prefix: str) -> str:
        """Return the organization URL on a companion service host (e.g. ``almsearch``)."""
        return f'https://{host_prefix}.dev.azure.com/{segment(self.organization)}'

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        api_version: Optional[str] = API_VERSION,
        **kwargs: Any,
    ) -> requests.Response:
        """Send a request and return the response.

        ``None`` query parameters are dropped; booleans and lists are rendered the way the
        Azure DevOps REST API expects them.

        Raises:
            DownstreamCallError: If the transport fails or the service answers >= 400
        """
        query: Dict[str, str] = {}
        if api_version:
            query['api-version'] = api_version
        for key, value in (params or {}).items():
            if value is not None:
                query[key] = _format_param(value)

        try:
            response = self.session.request(
                method, url, params=query, timeout=self.timeout, **kwargs
            )
        except requests.exceptions.RequestException as e:
            raise DownstreamCallError(f'HTTP error during {method} {url}: {str(e)}', url=url) from e

        if response.status_code >= 400:
            raise DownstreamCallError(
                _error_message(response), status_code=response.status_code, url=url
            )
        return response

    def request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and return its decoded body."""
        return decode_response(self.request(method, url, **kwargs))

    @cached_property
    def core(self) -> CoreApi:
        return CoreApi(self)

    @cached_property
    def identities(self) -> IdentityApi:
        return IdentityApi(self)

    @cached_property
    def git(self) -> GitApi:
        return GitApi(self)

    @cached_property
    def work_item_tracking(self) -> WorkItemTrackingApi:
        return WorkItemTrackingApi(self)

    @cached_property
    def work(self) -> WorkApi:
        return WorkApi(self)

    @cached_property
    def build(self) -> BuildApi:
        return BuildApi(self)

    @cached_property
    def pipelines(self) -> PipelinesApi:
        return PipelinesApi(self)

    @cached_property
    def wiki(self) -> WikiApi:
        return WikiApi(self)

    @cached_property
    def search(self) -> SearchApi:
        return SearchApi(self)

    @cached_property
    def test_plans(self) -> TestPlanApi:
        return TestPlanApi(self)

    @cached_property
    def test_results(self) -> TestResultsApi:
        return TestResultsApi(self)

    @cached_property
    def alerts(self) -> AlertApi:
        return AlertApi(self)
