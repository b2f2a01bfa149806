"""Shared plumbing for the per-area Azure DevOps API clients."""

import requests
from typing import TYPE_CHECKING, Any, Dict, Optional
from urllib.parse import quote


if TYPE_CHECKING:
    from tl.azure_devops_pat_mcp_server.connection import AzureDevOpsConnection


API_VERSION = '7.1'
PREVIEW_API_VERSION = '7.2-preview.1'
COMMENTS_API_VERSION = '7.1-preview.4'
JSON_PATCH_CONTENT_TYPE = 'application/json-patch+json'
CONTINUATION_TOKEN_HEADER = 'x-ms-continuationtoken'


def segment(value: Any) -> str:
    """Quote a value for use as a single URL path segment."""
    return quote(str(value), safe='')


def values(payload: Any) -> Any:
    """Unwrap the ``{"count": n, "value": [...]}`` envelope used by list endpoints."""
    if isinstance(payload, dict) and 'value' in payload:
        return payload['value']
    return payload


def decode_response(response: requests.Response) -> Any:
    """Decode a response body as JSON, falling back to text for non-JSON bodies."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ResourceApi:
    """Base class for a narrow client over one Azure DevOps resource area."""

    def __init__(self, connection: 'AzureDevOpsConnection') -> None:
        """Initialize the client.

        Args:
            connection: Authenticated connection that performs the HTTP requests
        """
        self._connection = connection

    def _url(
        self,
        path: str,
        project: Optional[str] = None,
        team: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> str:
        return self._connection.api_url(path, project=project, team=team, base_url=base_url)

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        return self._connection.request_json('GET', url, params=params, **kwargs)

    def _post(self, url: str, body: Any, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        return self._connection.request_json('POST', url, params=params, json=body, **kwargs)

    def _put(self, url: str, body: Any, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        return self._connection.request_json('PUT', url, params=params, json=body, **kwargs)

    def _patch(self, url: str, body: Any, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        return self._connection.request_json('PATCH', url, params=params, json=body, **kwargs)

    def _continued(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Send a request to a paged endpoint and surface its continuation token.

        Returns:
            ``{'value': [...], 'continuationToken': str | None}``
        """
        response = self._connection.request(method, url, **kwargs)
        return {
            'value': values(decode_response(response)),
            'continuationToken': response.headers.get(CONTINUATION_TOKEN_HEADER),
        }
