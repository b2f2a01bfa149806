"""Wikis and wiki pages."""

from loguru import logger
from tl.azure_devops_pat_mcp_server.apis.base import ResourceApi, segment, values
from tl.azure_devops_pat_mcp_server.errors import DownstreamCallError
from typing import Any, Dict, List, Optional


def normalize_page_path(path: str) -> str:
    """Wiki page paths are absolute; ``Home`` becomes ``/Home``."""
    return path if path.startswith('/') else f'/{path}'


class WikiApi(ResourceApi):
    """Wikis, page metadata, page text and page upserts."""

    def _wiki_url(self, wiki_identifier: str, path: str = '', project: Optional[str] = None) -> str:
        suffix = f'/{path}' if path else ''
        return self._url(f'_apis/wiki/wikis/{segment(wiki_identifier)}{suffix}', project=project)

    def get_all_wikis(self, project: Optional[str] = None) -> List[Any]:
        return values(self._get(self._url('_apis/wiki/wikis', project=project)))

    def get_wiki(self, wiki_identifier: str, project: Optional[str] = None) -> Any:
        return self._get(self._wiki_url(wiki_identifier, project=project))

    def get_pages_batch(
        self,
        wiki_identifier: str,
        project: str,
        top: int,
        continuation_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {'top': top}
        if continuation_token:
            body['continuationToken'] = continuation_token
        return self._continued(
            'POST', self._wiki_url(wiki_identifier, 'pagesbatch', project), json=body
        )

    def get_page(
        self,
        wiki_identifier: str,
        project: str,
        path: str,
        recursion_level: Optional[str] = None,
    ) -> Any:
        params = {'path': normalize_page_path(path), 'recursionLevel': recursion_level or 'None'}
        return self._get(self._wiki_url(wiki_identifier, 'pages', project), params)

    def get_page_text(self, wiki_identifier: str, project: str, path: str = '/') -> str:
        """Return the raw markdown of a page."""
        response = self._connection.request(
            'GET',
            self._wiki_url(wiki_identifier, 'pages', project),
            params={'path': normalize_page_path(path), 'includeContent': True},
            headers={'Accept': 'text/plain'},
        )
        return response.text

    def _page_etag(self, url: str, params: Dict[str, Any]) -> Optional[str]:
        try:
            response = self._connection.request('GET', url, params=params)
        except DownstreamCallError as e:
            logger.warning(f'Could not read current wiki page version: {e}')
            return None
        return response.headers.get('ETag')

    def create_or_update_page(
        self,
        wiki_identifier: str,
        path: str,
        content: str,
        project: Optional[str] = None,
        etag: Optional[str] = None,
    ) -> Any:
        """Create a page, or update it under optimistic concurrency.

        The first PUT uses ``etag`` when given. If it fails, the page's current ETag is
        read and the PUT is retried once with ``If-Match``. When the retry is impossible
        or also fails, the first failure is raised.
        """
        url = self._wiki_url(wiki_identifier, 'pages', project)
        params = {'path': normalize_page_path(path)}
        body = {'content': content}
        headers = {'Content-Type': 'application/json'}
        if etag:
            headers['If-Match'] = etag

        try:
            return self._put(url, body, params, headers=headers)
        except DownstreamCallError as first_failure:
            current_etag = self._page_etag(url, params)
            if not current_etag:
                raise
            retry_headers = {**headers, 'If-Match': current_etag}
            try:
                return self._put(url, body, params, headers=retry_headers)
            except DownstreamCallError:
                raise first_failure
