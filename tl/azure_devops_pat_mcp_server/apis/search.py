"""Organization-wide code, wiki and work item search."""

from tl.azure_devops_pat_mcp_server.apis.base import ResourceApi
from typing import Any, Dict, List, Optional


SEARCH_API_VERSION = '7.1'


class SearchApi(ResourceApi):
    """Search endpoints served from the organization's ``almsearch`` host."""

    def _search(
        self,
        kind: str,
        search_text: str,
        filters: Dict[str, List[str]],
        top: int,
        skip: int,
    ) -> Any:
        body: Dict[str, Any] = {'searchText': search_text, '$skip': skip, '$top': top}
        selected = {name: value for name, value in filters.items() if value}
        if selected:
            body['filters'] = selected
        url = self._url(
            f'_apis/search/{kind}searchresults',
            base_url=self._connection.service_url('almsearch'),
        )
        return self._post(url, body, api_version=SEARCH_API_VERSION)

    def search_code(
        self,
        search_text: str,
        projects: Optional[List[str]] = None,
        repositories: Optional[List[str]] = None,
        paths: Optional[List[str]] = None,
        branches: Optional[List[str]] = None,
        top: int = 10,
        skip: int = 0,
    ) -> Any:
        filters = {
            'Project': projects,
            'Repository': repositories,
            'Path': paths,
            'Branch': branches,
        }
        return self._search('code', search_text, filters, top, skip)

    def search_wiki(
        self,
        search_text: str,
        projects: Optional[List[str]] = None,
        wikis: Optional[List[str]] = None,
        top: int = 10,
        skip: int = 0,
    ) -> Any:
        return self._search('wiki', search_text, {'Project': projects, 'Wiki': wikis}, top, skip)

    def search_work_items(
        self,
        search_text: str,
        projects: Optional[List[str]] = None,
        work_item_types: Optional[List[str]] = None,
        states: Optional[List[str]] = None,
        assigned_to: Optional[List[str]] = None,
        top: int = 10,
        skip: int = 0,
    ) -> Any:
        filters = {
            'System.TeamProject': projects,
            'System.WorkItemType': work_item_types,
            'System.State': states,
            'System.AssignedTo': assigned_to,
        }
        return self._search('workitem', search_text, filters, top, skip)
