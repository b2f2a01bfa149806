"""Work item tracking: work items, comments, queries, types and classification nodes."""

from tl.azure_devops_pat_mcp_server.apis.base import (
    COMMENTS_API_VERSION,
    JSON_PATCH_CONTENT_TYPE,
    ResourceApi,
    segment,
    values,
)
from typing import Any, Dict, List, Optional


JsonPatchDocument = List[Dict[str, Any]]


class WorkItemTrackingApi(ResourceApi):
    """Work items and everything hanging off them."""

    def _patch_document(self, url: str, document: JsonPatchDocument, method: str) -> Any:
        return self._connection.request_json(
            method,
            url,
            json=document,
            headers={'Content-Type': JSON_PATCH_CONTENT_TYPE},
        )

    def get_work_item(
        self,
        id: int,
        fields: Optional[List[str]] = None,
        expand: Optional[int] = None,
        project: Optional[str] = None,
    ) -> Any:
        url = self._url(f'_apis/wit/workitems/{id}', project=project)
        return self._get(url, {'fields': fields or None, '$expand': expand})

    def get_work_items(
        self,
        ids: List[int],
        fields: Optional[List[str]] = None,
        expand: Optional[int] = None,
        project: Optional[str] = None,
    ) -> List[Any]:
        url = self._url('_apis/wit/workitems', project=project)
        params = {'ids': ids, 'fields': fields or None, '$expand': expand}
        return values(self._get(url, params))

    def create_work_item(
        self, document: JsonPatchDocument, project: str, work_item_type: str
    ) -> Any:
        url = self._url(f'_apis/wit/workitems/${segment(work_item_type)}', project=project)
        return self._patch_document(url, document, 'POST')

    def update_work_item(self, document: JsonPatchDocument, id: int) -> Any:
        return self._patch_document(self._url(f'_apis/wit/workitems/{id}'), document, 'PATCH')

    def query_by_wiql(self, query: str, project: str, top: Optional[int] = None) -> Any:
        url = self._url('_apis/wit/wiql', project=project)
        return self._post(url, {'query': query}, {'$top': top})

    def get_comments(self, project: str, work_item_id: int) -> Any:
        url = self._url(f'_apis/wit/workItems/{work_item_id}/comments', project=project)
        return self._get(url, api_version=COMMENTS_API_VERSION)

    def add_comment(self, text: str, project: str, work_item_id: int) -> Any:
        url = self._url(f'_apis/wit/workItems/{work_item_id}/comments', project=project)
        return self._post(url, {'text': text}, api_version=COMMENTS_API_VERSION)

    def get_revisions(
        self, id: int, top: Optional[int] = None, skip: Optional[int] = None
    ) -> List[Any]:
        url = self._url(f'_apis/wit/workItems/{id}/revisions')
        return values(self._get(url, {'$top': top, '$skip': skip}))

    def get_work_item_type(self, project: str, type: str) -> Any:
        url = self._url(f'_apis/wit/workitemtypes/{segment(type)}', project=project)
        return self._get(url)

    def get_query(
        self, project: str, query: str, expand: Optional[int] = None, depth: int = 1
    ) -> Any:
        """Fetch a saved query or folder by path (``Shared Queries/...``) or id."""
        path = '/'.join(segment(part) for part in query.strip('/').split('/'))
        url = self._url(f'_apis/wit/queries/{path}', project=project)
        return self._get(url, {'$expand': expand, '$depth': depth})

    def query_by_id(self, query_id: str, project: str, team: Optional[str] = None) -> Any:
        url = self._url(f'_apis/wit/wiql/{segment(query_id)}', project=project, team=team)
        return self._get(url)

    def get_classification_nodes(self, project: str, depth: Optional[int] = None) -> List[Any]:
        url = self._url('_apis/wit/classificationnodes', project=project)
        return values(self._get(url, {'$depth': depth}))

    def create_or_update_classification_node(
        self, node: Dict[str, Any], project: str, structure_group: str
    ) -> Any:
        url = self._url(f'_apis/wit/classificationnodes/{structure_group}', project=project)
        return self._post(url, node)
