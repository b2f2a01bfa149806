"""Git repositories, refs, commits and pull requests."""

from tl.azure_devops_pat_mcp_server.apis.base import ResourceApi, segment, values
from typing import Any, Dict, List, Optional


class GitApi(ResourceApi):
    """Repositories, branches, commits, pull requests and their comment threads."""

    def _repo_url(self, repository_id: str, path: str = '', project: Optional[str] = None) -> str:
        suffix = f'/{path}' if path else ''
        return self._url(f'_apis/git/repositories/{segment(repository_id)}{suffix}', project=project)

    def get_repositories(self, project: str) -> List[Any]:
        return values(self._get(self._url('_apis/git/repositories', project=project)))

    def get_repository(self, repository_id: str, project: Optional[str] = None) -> Any:
        return self._get(self._repo_url(repository_id, project=project))

    def get_refs(
        self,
        repository_id: str,
        filter: Optional[str] = None,
        filter_contains: Optional[str] = None,
        project: Optional[str] = None,
    ) -> List[Any]:
        params = {'filter': filter, 'filterContains': filter_contains}
        return values(self._get(self._repo_url(repository_id, 'refs', project), params))

    def get_branch(self, repository_id: str, name: str, project: Optional[str] = None) -> Any:
        """Return branch statistics (head commit, ahead/behind counts) for one branch."""
        url = self._repo_url(repository_id, 'stats/branches', project)
        return self._get(url, {'name': name})

    def update_refs(self, ref_updates: List[Dict[str, Any]], repository_id: str) -> List[Any]:
        return values(self._post(self._repo_url(repository_id, 'refs'), ref_updates))

    def get_pull_requests(
        self,
        repository_id: str,
        status: int,
        project: Optional[str] = None,
        skip: Optional[int] = None,
        top: Optional[int] = None,
    ) -> List[Any]:
        params = {'searchCriteria.status': status, '$skip': skip, '$top': top}
        return values(self._get(self._repo_url(repository_id, 'pullrequests', project), params))

    def get_pull_requests_by_project(
        self,
        project: str,
        status: int,
        skip: Optional[int] = None,
        top: Optional[int] = None,
    ) -> List[Any]:
        params = {'searchCriteria.status': status, '$skip': skip, '$top': top}
        return values(self._get(self._url('_apis/git/pullrequests', project=project), params))

    def get_pull_request(
        self,
        repository_id: str,
        pull_request_id: int,
        include_work_item_refs: Optional[bool] = None,
    ) -> Any:
        url = self._repo_url(repository_id, f'pullrequests/{pull_request_id}')
        return self._get(url, {'includeWorkItemRefs': include_work_item_refs})

    def create_pull_request(self, pull_request: Dict[str, Any], repository_id: str) -> Any:
        return self._post(self._repo_url(repository_id, 'pullrequests'), pull_request)

    def update_pull_request(
        self, update: Dict[str, Any], repository_id: str, pull_request_id: int
    ) -> Any:
        url = self._repo_url(repository_id, f'pullrequests/{pull_request_id}')
        return self._patch(url, update)

    def create_pull_request_reviewer(
        self,
        reviewer: Dict[str, Any],
        repository_id: str,
        pull_request_id: int,
        reviewer_id: str,
    ) -> Any:
        url = self._repo_url(
            repository_id, f'pullrequests/{pull_request_id}/reviewers/{segment(reviewer_id)}'
        )
        return self._put(url, reviewer)

    def get_threads(self, repository_id: str, pull_request_id: int) -> List[Any]:
        url = self._repo_url(repository_id, f'pullRequests/{pull_request_id}/threads')
        return values(self._get(url))

    def get_comments(self, repository_id: str, pull_request_id: int, thread_id: int) -> List[Any]:
        url = self._repo_url(
            repository_id, f'pullRequests/{pull_request_id}/threads/{thread_id}/comments'
        )
        return values(self._get(url))

    def create_thread(
        self, thread: Dict[str, Any], repository_id: str, pull_request_id: int
    ) -> Any:
        url = self._repo_url(repository_id, f'pullRequests/{pull_request_id}/threads')
        return self._post(url, thread)

    def update_thread(
        self,
        thread: Dict[str, Any],
        repository_id: str,
        pull_request_id: int,
        thread_id: int,
    ) -> Any:
        url = self._repo_url(repository_id, f'pullRequests/{pull_request_id}/threads/{thread_id}')
        return self._patch(url, thread)

    def create_comment(
        self,
        comment: Dict[str, Any],
        repository_id: str,
        pull_request_id: int,
        thread_id: int,
    ) -> Any:
        url = self._repo_url(
            repository_id, f'pullRequests/{pull_request_id}/threads/{thread_id}/comments'
        )
        return self._post(url, comment)

    def get_commits(
        self,
        repository_id: str,
        search_criteria: Dict[str, Any],
        project: Optional[str] = None,
    ) -> List[Any]:
        """List commits; ``search_criteria`` keys are sent as ``searchCriteria.<key>``."""
        params = {f'searchCriteria.{key}': value for key, value in search_criteria.items()}
        return values(self._get(self._repo_url(repository_id, 'commits', project), params))

    def get_pull_request_query(
        self,
        queries: List[Dict[str, Any]],
        repository_id: str,
        project: Optional[str] = None,
    ) -> Any:
        url = self._repo_url(repository_id, 'pullrequestquery', project)
        return self._post(url, {'queries': queries})
