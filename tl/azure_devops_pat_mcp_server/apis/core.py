"""Core (projects, teams) and identity endpoints."""

from tl.azure_devops_pat_mcp_server.apis.base import ResourceApi, segment, values
from typing import Any, List, Optional


class CoreApi(ResourceApi):
    """Projects and teams."""

    def get_teams(
        self,
        project: str,
        mine: Optional[bool] = None,
        top: Optional[int] = None,
        skip: Optional[int] = None,
    ) -> List[Any]:
        url = self._url(f'_apis/projects/{segment(project)}/teams')
        params = {'$mine': mine, '$top': top, '$skip': skip, '$expandIdentity': False}
        return values(self._get(url, params))

    def get_projects(
        self,
        state_filter: Optional[str] = None,
        top: Optional[int] = None,
        skip: Optional[int] = None,
    ) -> List[Any]:
        url = self._url('_apis/projects')
        params = {'stateFilter': state_filter, '$top': top, '$skip': skip}
        return values(self._get(url, params))


class IdentityApi(ResourceApi):
    """Identity lookups on the organization's ``vssps`` host."""

    def search_identities(self, filter_value: str, search_filter: str = 'General') -> Any:
        """Search identities by unique name, display name or e-mail address."""
        url = self._url('_apis/identities', base_url=self._connection.service_url('vssps'))
        params = {'searchFilter': search_filter, 'filterValue': filter_value}
        return self._get(url, params)
