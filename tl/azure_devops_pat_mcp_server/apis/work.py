"""Team-scoped agile endpoints: backlogs, iterations and capacity."""

from tl.azure_devops_pat_mcp_server.apis.base import ResourceApi, segment, values
from typing import Any, Dict, List, Optional


class WorkApi(ResourceApi):
    """Backlogs, team iterations and capacity planning."""

    def _team_url(self, project: str, team: str, path: str) -> str:
        return self._url(f'_apis/work/{path}', project=project, team=team)

    def get_backlogs(self, project: str, team: str) -> List[Any]:
        return values(self._get(self._team_url(project, team, 'backlogs')))

    def get_backlog_level_work_items(self, project: str, team: str, backlog_id: str) -> Any:
        url = self._team_url(project, team, f'backlogs/{segment(backlog_id)}/workItems')
        return self._get(url)

    def get_iteration_work_items(self, project: str, team: str, iteration_id: str) -> Any:
        url = self._team_url(
            project, team, f'teamsettings/iterations/{segment(iteration_id)}/workitems'
        )
        return self._get(url)

    def get_team_iterations(
        self, project: str, team: str, timeframe: Optional[str] = None
    ) -> List[Any]:
        url = self._team_url(project, team, 'teamsettings/iterations')
        return values(self._get(url, {'$timeframe': timeframe}))

    def post_team_iteration(self, iteration: Dict[str, Any], project: str, team: str) -> Any:
        return self._post(self._team_url(project, team, 'teamsettings/iterations'), iteration)

    def get_capacities_with_identity_ref_and_totals(
        self, project: str, team: str, iteration_id: str
    ) -> Any:
        url = self._team_url(
            project, team, f'teamsettings/iterations/{segment(iteration_id)}/capacities'
        )
        return self._get(url)

    def update_capacity_with_identity_ref(
        self,
        patch: Dict[str, Any],
        project: str,
        team: str,
        iteration_id: str,
        team_member_id: str,
    ) -> Any:
        url = self._team_url(
            project,
            team,
            f'teamsettings/iterations/{segment(iteration_id)}/capacities/{segment(team_member_id)}',
        )
        return self._patch(url, patch)

    def get_total_iteration_capacities(self, project: str, iteration_id: str) -> Any:
        url = self._url(
            f'_apis/work/iterations/{segment(iteration_id)}/iterationcapacities', project=project
        )
        return self._get(url)
