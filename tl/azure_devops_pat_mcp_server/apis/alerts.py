"""Advanced Security alerts."""

from tl.azure_devops_pat_mcp_server.apis.base import PREVIEW_API_VERSION, ResourceApi, segment, values
from typing import Any, List, Optional


class AlertApi(ResourceApi):
    """Alerts served from the organization's ``advsec`` host."""

    def _alerts_url(self, project: str, repository: str, path: str = '') -> str:
        suffix = f'/{path}' if path else ''
        return self._url(
            f'_apis/alert/repositories/{segment(repository)}/alerts{suffix}',
            project=project,
            base_url=self._connection.service_url('advsec'),
        )

    def get_alerts(
        self,
        project: str,
        repository: str,
        top: Optional[int] = None,
        order_by: str = 'severity',
        alert_type: Optional[int] = None,
        states: Optional[List[int]] = None,
        severities: Optional[List[int]] = None,
        only_default_branch: Optional[bool] = None,
    ) -> List[Any]:
        params = {
            'top': top,
            'orderBy': order_by,
            'criteria.alertType': alert_type,
            'criteria.states': states or None,
            'criteria.severities': severities or None,
            'criteria.onlyDefaultBranch': only_default_branch,
        }
        url = self._alerts_url(project, repository)
        return values(self._get(url, params, api_version=PREVIEW_API_VERSION))

    def get_alert(
        self, project: str, repository: str, alert_id: int, ref: Optional[str] = None
    ) -> Any:
        url = self._alerts_url(project, repository, str(alert_id))
        return self._get(url, {'ref': ref}, api_version=PREVIEW_API_VERSION)
