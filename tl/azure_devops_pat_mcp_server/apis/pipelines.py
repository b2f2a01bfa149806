"""YAML pipelines and their runs."""

from tl.azure_devops_pat_mcp_server.apis.base import ResourceApi, values
from typing import Any, Dict, List


class PipelinesApi(ResourceApi):
    """Pipelines API (``_apis/pipelines``)."""

    def create_pipeline(self, pipeline: Dict[str, Any], project: str) -> Any:
        return self._post(self._url('_apis/pipelines', project=project), pipeline)

    def get_run(self, project: str, pipeline_id: int, run_id: int) -> Any:
        url = self._url(f'_apis/pipelines/{pipeline_id}/runs/{run_id}', project=project)
        return self._get(url)

    def list_runs(self, project: str, pipeline_id: int) -> List[Any]:
        url = self._url(f'_apis/pipelines/{pipeline_id}/runs', project=project)
        return values(self._get(url))

    def run_pipeline(self, run_parameters: Dict[str, Any], project: str, pipeline_id: int) -> Any:
        url = self._url(f'_apis/pipelines/{pipeline_id}/runs', project=project)
        return self._post(url, run_parameters)
