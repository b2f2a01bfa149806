"""Build (classic and YAML) runs, definitions, logs and artifacts."""

import requests
from tl.azure_devops_pat_mcp_server.apis.base import PREVIEW_API_VERSION, ResourceApi, segment, values
from typing import Any, Dict, List, Optional


BUILD_REPORT_API_VERSION = '7.1-preview.2'


class BuildApi(ResourceApi):
    """Builds and build definitions."""

    def _build_url(self, project: str, build_id: int, path: str = '') -> str:
        suffix = f'/{path}' if path else ''
        return self._url(f'_apis/build/builds/{build_id}{suffix}', project=project)

    def get_builds(
        self,
        project: str,
        definitions: Optional[List[int]] = None,
        build_number: Optional[str] = None,
        status_filter: Optional[int] = None,
        result_filter: Optional[int] = None,
        top: Optional[int] = None,
        branch_name: Optional[str] = None,
    ) -> List[Any]:
        params = {
            'definitions': definitions or None,
            'buildNumber': build_number,
            'statusFilter': status_filter,
            'resultFilter': result_filter,
            '$top': top,
            'branchName': branch_name,
        }
        return values(self._get(self._url('_apis/build/builds', project=project), params))

    def get_build_changes(self, project: str, build_id: int, top: Optional[int] = None) -> List[Any]:
        return values(self._get(self._build_url(project, build_id, 'changes'), {'$top': top}))

    def get_definitions(
        self,
        project: str,
        name: Optional[str] = None,
        repository_id: Optional[str] = None,
        repository_type: Optional[str] = None,
        top: Optional[int] = None,
        path: Optional[str] = None,
    ) -> List[Any]:
        params = {
            'name': name,
            'repositoryId': repository_id,
            'repositoryType': repository_type,
            '$top': top,
            'path': path,
        }
        return values(self._get(self._url('_apis/build/definitions', project=project), params))

    def get_definition_revisions(self, project: str, definition_id: int) -> List[Any]:
        url = self._url(f'_apis/build/definitions/{definition_id}/revisions', project=project)
        return values(self._get(url))

    def get_build_logs(self, project: str, build_id: int) -> List[Any]:
        return values(self._get(self._build_url(project, build_id, 'logs')))

    def get_build_log_lines(
        self,
        project: str,
        build_id: int,
        log_id: int,
        start_line: Optional[int] = None,
        end_line: Optional[int] = None,
    ) -> List[Any]:
        """Return the requested log lines as a list of strings."""
        url = self._build_url(project, build_id, f'logs/{log_id}')
        return values(self._get(url, {'startLine': start_line, 'endLine': end_line}))

    def get_build_report(self, project: str, build_id: int) -> Any:
        url = self._build_url(project, build_id, 'report')
        return self._get(url, api_version=BUILD_REPORT_API_VERSION)

    def update_stage(
        self,
        project: str,
        build_id: int,
        stage_name: str,
        state: int,
        force_retry_all_jobs: Optional[bool] = None,
    ) -> Any:
        """Retry or cancel a single stage of a YAML build."""
        url = self._build_url(project, build_id, f'stages/{segment(stage_name)}')
        body: Dict[str, Any] = {'state': state}
        if force_retry_all_jobs is not None:
            body['forceRetryAllJobs'] = force_retry_all_jobs
        return self._patch(url, body, api_version=PREVIEW_API_VERSION)

    def get_artifacts(self, project: str, build_id: int) -> List[Any]:
        return values(self._get(self._build_url(project, build_id, 'artifacts')))

    def get_artifact_content_zip(
        self, project: str, build_id: int, artifact_name: str
    ) -> requests.Response:
        """Open a streaming download of an artifact as a zip archive.

        The caller owns the returned response and must close it.
        """
        return self._connection.request(
            'GET',
            self._build_url(project, build_id, 'artifacts'),
            params={'artifactName': artifact_name, '$format': 'zip'},
            headers={'Accept': 'application/zip'},
            stream=True,
        )
