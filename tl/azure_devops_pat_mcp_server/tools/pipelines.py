"""Builds, build definitions, logs, artifacts and YAML pipeline runs."""

import os
from loguru import logger
from pydantic import BaseModel
from tl.azure_devops_pat_mcp_server import mappings
from tl.azure_devops_pat_mcp_server.catalog import (
    array,
    boolean,
    integer,
    obj,
    string,
    tool_registry,
)
from tl.azure_devops_pat_mcp_server.dispatcher import ToolContext
from typing import Any, Dict, List


TOOLS: List = []
tool = tool_registry(TOOLS)

DOWNLOAD_CHUNK_SIZE = 64 * 1024

PROJECT = string('Project ID or name.')
BUILD_ID = integer('Build ID.')


@tool(
    'pipelines_get_builds',
    'Retrieves a list of builds for a given project.',
    {
        'project': PROJECT,
        'definitions': array(integer('Definition ID.'), 'Definition IDs to filter.'),
        'top': integer('Maximum builds.'),
        'branchName': string('Branch name filter.'),
        'buildNumber': string('Build number filter.'),
        'statusFilter': integer('Status filter (BuildStatus flags).'),
        'resultFilter': integer('Result filter (BuildResult flags).'),
    },
    required=['project'],
)
def get_builds(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().build.get_builds(
        args.project,
        definitions=args.definitions,
        build_number=args.build_number,
        status_filter=args.status_filter,
        result_filter=args.result_filter,
        top=args.top,
        branch_name=args.branch_name,
    )


@tool(
    'pipelines_get_build_changes',
    'Get the changes associated with a build.',
    {'project': PROJECT, 'buildId': BUILD_ID, 'top': integer('Maximum changes.', default=100)},
    required=['project', 'buildId'],
)
def get_build_changes(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().build.get_build_changes(args.project, args.build_id, args.top)


@tool(
    'pipelines_get_build_definitions',
    'Retrieves build definitions for a project.',
    {
        'project': PROJECT,
        'name': string('Filter by name.'),
        'repositoryId': string('Filter by repository.'),
        'repositoryType': string('Repository type.', enum=['TfsGit', 'GitHub', 'BitbucketCloud']),
        'top': integer('Maximum definitions.'),
        'path': string('Filter by path.'),
    },
    required=['project'],
)
def get_build_definitions(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().build.get_definitions(
        args.project,
        name=args.name,
        repository_id=args.repository_id,
        repository_type=args.repository_type,
        top=args.top,
        path=args.path,
    )


@tool(
    'pipelines_get_build_definition_revisions',
    'Get revisions of a build definition.',
    {'project': PROJECT, 'definitionId': integer('Definition ID.')},
    required=['project', 'definitionId'],
)
def get_build_definition_revisions(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().build.get_definition_revisions(args.project, args.definition_id)


@tool(
    'pipelines_get_build_log',
    'Retrieves the list of logs for a build.',
    {'project': PROJECT, 'buildId': BUILD_ID},
    required=['project', 'buildId'],
)
def get_build_log(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().build.get_build_logs(args.project, args.build_id)


@tool(
    'pipelines_get_build_log_by_id',
    'Get the lines of a specific build log.',
    {
        'project': PROJECT,
        'buildId': BUILD_ID,
        'logId': integer('Log ID.'),
        'startLine': integer('Start line.'),
        'endLine': integer('End line.'),
    },
    required=['project', 'buildId', 'logId'],
)
def get_build_log_by_id(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().build.get_build_log_lines(
        args.project, args.build_id, args.log_id, args.start_line, args.end_line
    )


@tool(
    'pipelines_get_build_status',
    'Get the status report of a build.',
    {'project': PROJECT, 'buildId': BUILD_ID},
    required=['project', 'buildId'],
)
def get_build_status(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().build.get_build_report(args.project, args.build_id)


@tool(
    'pipelines_update_build_stage',
    'Retry or cancel a stage of a build.',
    {
        'project': PROJECT,
        'buildId': BUILD_ID,
        'stageName': string('Stage name.'),
        'status': string('New status: Retry or Cancel (case-insensitive).'),
        'forceRetryAllJobs': boolean('Force retry all jobs.'),
    },
    required=['project', 'buildId', 'stageName', 'status'],
)
def update_build_stage(ctx: ToolContext, args: BaseModel) -> Any:
    """Retry or cancel one stage of a build."""
    return ctx.connection().build.update_stage(
        args.project,
        args.build_id,
        args.stage_name,
        mappings.stage_update(args.status),
        args.force_retry_all_jobs,
    )


@tool(
    'pipelines_create_pipeline',
    'Create a new YAML pipeline.',
    {
        'project': PROJECT,
        'name': string('Pipeline name.'),
        'folder': string('Folder path.', default='\\'),
        'yamlPath': string('Path to YAML file.'),
        'repositoryType': string('Repository type, e.g. azureReposGit or gitHub.'),
        'repositoryName': string('Repository name.'),
        'repositoryId': string('Repository ID.'),
    },
    required=['project', 'name', 'yamlPath', 'repositoryType', 'repositoryName'],
)
def create_pipeline(ctx: ToolContext, args: BaseModel) -> Any:
    repository: Dict[str, Any] = {'type': args.repository_type, 'name': args.repository_name}
    if args.repository_id:
        repository['id'] = args.repository_id
    pipeline = {
        'name': args.name,
        'folder': args.folder or '\\',
        'configuration': {'type': 'yaml', 'path': args.yaml_path, 'repository': repository},
    }
    return ctx.connection().pipelines.create_pipeline(pipeline, args.project)


@tool(
    'pipelines_get_run',
    'Get a specific pipeline run.',
    {'project': PROJECT, 'pipelineId': integer('Pipeline ID.'), 'runId': integer('Run ID.')},
    required=['project', 'pipelineId', 'runId'],
)
def get_run(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().pipelines.get_run(args.project, args.pipeline_id, args.run_id)


@tool(
    'pipelines_list_runs',
    'List runs for a pipeline.',
    {'project': PROJECT, 'pipelineId': integer('Pipeline ID.')},
    required=['project', 'pipelineId'],
)
def list_runs(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().pipelines.list_runs(args.project, args.pipeline_id)


@tool(
    'pipelines_run_pipeline',
    'Start a new pipeline run.',
    {
        'project': PROJECT,
        'pipelineId': integer('Pipeline ID.'),
        'templateParameters': obj(description='Template parameters.'),
        'stagesToSkip': array(string('Stage name.'), 'Stages to skip.'),
        'variables': obj(description='Variables, e.g. {"name": {"value": "x"}}.'),
    },
    required=['project', 'pipelineId'],
)
def run_pipeline(ctx: ToolContext, args: BaseModel) -> Any:
    """Queue a pipeline run; unset run options are left to the pipeline defaults."""
    run_parameters: Dict[str, Any] = {}
    if args.template_parameters is not None:
        run_parameters['templateParameters'] = args.template_parameters
    if args.stages_to_skip is not None:
        run_parameters['stagesToSkip'] = args.stages_to_skip
    if args.variables is not None:
        run_parameters['variables'] = args.variables
    return ctx.connection().pipelines.run_pipeline(run_parameters, args.project, args.pipeline_id)


@tool(
    'pipelines_list_artifacts',
    'List artifacts for a build.',
    {'project': PROJECT, 'buildId': BUILD_ID},
    required=['project', 'buildId'],
)
def list_artifacts(ctx: ToolContext, args: BaseModel) -> Any:
    return ctx.connection().build.get_artifacts(args.project, args.build_id)


@tool(
    'pipelines_download_artifact',
    'Download a build artifact as a zip file, or report its size when no destination is given.',
    {
        'project': PROJECT,
        'buildId': BUILD_ID,
        'artifactName': string('Artifact name.'),
        'destinationPath': string('Local directory to save <artifactName>.zip into.'),
    },
    required=['project', 'buildId', 'artifactName'],
)
def download_artifact(ctx: ToolContext, args: BaseModel) -> Any:
    """Stream a build artifact to disk, or only measure it.

    Args:
        ctx: The tool context
        args: Validated arguments; without ``destination_path`` nothing is written

    Returns:
        A message with the saved file path, or with the artifact size in bytes
    """
    response = ctx.connection().build.get_artifact_content_zip(
        args.project, args.build_id, args.artifact_name
    )
    with response:
        if not args.destination_path:
            size = sum(len(chunk) for chunk in response.iter_content(DOWNLOAD_CHUNK_SIZE))
            return f'Artifact size: {size} bytes (content not shown)'

        directory = os.path.abspath(args.destination_path)
        os.makedirs(directory, exist_ok=True)
        file_path = os.path.join(directory, f'{args.artifact_name}.zip')
        with open(file_path, 'wb') as f:
            for chunk in response.iter_content(DOWNLOAD_CHUNK_SIZE):
                f.write(chunk)
    logger.info(f'Saved artifact {args.artifact_name} of build {args.build_id} to {file_path}')
    return f'Artifact saved to {file_path}'
