"""Narrow REST clients, one per Azure DevOps resource area."""

from tl.azure_devops_pat_mcp_server.apis.alerts import AlertApi
from tl.azure_devops_pat_mcp_server.apis.build import BuildApi
from tl.azure_devops_pat_mcp_server.apis.core import CoreApi, IdentityApi
from tl.azure_devops_pat_mcp_server.apis.git import GitApi
from tl.azure_devops_pat_mcp_server.apis.pipelines import PipelinesApi
from tl.azure_devops_pat_mcp_server.apis.search import SearchApi
from tl.azure_devops_pat_mcp_server.apis.test_plans import TestPlanApi, TestResultsApi
from tl.azure_devops_pat_mcp_server.apis.wiki import WikiApi
from tl.azure_devops_pat_mcp_server.apis.work import WorkApi
from tl.azure_devops_pat_mcp_server.apis.work_items import WorkItemTrackingApi


__all__ = [
    'AlertApi',
    'BuildApi',
    'CoreApi',
    'GitApi',
    'IdentityApi',
    'PipelinesApi',
    'SearchApi',
    'TestPlanApi',
    'TestResultsApi',
    'WikiApi',
    'WorkApi',
    'WorkItemTrackingApi',
]
