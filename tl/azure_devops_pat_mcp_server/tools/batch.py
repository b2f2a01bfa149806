"""Sequential fan-out for bulk tools."""

from loguru import logger
from tl.azure_devops_pat_mcp_server.errors import AzureDevOpsMcpError
from tl.azure_devops_pat_mcp_server.models import BatchItemResult, BatchReport
from typing import Any, Callable, Iterable, TypeVar


T = TypeVar('T')


def run_batch(
    operation: str,
    items: Iterable[T],
    identify: Callable[[T], Any],
    call: Callable[[T], Any],
) -> BatchReport:
    """Run ``call`` for every item in order and report each outcome.

    Azure DevOps failures are recorded against their item and the remaining items are
    still attempted.

    Args:
        operation: Name of the bulk operation, used in the report message
        items: Items to process
        identify: Returns the identifier reported for an item
        call: Performs the request for one item

    Returns:
        A report with one result per item
    """
    results = []
    for item in items:
        key = identify(item)
        try:
            results.append(BatchItemResult(key, ok=True, result=call(item)))
        except AzureDevOpsMcpError as e:
            logger.warning(f'{operation}: item {key} failed: {str(e)}')
            results.append(BatchItemResult(key, ok=False, error=str(e)))
    return BatchReport(operation, results)
