"""Result models for tools that fan out into several Azure DevOps calls."""

from typing import Any, Dict, List, Optional


class BatchItemResult(Dict[str, Any]):
    """Outcome of one item of a bulk operation."""

    def __init__(self, item: Any, ok: bool, result: Any = None, error: Optional[str] = None):
        """Initialize the item result.

        Args:
            item: Identifier of the item (work item id, iteration name, ...)
            ok: Whether the call for this item succeeded
            result: Response returned for a successful item
            error: Error text for a failed item
        """
        payload: Dict[str, Any] = {'item': item, 'ok': ok}
        if ok:
            payload['result'] = result
        else:
            payload['error'] = error
        super().__init__(payload)
        self.item = item
        self.ok = ok
        self.result = result
        self.error = error


class BatchReport(Dict[str, Any]):
    """Per-item outcome of a bulk operation.

    Every item is attempted; a failure does not stop the remaining items and nothing is
    rolled back.
    """

    def __init__(self, operation: str, results: List[BatchItemResult]):
        """Initialize the report.

        Args:
            operation: Human-readable name of the bulk operation
            results: One result per requested item, in request order
        """
        succeeded = sum(1 for result in results if result.ok)
        failed = len(results) - succeeded
        status = 'success' if failed == 0 else 'error'
        message = f'{operation}: {succeeded} of {len(results)} succeeded'
        if failed:
            message += f', {failed} failed'
        super().__init__(
            {
                'status': status,
                'message': message,
                'total': len(results),
                'succeeded': succeeded,
                'failed': failed,
                'results': results,
            }
        )
        self.status = status
        self.message = message
        self.results = results
        self.succeeded = succeeded
        self.failed = failed

    @property
    def has_failures(self) -> bool:
        return self.failed > 0
