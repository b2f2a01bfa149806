"""Lookup tables from the string values tools accept to Azure DevOps wire codes.

All lookups are case-insensitive. Each table documents what an unrecognised value maps to.
"""

from typing import Dict, Iterable, List, Optional


PULL_REQUEST_STATUS: Dict[str, int] = {
    'notset': 0,
    'active': 1,
    'abandoned': 2,
    'completed': 3,
    'all': 4,
}
DEFAULT_PULL_REQUEST_STATUS = PULL_REQUEST_STATUS['active']

THREAD_STATUS: Dict[str, int] = {
    'unknown': 0,
    'active': 1,
    'fixed': 2,
    'wontfix': 3,
    'closed': 4,
    'bydesign': 5,
    'pending': 6,
}
DEFAULT_THREAD_STATUS = THREAD_STATUS['active']

WORK_ITEM_EXPAND: Dict[str, int] = {
    'none': 0,
    'relations': 1,
    'fields': 2,
    'links': 3,
    'all': 4,
}

QUERY_EXPAND: Dict[str, int] = {
    'none': 0,
    'wiql': 1,
    'clauses': 2,
    'all': 3,
    'minimal': 4,
}

STAGE_UPDATE: Dict[str, int] = {
    'retry': 1,
    'cancel': 2,
}
DEFAULT_STAGE_UPDATE = STAGE_UPDATE['retry']

LINK_TYPES: Dict[str, str] = {
    'parent': 'System.LinkTypes.Hierarchy-Reverse',
    'child': 'System.LinkTypes.Hierarchy-Forward',
    'related': 'System.LinkTypes.Related',
    'duplicate': 'System.LinkTypes.Duplicate-Forward',
    'duplicate-of': 'System.LinkTypes.Duplicate-Reverse',
    'successor': 'System.LinkTypes.Dependency-Forward',
    'predecessor': 'System.LinkTypes.Dependency-Reverse',
    'tested-by': 'Microsoft.VSTS.Common.TestedBy-Forward',
    'tests': 'Microsoft.VSTS.Common.TestedBy-Reverse',
}

ALERT_TYPE: Dict[str, int] = {
    'unknown': 0,
    'dependency': 1,
    'secret': 2,
    'code': 3,
}

ALERT_STATE: Dict[str, int] = {
    'unknown': 0,
    'active': 1,
    'dismissed': 2,
    'fixed': 4,
    'autodismissed': 8,
}

ALERT_SEVERITY: Dict[str, int] = {
    'low': 0,
    'medium': 1,
    'high': 2,
    'critical': 3,
    'note': 4,
    'warning': 5,
    'error': 6,
}


def map_enum(
    value: Optional[str], table: Dict[str, int], default: Optional[int] = None
) -> Optional[int]:
    """Look up ``value`` in ``table`` ignoring case.

    Args:
        value: The string supplied by the caller, possibly ``None`` or empty
        table: Lower-cased names to wire codes
        default: Returned for a missing or unrecognised value

    Returns:
        The wire code, or ``default``
    """
    if not value:
        return default
    return table.get(value.lower(), default)


def map_enum_list(values: Optional[Iterable[str]], table: Dict[str, int]) -> List[int]:
    """Map each value ignoring case, dropping the ones the table does not know."""
    codes = (map_enum(value, table) for value in values or ())
    return [code for code in codes if code is not None]


def pull_request_status(value: Optional[str]) -> int:
    return map_enum(value, PULL_REQUEST_STATUS, DEFAULT_PULL_REQUEST_STATUS)


def thread_status(value: Optional[str]) -> int:
    return map_enum(value, THREAD_STATUS, DEFAULT_THREAD_STATUS)


def work_item_expand(value: Optional[str]) -> Optional[int]:
    """``None`` when no expansion was requested, so the parameter is not sent."""
    return map_enum(value, WORK_ITEM_EXPAND, WORK_ITEM_EXPAND['none'] if value else None)


def query_expand(value: Optional[str]) -> Optional[int]:
    return map_enum(value, QUERY_EXPAND, QUERY_EXPAND['none'] if value else None)


def stage_update(value: Optional[str]) -> int:
    return map_enum(value, STAGE_UPDATE, DEFAULT_STAGE_UPDATE)


def link_type(value: str) -> str:
    """Resolve a friendly link name; anything else is taken as a reference name."""
    return LINK_TYPES.get(value.lower(), value)
