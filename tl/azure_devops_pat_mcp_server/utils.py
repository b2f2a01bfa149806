"""Small response-shaping helpers shared by the tool handlers."""

from typing import Any, Dict, List, Optional


BRANCH_PREFIX = 'refs/heads/'


def filter_by_name(
    items: List[Dict[str, Any]], needle: Optional[str], key: str = 'name'
) -> List[Dict[str, Any]]:
    """Keep items whose ``key`` contains ``needle`` (case-insensitive).

    An empty or missing ``needle`` keeps everything.
    """
    if not needle:
        return items
    needle = needle.lower()
    return [item for item in items if needle in str(item.get(key) or '').lower()]


def page(items: List[Any], skip: int = 0, top: Optional[int] = None) -> List[Any]:
    """Return ``items[skip:skip + top]`` (all remaining items when ``top`` is ``None``)."""
    if top is None:
        return items[skip:]
    return items[skip:skip + top]


def branch_ref(name: str) -> str:
    """Qualify a short branch name (``main`` -> ``refs/heads/main``); full refs pass through."""
    return name if name.startswith('refs/') else f'{BRANCH_PREFIX}{name}'


def short_branch_name(ref_name: str) -> str:
    return ref_name[len(BRANCH_PREFIX):] if ref_name.startswith(BRANCH_PREFIX) else ref_name


def branch_refs(refs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep only ``refs/heads/*`` refs."""
    return [ref for ref in refs if str(ref.get('name') or '').startswith(BRANCH_PREFIX)]


def encode_formatted_value(value: Any, format: Optional[str] = None) -> Any:
    """HTML-escape angle brackets in values submitted as Markdown."""
    if not isinstance(value, str) or not value or format != 'Markdown':
        return value
    return value.replace('<', '&lt;').replace('>', '&gt;')


def escape_wiql_string(value: str) -> str:
    """Escape a value for use inside a single-quoted WIQL string literal."""
    return value.replace("'", "''")
