"""Lookup table tests."""

from __future__ import annotations

import pytest
from tl.azure_devops_pat_mcp_server import mappings


@pytest.mark.parametrize(
    ('value', 'code'),
    [('Active', 1), ('abandoned', 2), ('COMPLETED', 3), ('All', 4), ('NotSet', 0), (None, 1), ('bogus', 1)],
)
def test_pull_request_status(value: str | None, code: int) -> None:
    assert mappings.pull_request_status(value) == code


@pytest.mark.parametrize(
    ('value', 'code'),
    [('active', 1), ('fixed', 2), ('wontFix', 3), ('closed', 4), ('pending', 6), (None, 1)],
)
def test_thread_status(value: str | None, code: int) -> None:
    assert mappings.thread_status(value) == code


def test_work_item_expand_is_omitted_when_not_requested() -> None:
    assert mappings.work_item_expand(None) is None
    assert mappings.work_item_expand('Relations') == 1
    assert mappings.work_item_expand('fields') == 2
    assert mappings.work_item_expand('links') == 3
    assert mappings.work_item_expand('all') == 4
    assert mappings.work_item_expand('none') == 0


def test_query_expand() -> None:
    assert mappings.query_expand(None) is None
    assert mappings.query_expand('wiql') == 1
    assert mappings.query_expand('clauses') == 2
    assert mappings.query_expand('all') == 3
    assert mappings.query_expand('minimal') == 4


def test_stage_update_defaults_to_retry() -> None:
    assert mappings.stage_update('Cancel') == 2
    assert mappings.stage_update('retry') == 1
    assert mappings.stage_update('pause') == 1


def test_link_type_resolves_friendly_names_and_passes_through_reference_names() -> None:
    assert mappings.link_type('Parent') == 'System.LinkTypes.Hierarchy-Reverse'
    assert mappings.link_type('child') == 'System.LinkTypes.Hierarchy-Forward'
    assert mappings.link_type('Custom.LinkType') == 'Custom.LinkType'


def test_alert_lists_drop_unknown_values() -> None:
    assert mappings.map_enum_list(['Active', 'bogus', 'fixed'], mappings.ALERT_STATE) == [1, 4]
    assert mappings.map_enum_list(None, mappings.ALERT_SEVERITY) == []
    assert mappings.map_enum('secret', mappings.ALERT_TYPE) == 2
    assert mappings.map_enum('nope', mappings.ALERT_TYPE) is None
