"""Iteration and capacity tool handlers, exercised through the dispatcher."""

from __future__ import annotations

from conftest import ORG_URL, StubAdapter, payload
from tl.azure_devops_pat_mcp_server.dispatcher import Dispatcher

TEAM_URL = f'{ORG_URL}/Fabrikam/Team A/_apis/work'


def test_list_iterations_keeps_iteration_nodes(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add(
        'GET',
        f'{ORG_URL}/Fabrikam/_apis/wit/classificationnodes',
        body={
            'value': [
                {'name': 'Fabrikam', 'structureType': 'area'},
                {'name': 'Fabrikam', 'structureType': 'iteration', 'children': [{'name': 'Sprint 1'}]},
            ]
        },
    )

    envelope = dispatcher.invoke('work_list_iterations', {'project': 'Fabrikam'})

    assert payload(envelope) == [
        {'name': 'Fabrikam', 'structureType': 'iteration', 'children': [{'name': 'Sprint 1'}]}
    ]
    assert stub.requests[0].param('$depth') == '2'


def test_list_team_iterations_current(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('GET', f'{TEAM_URL}/teamsettings/iterations', body={'value': [{'name': 'Sprint 3'}]})

    envelope = dispatcher.invoke(
        'work_list_team_iterations', {'project': 'Fabrikam', 'team': 'Team A', 'timeframe': 'current'}
    )

    assert payload(envelope) == [{'name': 'Sprint 3'}]
    assert stub.requests[0].param('$timeframe') == 'current'


def test_create_iterations_reports_each(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    url = f'{ORG_URL}/Fabrikam/_apis/wit/classificationnodes/iterations'
    stub.add('POST', url, body={'id': 1, 'name': 'Sprint 1'})
    stub.add('POST', url, status=409, body={'message': 'VS402371: Sprint 2 already exists'})

    envelope = dispatcher.invoke(
        'work_create_iterations',
        {
            'project': 'Fabrikam',
            'iterations': [
                {'iterationName': 'Sprint 1', 'startDate': '2026-01-05', 'finishDate': '2026-01-16'},
                {'iterationName': 'Sprint 2'},
            ],
        },
    )

    assert envelope.is_error
    report = payload(envelope)
    assert report['message'] == 'Create iterations: 1 of 2 succeeded, 1 failed'
    assert report['results'][1]['item'] == 'Sprint 2'
    bodies = [seen.json() for seen in stub.calls('POST')]
    assert bodies == [
        {'name': 'Sprint 1', 'attributes': {'startDate': '2026-01-05', 'finishDate': '2026-01-16'}},
        {'name': 'Sprint 2'},
    ]


def test_assign_iterations(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('POST', f'{TEAM_URL}/teamsettings/iterations', body={'id': 'it-1'})

    envelope = dispatcher.invoke(
        'work_assign_iterations',
        {
            'project': 'Fabrikam',
            'team': 'Team A',
            'iterations': [{'identifier': 'it-1', 'path': 'Fabrikam\\Sprint 1'}],
        },
    )

    report = payload(envelope)
    assert report['status'] == 'success'
    assert report['results'] == [{'item': 'it-1', 'ok': True, 'result': {'id': 'it-1'}}]
    assert stub.requests[0].json() == {'id': 'it-1', 'path': 'Fabrikam\\Sprint 1'}


def test_update_team_capacity(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('PATCH', f'{TEAM_URL}/teamsettings/iterations/it-1/capacities/user-1', body={'teamMember': {'id': 'user-1'}})

    dispatcher.invoke(
        'work_update_team_capacity',
        {
            'project': 'Fabrikam',
            'team': 'Team A',
            'iterationId': 'it-1',
            'teamMemberId': 'user-1',
            'activities': [{'name': 'Development', 'capacityPerDay': 6}],
            'daysOff': [{'start': '2026-01-07', 'end': '2026-01-08'}],
        },
    )

    assert stub.requests[0].json() == {
        'activities': [{'name': 'Development', 'capacityPerDay': 6}],
        'daysOff': [{'start': '2026-01-07', 'end': '2026-01-08'}],
    }


def test_iteration_capacities(dispatcher: Dispatcher, stub: StubAdapter) -> None:
    stub.add('GET', f'{ORG_URL}/Fabrikam/_apis/work/iterations/it-1/iterationcapacities', body={'teams': []})

    envelope = dispatcher.invoke('work_get_iteration_capacities', {'project': 'Fabrikam', 'iterationId': 'it-1'})

    assert payload(envelope) == {'teams': []}
