"""PAT header and connection provider tests."""

from __future__ import annotations

import base64
import threading
import time

import pytest
from tl.azure_devops_pat_mcp_server.auth import ConnectionProvider, auth_header
from tl.azure_devops_pat_mcp_server.errors import ConfigurationError


def test_auth_header_round_trips_to_empty_user_and_pat() -> None:
    header = auth_header('my-pat')

    scheme, encoded = header.split(' ', 1)
    assert scheme == 'Basic'
    assert base64.b64decode(encoded).decode() == ':my-pat'


def test_connection_is_built_once_and_shared() -> None:
    calls = []
    provider = ConnectionProvider(lambda: calls.append(1) or object())

    first = provider.get_connection()
    second = provider.get_connection()

    assert first is second
    assert len(calls) == 1
    assert provider.connected


def test_concurrent_callers_share_one_in_flight_construction() -> None:
    started = threading.Event()
    release = threading.Event()
    calls = []

    def factory() -> object:
        calls.append(1)
        started.set()
        release.wait(5)
        return object()

    provider = ConnectionProvider(factory)
    results: list[object] = []
    results_lock = threading.Lock()

    def worker() -> None:
        connection = provider.get_connection()
        with results_lock:
            results.append(connection)

    builder = threading.Thread(target=worker)
    builder.start()
    assert started.wait(5)
    waiters = [threading.Thread(target=worker) for _ in range(5)]
    for thread in waiters:
        thread.start()
    time.sleep(0.1)
    release.set()
    for thread in [builder, *waiters]:
        thread.join(5)

    assert len(calls) == 1
    assert len(results) == 6
    assert all(connection is results[0] for connection in results)


def test_construction_failure_reaches_waiting_callers() -> None:
    started = threading.Event()
    release = threading.Event()
    failure = ConfigurationError('Personal Access Token is required for authentication')

    def factory() -> object:
        started.set()
        release.wait(5)
        raise failure

    provider = ConnectionProvider(factory)
    errors: list[BaseException] = []
    errors_lock = threading.Lock()

    def worker() -> None:
        try:
            provider.get_connection()
        except ConfigurationError as e:
            with errors_lock:
                errors.append(e)

    builder = threading.Thread(target=worker)
    builder.start()
    assert started.wait(5)
    waiter = threading.Thread(target=worker)
    waiter.start()
    time.sleep(0.1)
    release.set()
    builder.join(5)
    waiter.join(5)

    assert errors == [failure, failure]
    assert not provider.connected


def test_failed_construction_is_retried_on_next_call() -> None:
    outcomes = [ConfigurationError('Organization URL is required'), 'connection']

    def factory() -> str:
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    provider = ConnectionProvider(factory)

    with pytest.raises(ConfigurationError):
        provider.get_connection()
    assert provider.get_connection() == 'connection'
