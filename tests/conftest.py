"""Shared fixtures: a stub transport adapter and a dispatcher wired to it.

No test reaches the network. Requests made through the connection's session are
answered by ``StubAdapter`` from a table of routes keyed by method and URL (without
query string).
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import parse_qs, unquote, urlparse

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from tl.azure_devops_pat_mcp_server.auth import ConnectionProvider
from tl.azure_devops_pat_mcp_server.config import Settings
from tl.azure_devops_pat_mcp_server.connection import AzureDevOpsConnection
from tl.azure_devops_pat_mcp_server.dispatcher import Dispatcher, Envelope, ToolContext
from tl.azure_devops_pat_mcp_server.tools import TOOLS

ORG_URL = 'https://dev.azure.com/contoso'


@dataclass
class Reply:
    status: int = 200
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    text: str | None = None
    content: bytes | None = None


@dataclass
class SeenRequest:
    method: str
    url: str
    path: str
    query: dict[str, list[str]]
    headers: dict[str, str]
    body: bytes | None

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None

    def param(self, name: str) -> str | None:
        values = self.query.get(name)
        return values[0] if values else None


class StubAdapter(BaseAdapter):
    """Answers requests from canned replies, or from ``fallback`` for unrouted requests."""

    def __init__(self) -> None:
        super().__init__()
        self.routes: dict[tuple[str, str], list[Reply | Exception | Callable[..., Any]]] = {}
        self.requests: list[SeenRequest] = []
        self.fallback: Reply | Callable[..., Any] | None = None

    def add(self, method: str, url: str, reply: Reply | Exception | Callable[..., Any] | None = None, **kwargs: Any) -> None:
        """Queue a reply; the last reply queued for a route is reused once the others are consumed."""
        self.routes.setdefault((method, url), []).append(reply if reply is not None else Reply(**kwargs))

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        parsed = urlparse(request.url)
        base = f'{parsed.scheme}://{parsed.netloc}{unquote(parsed.path)}'
        body = request.body.encode() if isinstance(request.body, str) else request.body
        seen = SeenRequest(
            method=request.method,
            url=request.url,
            path=base,
            query=parse_qs(parsed.query),
            headers=dict(request.headers),
            body=body,
        )
        self.requests.append(seen)

        replies = self.routes.get((request.method, base))
        if not replies and self.fallback is not None:
            replies = [self.fallback]
        if not replies:
            raise AssertionError(f'Unexpected request: {request.method} {base}')
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if callable(reply) and not isinstance(reply, Reply):
            reply = reply(seen)
        if isinstance(reply, Exception):
            raise reply
        return self._build_response(request, reply)

    @staticmethod
    def _build_response(request: requests.PreparedRequest, reply: Reply) -> requests.Response:
        response = requests.Response()
        response.status_code = reply.status
        response.reason = 'OK' if reply.status < 400 else 'Error'
        response.url = request.url
        response.request = request
        response.encoding = 'utf-8'
        headers = CaseInsensitiveDict(reply.headers)
        if reply.content is not None:
            response._content = reply.content
        elif reply.text is not None:
            response._content = reply.text.encode()
        elif reply.body is not None:
            response._content = json.dumps(reply.body).encode()
            headers.setdefault('Content-Type', 'application/json')
        else:
            response._content = b''
        response._content_consumed = True
        response.headers = headers
        return response

    def close(self) -> None:
        pass

    def calls(self, method: str | None = None) -> list[SeenRequest]:
        return [seen for seen in self.requests if method is None or seen.method == method]


@pytest.fixture
def settings() -> Settings:
    return Settings(organization_url=ORG_URL, personal_access_token='secret-pat', timeout=5.0)


@pytest.fixture
def stub() -> StubAdapter:
    return StubAdapter()


@pytest.fixture
def connection(settings: Settings, stub: StubAdapter) -> AzureDevOpsConnection:
    session = requests.Session()
    session.mount('https://', stub)
    session.mount('http://', stub)
    return AzureDevOpsConnection(settings, session=session)


@pytest.fixture
def dispatcher(connection: AzureDevOpsConnection) -> Dispatcher:
    return Dispatcher(ToolContext(ConnectionProvider(lambda: connection)), TOOLS)


def payload(envelope: Envelope) -> Any:
    return json.loads(envelope.text)
