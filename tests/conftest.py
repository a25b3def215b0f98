import json
import os
from pathlib import Path

import httpx
import pytest

os.environ.setdefault("STOREFRONT_ENVIRONMENT", "test")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)


class FakeBackend:
    """Stands in for the REST backend behind an httpx MockTransport.

    Register answers with ``on(method, path, body, status=200)``; ``body`` may be
    a callable taking the request. Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method, path, body=None, status=200):
        self.routes[(method.upper(), path)] = (status, body if body is not None else {})

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content) if request.content else None
        self.calls.append(
            {
                "method": request.method,
                "path": request.url.path,
                "params": dict(request.url.params),
                "json": payload,
                "headers": dict(request.headers),
            }
        )
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"error": f"No route for {request.method} {request.url.path}"})

        status, body = self.routes[key]
        if callable(body):
            body = body(request)
        return httpx.Response(status, json=body)

    def calls_to(self, method, path):
        return [c for c in self.calls if c["method"] == method and c["path"] == path]


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def settings():
    from shared.config import Settings

    return Settings(api_url="http://backend.test", frontend_url="http://shop.test")


@pytest.fixture()
def session():
    from shared.session import SessionContext

    return SessionContext()


@pytest.fixture()
def member_session():
    from shared.session import SessionContext

    return SessionContext(token="member-token")


def make_client(session, settings, backend):
    from shared.client import BackendClient

    return BackendClient(session, settings=settings, transport=httpx.MockTransport(backend.handler))


@pytest.fixture()
def client(session, settings, backend):
    return make_client(session, settings, backend)


@pytest.fixture()
def member_client(member_session, settings, backend):
    return make_client(member_session, settings, backend)
