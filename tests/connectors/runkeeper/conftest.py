import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent.parent.parent
sys.path.append(str(project_root))

from src.connectors.runkeeper.registry import EndpointRegistry
from src.connectors.runkeeper.session import RunContext, SessionContext


class FakeHealthGraphClient:
    """Replays canned replies keyed by URI. Exceptions in the map are raised."""

    def __init__(self, replies=None):
        self.replies = dict(replies or {})
        self.calls = []
        self.closed = False

    def call(self, method, media_type, uri):
        self.calls.append((method, media_type, uri))
        reply = self.replies.get(uri)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def diagnostics(self):
        return {"client_id": "client-id", "access_token": "***"}

    def close(self):
        self.closed = True


@pytest.fixture
def session():
    return SessionContext(
        client_id="client-id",
        client_secret="client-secret",
        access_token="access-token",
    )


@pytest.fixture
def pipe():
    return {
        "_id": "pipe-1",
        "clientId": "client-id",
        "clientSecret": "client-secret",
        "oAuth": {"accessToken": "access-token"},
    }


@pytest.fixture
def run_log():
    return MagicMock()


@pytest.fixture
def make_run(session, run_log):
    """Build a RunContext around a fake client replaying the given replies."""

    def _make(replies=None, registry=None):
        client = FakeHealthGraphClient(replies)
        return RunContext(
            session=session,
            registry=registry or EndpointRegistry(),
            client=client,
            log=run_log,
        )

    return _make


@pytest.fixture
def fake_client_factory():
    """Client factory for RunkeeperConnector; the created client is exposed as .client."""

    def _factory(replies=None):
        def factory(session, timeout=None):
            factory.client = FakeHealthGraphClient(replies)
            return factory.client

        factory.client = None
        return factory

    return _factory
