"""Fixtures for exercising resource services against canned responses."""

import pytest

from sysdig_client import Context
from sysdig_client.testing import RecordingHandler, create_test_client


@pytest.fixture
def ctx():
    return Context.background()


@pytest.fixture
async def make_client():
    """Build clients answered by the given responses; closed after the test."""
    clients = []

    def factory(*responses):
        handler = RecordingHandler(*responses)
        client = create_test_client(handler)
        clients.append(client)
        return client, handler

    yield factory

    for client in clients:
        await client.http_client.aclose()
