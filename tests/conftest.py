"""Pytest configuration and shared fixtures for sysdig-client tests."""

import pytest

from sysdig_client.testing import CountingAuthenticator, RecordingHandler, create_test_client, json_response


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Clear Sysdig settings so credential resolution starts from a clean environment."""
    import os

    for key in list(os.environ.keys()):
        if key.startswith("SYSDIG_"):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def ok_handler():
    """Answers every request with an empty 200."""
    return RecordingHandler(json_response(200))


@pytest.fixture
def authenticator():
    return CountingAuthenticator()


@pytest.fixture
async def client(ok_handler):
    client = create_test_client(ok_handler)
    yield client
    await client.http_client.aclose()
