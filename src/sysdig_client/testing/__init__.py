"""Testing utilities for code built on the Sysdig client.

Modules:
    factories: Mock responses, a recording handler, a counting refreshable
        authenticator and a ``Client`` wired to ``httpx.MockTransport``

Example:
    ```python
    from sysdig_client import Context
    from sysdig_client.testing import RecordingHandler, create_test_client, json_response


    async def test_me():
        handler = RecordingHandler(json_response(200, {"user": {"username": "ada"}}))
        client = create_test_client(handler)
        me = await client.users.me(Context.background())
        assert me.user.username == "ada"
    ```
"""

from sysdig_client.testing.factories import (
    TEST_BASE_URL,
    CountingAuthenticator,
    RecordingHandler,
    create_test_client,
    error_response,
    gzip_response,
    json_response,
)

__all__ = [
    "TEST_BASE_URL",
    "CountingAuthenticator",
    "RecordingHandler",
    "create_test_client",
    "error_response",
    "gzip_response",
    "json_response",
]
