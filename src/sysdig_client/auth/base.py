"""Authenticator capability contracts.

An authenticator mutates an outgoing request to add credentials. It may also
be *refreshable*: when the API answers 401 or 403, the client calls
``refresh()`` and retries the request once. Refresh support is tested at
runtime, so plain authenticators never need a no-op ``refresh``.
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

import httpx

AUTHORIZATION_HEADER = "Authorization"
IBM_INSTANCE_ID_HEADER = "IBMInstanceID"
SYSDIG_TEAM_ID_HEADER = "TeamID"


@runtime_checkable
class Authenticator(Protocol):
    """Adds credentials to a request. Must be safe to call concurrently."""

    async def authenticate(self, request: httpx.Request) -> None: ...


@runtime_checkable
class Refreshable(Protocol):
    """Optional capability of an authenticator to renew its credential."""

    async def refresh(self) -> None: ...


class AuthenticatorFunc:
    """Adapt a plain callable to the Authenticator contract.

    The callable may be synchronous or return an awaitable.

    Example:
        ```python
        def add_token(request: httpx.Request) -> None:
            request.headers["Authorization"] = authorization_header_for(token)

        client = Client(with_authenticator(AuthenticatorFunc(add_token)))
        ```
    """

    def __init__(self, func: Callable[[httpx.Request], Awaitable[None] | None]):
        self._func = func

    async def authenticate(self, request: httpx.Request) -> None:
        result = self._func(request)
        if inspect.isawaitable(result):
            await result


def authorization_header_for(token: str) -> str:
    """Format a bearer token for the Authorization header."""
    return f"Bearer {token}"


def supports_refresh(authenticator: object) -> bool:
    return isinstance(authenticator, Refreshable)


def set_routing_headers(
    request: httpx.Request,
    ibm_instance_id: str | None,
    sysdig_team_id: str | None,
) -> None:
    """Set the IBM instance and Sysdig team routing headers when configured."""
    if ibm_instance_id:
        request.headers[IBM_INSTANCE_ID_HEADER] = ibm_instance_id
    if sysdig_team_id:
        request.headers[SYSDIG_TEAM_ID_HEADER] = sysdig_team_id
