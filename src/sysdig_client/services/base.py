"""Shared plumbing for the resource services."""

from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from sysdig_client.context import Context
from sysdig_client.types import to_unix_millis

if TYPE_CHECKING:
    from sysdig_client.client import Client


def format_query_value(value: Any) -> str:
    """Render one query parameter value the way the Sysdig API expects it.

    Booleans are lowercase, datetimes are Unix milliseconds, durations are
    seconds and sequences are comma joined.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, datetime):
        return str(to_unix_millis(value))
    if isinstance(value, timedelta):
        return f"{value.total_seconds():g}"
    if isinstance(value, Sequence) and not isinstance(value, str):
        return ",".join(format_query_value(item) for item in value)
    return str(value)


def add_options(path: str, params: Mapping[str, Any] | None) -> str:
    """Append ``params`` to ``path`` as a query string.

    Parameters whose value is None are left out; every other value, empty
    strings included, is sent.
    """
    if not params:
        return path
    pairs = [(name, format_query_value(value)) for name, value in params.items() if value is not None]
    if not pairs:
        return path
    return f"{path}?{urlencode(pairs)}"


class Service:
    """Base class for a namespaced group of API operations.

    Each operation builds one request with ``Client.new_request`` and runs it
    with ``Client.do``.
    """

    def __init__(self, client: "Client") -> None:
        self._client = client

    async def _call(
        self,
        ctx: Context | None,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        into: Any = None,
    ) -> Any:
        request = self._client.new_request(method, add_options(path, params), body)
        value, _ = await self._client.do(ctx, request, into)
        return value
