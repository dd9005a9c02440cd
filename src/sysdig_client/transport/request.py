"""Request construction against the configured base URL."""

import json
from typing import Any

import httpx
from pydantic_core import PydanticSerializationError, to_jsonable_python

from sysdig_client.errors.exceptions import ConfigurationError, EncodeError

JSON_CONTENT_TYPE = "application/json"
ACCEPT_ENCODING = "gzip, deflate"


def encode_json(body: Any) -> bytes:
    """Encode a request body as JSON.

    Pydantic models are dumped by alias with unset (None) fields dropped.
    ``<``, ``>`` and ``&`` are written verbatim so scope and query
    expressions survive unchanged, and non-ASCII text is kept as UTF-8.

    Raises:
        EncodeError: If the body cannot be represented as JSON.
    """
    try:
        data = to_jsonable_python(body, by_alias=True, exclude_none=True)
        return (json.dumps(data, ensure_ascii=False) + "\n").encode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise EncodeError(f"failed to encode request body of type {type(body).__name__}: {e}") from e


def resolve_url(base_url: httpx.URL, path: str) -> httpx.URL:
    """Resolve a relative API path against the base URL.

    The base URL is checked on every call because it may be replaced after
    the client is constructed.

    Raises:
        ConfigurationError: If the base URL lacks a trailing slash or the
            path cannot be resolved.
    """
    if not base_url.path.endswith("/"):
        raise ConfigurationError(f"base URL must have a trailing slash, but {str(base_url)!r} does not")
    try:
        return base_url.join(path)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"cannot resolve {path!r} against {str(base_url)!r}: {e}") from e


def build_request(
    base_url: httpx.URL,
    method: str,
    path: str,
    body: Any = None,
    *,
    user_agent: str | None = None,
    compress: bool = False,
) -> httpx.Request:
    """Build an API request.

    Args:
        base_url: Root URL, must end with ``/``.
        method: HTTP method.
        path: Path relative to ``base_url``, without a leading slash.
        body: Optional value to send as JSON.
        user_agent: User-Agent header value, omitted when empty.
        compress: Ask the server for a compressed response.

    Returns:
        The request; nothing is sent.
    """
    url = resolve_url(base_url, path)

    headers = {"Accept": JSON_CONTENT_TYPE}
    content = None
    if body is not None:
        content = encode_json(body)
        headers["Content-Type"] = JSON_CONTENT_TYPE
    if user_agent:
        headers["User-Agent"] = user_agent
    if compress:
        headers["Accept-Encoding"] = ACCEPT_ENCODING

    return httpx.Request(method, url, headers=headers, content=content)
