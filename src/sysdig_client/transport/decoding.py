"""Decoding of buffered response bodies into caller-chosen targets."""

import functools
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from sysdig_client.errors.exceptions import DecodeError


@functools.cache
def _adapter_for(into: Any) -> TypeAdapter:
    return TypeAdapter(into)


def is_writer(into: Any) -> bool:
    """Whether ``into`` is a writable byte sink rather than a type."""
    return not isinstance(into, type) and callable(getattr(into, "write", None))


def zero_value(into: Any) -> Any:
    """The empty value of ``into``: ``[]`` for lists, None when it has none."""
    try:
        return into()
    except (TypeError, PydanticValidationError):
        return None


async def decode_response(response: httpx.Response, into: Any = None) -> Any:
    """Decode ``response`` into ``into`` and close it.

    ``into`` selects the result:

    - ``None``: the body is discarded and None is returned.
    - an object with ``write``: the raw body is copied into it, and it is returned.
    - any type pydantic can validate: the JSON body validated as that type.

    An empty or whitespace-only body yields the zero value of the type
    instead of an error.

    Raises:
        DecodeError: If a non-empty body is not valid JSON for ``into``.
    """
    try:
        if into is None:
            return None

        body = response.content
        if is_writer(into):
            into.write(body)
            return into

        if not body.strip():
            return zero_value(into)

        try:
            return _adapter_for(into).validate_json(body)
        except PydanticValidationError as e:
            name = getattr(into, "__name__", None) or repr(into)
            raise DecodeError(f"failed to decode response into {name}: {e}") from e
    finally:
        await response.aclose()
