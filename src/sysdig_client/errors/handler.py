"""Error mapping for completed HTTP responses."""

import httpx
from pydantic import ValidationError as PydanticValidationError

from sysdig_client.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from sysdig_client.errors.models import ErrorPayload

_EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def is_success(status_code: int) -> bool:
    return 200 <= status_code <= 299


def exception_class_for(status_code: int) -> type[APIError]:
    """Pick the APIError subclass matching an HTTP status code."""
    if status_code in _EXCEPTION_MAP:
        return _EXCEPTION_MAP[status_code]
    if 400 <= status_code < 500:
        return ClientError
    if 500 <= status_code < 600:
        return ServerError
    return APIError


def check_response(response: httpx.Response) -> None:
    """Raise the appropriate APIError for a response outside the 2xx range.

    The response must already be buffered. Its body is decoded as a Sysdig
    error envelope; when that fails the decode failure becomes the error
    message. The body is left in place so callers can still inspect it.

    Args:
        response: Buffered HTTP response.

    Raises:
        APIError subclass based on status code.
    """
    status_code = response.status_code
    if is_success(status_code):
        return

    try:
        payload = ErrorPayload.from_response(response)
    except PydanticValidationError as e:
        payload = ErrorPayload(message=f"error unmarshaling error response: {_describe(e)}")

    exc_class = exception_class_for(status_code)
    kwargs = {
        "status_code": status_code,
        "response": response,
        "errors": payload.errors,
    }

    if exc_class is RateLimitError:
        raise RateLimitError(payload.message, retry_after=_parse_retry_after(response), **kwargs)

    raise exc_class(payload.message, **kwargs)


def _describe(error: PydanticValidationError) -> str:
    first = error.errors()[0] if error.error_count() else None
    if first is None:
        return str(error)
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{first['msg']} at '{location}'" if location else first["msg"]


def _parse_retry_after(response: httpx.Response) -> int | None:
    if "retry-after" not in response.headers:
        return None
    try:
        return int(response.headers["retry-after"])
    except (ValueError, TypeError):
        return None
