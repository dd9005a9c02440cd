"""Error handling for the Sysdig client."""

from sysdig_client.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConfigurationError,
    ConflictError,
    ContextCancelledError,
    ContextError,
    ContextRequiredError,
    DeadlineExceededError,
    DecodeError,
    DecompressionError,
    EncodeError,
    ForbiddenError,
    NotFoundError,
    PrometheusError,
    RateLimitError,
    ServerError,
    SysdigError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from sysdig_client.errors.handler import check_response
from sysdig_client.errors.models import ErrorDetail, ErrorPayload

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConfigurationError",
    "ConflictError",
    "ContextCancelledError",
    "ContextError",
    "ContextRequiredError",
    "DeadlineExceededError",
    "DecodeError",
    "DecompressionError",
    "EncodeError",
    "ErrorDetail",
    "ErrorPayload",
    "ForbiddenError",
    "NotFoundError",
    "PrometheusError",
    "RateLimitError",
    "ServerError",
    "SysdigError",
    "TransportError",
    "UnauthorizedError",
    "ValidationError",
    "check_response",
]
