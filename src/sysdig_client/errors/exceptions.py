"""Structured exceptions for the Sysdig client."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from sysdig_client.errors.models import ErrorDetail


class SysdigError(Exception):
    """Base exception for every error raised by this library."""

    pass


class ConfigurationError(SysdigError):
    """Invalid client configuration, such as a malformed base URL."""

    pass


class ContextError(SysdigError):
    """Base exception for call context failures."""

    pass


class ContextRequiredError(ContextError):
    """Raised when a call is made without a context."""

    pass


class ContextCancelledError(ContextError):
    """Raised when the call context was cancelled."""

    pass


class DeadlineExceededError(ContextError):
    """Raised when the call context deadline passed."""

    pass


class TransportError(SysdigError):
    """The request could not be delivered (DNS, connection, TLS, ...)."""

    pass


class DecompressionError(SysdigError):
    """A compressed response body could not be inflated."""

    pass


class EncodeError(SysdigError):
    """A request body could not be encoded as JSON."""

    pass


class DecodeError(SysdigError):
    """A response body could not be decoded into the requested type."""

    pass


class APIError(SysdigError):
    """Base exception for non-2xx API responses.

    Carries the originating response so the failing call can be diagnosed
    without re-running it.
    """

    def __init__(
        self,
        message: str | None,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        errors: "list[ErrorDetail] | None" = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response = response
        self.errors = errors if errors is not None else []
        super().__init__(self._format())

    @property
    def method(self) -> str | None:
        if self.response is None:
            return None
        try:
            return self.response.request.method
        except RuntimeError:
            return None

    @property
    def url(self) -> str | None:
        if self.response is None:
            return None
        try:
            return str(self.response.request.url)
        except RuntimeError:
            return None

    def _format(self) -> str:
        errors = ", ".join(str(error) for error in self.errors)
        return f"{self.method} {self.url}: {self.status_code} {self.message or ''} [{errors}]"

    def __str__(self) -> str:
        return self._format()


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class ValidationError(ClientError):
    """422 Unprocessable Entity."""

    pass


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str | None, retry_after: int | None = None, **kwargs):
        self.retry_after = retry_after
        super().__init__(message, **kwargs)


class ServerError(APIError):
    """5xx server errors."""

    pass


class PrometheusError(SysdigError):
    """The Prometheus API answered with an error envelope."""

    def __init__(self, error_type: str | None, error: str | None):
        super().__init__(f"{error_type}: {error}")
        self.error_type = error_type
        self.error = error
