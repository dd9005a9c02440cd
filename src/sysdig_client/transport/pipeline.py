"""The send pipeline: authenticate, dispatch, refresh-and-retry, inflate, check.

One call through ``SendPipeline.send`` runs:

1. Authenticate the request with the configured authenticator.
2. Dispatch it through the ``httpx.AsyncClient`` under the call ``Context``.
3. On 401/403 with a refreshable authenticator, refresh the credential and
   go back to step 1. This happens at most ``MAX_AUTH_RETRIES`` times.
4. Buffer the body, inflating it when the response is gzip encoded.
5. Log the exchange when debugging is enabled.
6. Raise the matching ``APIError`` for a non-2xx status.

## Example

```python
pipeline = SendPipeline(http_client=httpx.AsyncClient(), authenticator=authenticator)
response = await pipeline.send(Context.background(), request)
```
"""

import gzip
import logging
import zlib

import httpx

from sysdig_client.auth.base import Authenticator, supports_refresh
from sysdig_client.context import Context
from sysdig_client.errors.exceptions import ContextRequiredError, DecompressionError, TransportError
from sysdig_client.errors.handler import check_response

logger = logging.getLogger(__name__)

MAX_AUTH_RETRIES = 1

AUTH_FAILURE_STATUS_CODES: frozenset[int] = frozenset([401, 403])

GZIP_MAGIC = b"\x1f\x8b"


def is_authentication_error(response: httpx.Response | None) -> bool:
    if response is None:
        return False
    return response.status_code in AUTH_FAILURE_STATUS_CODES


def gzipped(response: httpx.Response) -> bool:
    return "gzip" in response.headers.get("Content-Encoding", "")


class SendPipeline:
    """Executes one logical API call, including the auth-failure retry policy.

    The pipeline holds no locks. Concurrent calls share only the HTTP client
    and the authenticator, both of which must be safe for concurrent use.

    Args:
        http_client: Client used to dispatch requests.
        authenticator: Adds credentials to each request; may be refreshable.
        logger: Destination for debug dumps and failure messages.
        debug: Log full requests and responses.
    """

    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        authenticator: Authenticator | None = None,
        logger: logging.Logger = logger,
        debug: bool = False,
    ) -> None:
        self.http_client = http_client
        self.authenticator = authenticator
        self.logger = logger
        self.debug = debug

    async def send(self, ctx: Context | None, request: httpx.Request) -> httpx.Response:
        """Send ``request`` and return its buffered, successful response.

        Raises:
            ContextRequiredError: If ``ctx`` is None. Nothing is sent.
            ContextError: If ``ctx`` ends before the exchange completes.
            AuthenticationError: If authenticating or refreshing fails.
            TransportError: If the request could not be delivered.
            DecompressionError: If a gzip body cannot be inflated.
            APIError: If the final response status is outside 200-299.
        """
        if ctx is None:
            raise ContextRequiredError("a context is required")

        retries = 0
        while True:
            await self._authenticate(request)
            self._debug_request(request)
            response = await self._dispatch(ctx, request)

            if not self._should_refresh(response, retries):
                break

            retries += 1
            await response.aclose()
            await self._refresh()
            self.logger.debug(
                f"Retrying {request.method} {request.url} after credential refresh "
                f"(attempt {retries}/{MAX_AUTH_RETRIES})"
            )

        response = await self._buffer(ctx, response)
        self._debug_response(response)
        check_response(response)
        return response

    def _should_refresh(self, response: httpx.Response, retries: int) -> bool:
        if retries >= MAX_AUTH_RETRIES:
            return False
        if not is_authentication_error(response):
            return False
        return supports_refresh(self.authenticator)

    async def _authenticate(self, request: httpx.Request) -> None:
        if self.authenticator is None:
            return
        if self.debug:
            self.logger.debug(f"authenticating with {type(self.authenticator).__name__}")
        await self.authenticator.authenticate(request)
        if self.debug:
            self.logger.debug("authentication succeeded")

    async def _refresh(self) -> None:
        try:
            await self.authenticator.refresh()
        except Exception as e:
            self.logger.warning(f"error refreshing authenticator: {e}")
            raise

    async def _dispatch(self, ctx: Context, request: httpx.Request) -> httpx.Response:
        try:
            return await ctx.run(self.http_client.send(request, stream=True))
        except httpx.HTTPError as e:
            # A cancelled or expired context explains the failure better than the transport does.
            if (ctx_error := ctx.err()) is not None:
                raise ctx_error from e
            raise TransportError(f"{request.method} {request.url}: {e}") from e

    async def _buffer(self, ctx: Context, response: httpx.Response) -> httpx.Response:
        if gzipped(response):
            return await self._inflate(ctx, response)
        try:
            await ctx.run(response.aread())
        except httpx.DecodingError as e:
            raise DecompressionError(f"failed to decode response body: {e}") from e
        except httpx.HTTPError as e:
            if (ctx_error := ctx.err()) is not None:
                raise ctx_error from e
            raise TransportError(f"failed to read response body: {e}") from e
        return response

    async def _inflate(self, ctx: Context, response: httpx.Response) -> httpx.Response:
        if response.is_stream_consumed:
            # Already buffered; httpx inflates plain "gzip" encodings itself.
            body = response.content
            if not body.startswith(GZIP_MAGIC):
                return response
        else:
            try:
                body = await ctx.run(_read_raw(response))
            except httpx.HTTPError as e:
                if (ctx_error := ctx.err()) is not None:
                    raise ctx_error from e
                raise TransportError(f"failed to read response body: {e}") from e

        try:
            inflated = gzip.decompress(body)
        except (OSError, EOFError, zlib.error) as e:
            self.logger.warning(f"failed to inflate gzipped response: {e}")
            raise DecompressionError(f"failed to inflate gzipped response: {e}") from e

        headers = [
            (name, value)
            for name, value in response.headers.multi_items()
            if name.lower() not in ("content-encoding", "content-length")
        ]
        return httpx.Response(
            response.status_code,
            headers=headers,
            content=inflated,
            request=response.request,
            extensions=response.extensions,
        )

    def _debug_request(self, request: httpx.Request) -> None:
        if not self.debug:
            return
        try:
            body = request.content.decode("utf-8", errors="replace")
        except httpx.RequestNotRead as e:
            self.logger.debug(f"failed to read request body for debugging: {e}")
            body = ""
        self.logger.debug(f"-> request: {request.method} {request.url}\n{body}")

    def _debug_response(self, response: httpx.Response) -> None:
        if not self.debug:
            return
        self.logger.debug(f"<- response: {response.status_code}\n{response.text}")
        for name, value in response.headers.items():
            self.logger.debug(f"{name}: {value}")


async def _read_raw(response: httpx.Response) -> bytes:
    return b"".join([chunk async for chunk in response.aiter_raw()])
