"""HTTP transport for the Sysdig client.

Modules:
    request: Request construction and JSON body encoding
    pipeline: Authenticate, dispatch, refresh-and-retry, inflate and check
    decoding: Decoding buffered bodies into typed values or byte sinks

Example:
    ```python
    from sysdig_client.transport import SendPipeline, build_request

    request = build_request(httpx.URL("https://app.sysdigcloud.com/"), "GET", "api/user/me")
    response = await SendPipeline(http_client=httpx.AsyncClient()).send(ctx, request)
    ```
"""

from sysdig_client.transport.decoding import decode_response, is_writer, zero_value
from sysdig_client.transport.pipeline import (
    MAX_AUTH_RETRIES,
    SendPipeline,
    gzipped,
    is_authentication_error,
)
from sysdig_client.transport.request import (
    ACCEPT_ENCODING,
    JSON_CONTENT_TYPE,
    build_request,
    encode_json,
    resolve_url,
)

__all__ = [
    "ACCEPT_ENCODING",
    "JSON_CONTENT_TYPE",
    "MAX_AUTH_RETRIES",
    "SendPipeline",
    "build_request",
    "decode_response",
    "encode_json",
    "gzipped",
    "is_authentication_error",
    "is_writer",
    "resolve_url",
    "zero_value",
]
