"""Tests for the send pipeline: auth, refresh-and-retry, inflation and error mapping."""

import asyncio
import gzip
import logging

import httpx
import pytest

from sysdig_client import Context, with_authenticator, with_debug, with_logger
from sysdig_client.auth import AccessTokenAuthenticator, AuthenticatorFunc, TokenRefreshError
from sysdig_client.errors import (
    ContextCancelledError,
    ContextRequiredError,
    DeadlineExceededError,
    DecompressionError,
    ForbiddenError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from sysdig_client.testing import (
    CountingAuthenticator,
    RecordingHandler,
    create_test_client,
    error_response,
    gzip_response,
    json_response,
)
from sysdig_client.transport import MAX_AUTH_RETRIES, gzipped, is_authentication_error


class TestAuthenticationRetry:
    """A 401/403 with a refreshable authenticator is retried exactly once."""

    @pytest.mark.unit
    async def test_refresh_then_success(self):
        """403 then 200 refreshes once and returns the second response."""
        authenticator = CountingAuthenticator()
        handler = RecordingHandler(error_response(403, "expired"), json_response(200, {"ok": True}))
        client = create_test_client(handler, with_authenticator(authenticator))

        response = await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert response.status_code == 200
        assert authenticator.refresh_calls == 1
        assert handler.call_count == 2

    @pytest.mark.unit
    async def test_retry_uses_refreshed_credential(self):
        """The retried request is re-authenticated after the refresh."""
        authenticator = CountingAuthenticator(token="tok")
        handler = RecordingHandler(error_response(401), json_response(200))
        client = create_test_client(handler, with_authenticator(authenticator))

        await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert [headers["Authorization"] for headers in handler.sent_headers] == ["Bearer tok-0", "Bearer tok-1"]
        assert authenticator.authenticate_calls == 2

    @pytest.mark.unit
    async def test_persistent_forbidden_retries_once(self):
        """Always 403 raises ForbiddenError after exactly one refresh."""
        authenticator = CountingAuthenticator()
        handler = RecordingHandler(error_response(403, "no access"))
        client = create_test_client(handler, with_authenticator(authenticator))

        with pytest.raises(ForbiddenError) as exc_info:
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert authenticator.refresh_calls == MAX_AUTH_RETRIES == 1
        assert handler.call_count == 2
        assert exc_info.value.message == "no access"

    @pytest.mark.unit
    async def test_persistent_unauthorized_retries_once(self):
        authenticator = CountingAuthenticator()
        handler = RecordingHandler(error_response(401))
        client = create_test_client(handler, with_authenticator(authenticator))

        with pytest.raises(UnauthorizedError):
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert authenticator.refresh_calls == 1

    @pytest.mark.unit
    async def test_non_refreshable_authenticator_is_not_retried(self):
        """A static token cannot be refreshed, so a 401 is final."""
        handler = RecordingHandler(error_response(401))
        client = create_test_client(handler, with_authenticator(AccessTokenAuthenticator("token")))

        with pytest.raises(UnauthorizedError):
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert handler.call_count == 1

    @pytest.mark.unit
    async def test_no_authenticator_is_not_retried(self):
        handler = RecordingHandler(error_response(403))
        client = create_test_client(handler)

        with pytest.raises(ForbiddenError):
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert handler.call_count == 1
        assert "Authorization" not in handler.last_request.headers

    @pytest.mark.unit
    async def test_other_errors_do_not_refresh(self):
        authenticator = CountingAuthenticator()
        handler = RecordingHandler(error_response(500, "boom"))
        client = create_test_client(handler, with_authenticator(authenticator))

        with pytest.raises(ServerError):
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert authenticator.refresh_calls == 0
        assert handler.call_count == 1

    @pytest.mark.unit
    async def test_refresh_failure_propagates_without_retry(self, caplog):
        """A failing refresh is logged and raised; the request is not resent."""
        caplog.set_level(logging.WARNING)
        authenticator = CountingAuthenticator(fail_refresh=TokenRefreshError("iam down", status_code=503))
        handler = RecordingHandler(error_response(401), json_response(200))
        client = create_test_client(handler, with_authenticator(authenticator))

        with pytest.raises(TokenRefreshError):
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert handler.call_count == 1
        assert "error refreshing authenticator: iam down" in caplog.text


class TestAuthentication:
    @pytest.mark.unit
    async def test_authenticator_error_prevents_send(self):
        """If authenticate fails nothing is sent."""

        def refuse(request: httpx.Request) -> None:
            raise RuntimeError("no credentials")

        handler = RecordingHandler(json_response(200))
        client = create_test_client(handler, with_authenticator(AuthenticatorFunc(refuse)))

        with pytest.raises(RuntimeError, match="no credentials"):
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert handler.call_count == 0

    @pytest.mark.unit
    async def test_async_function_authenticator(self):
        async def add_header(request: httpx.Request) -> None:
            request.headers["Authorization"] = "Bearer from-func"

        handler = RecordingHandler(json_response(200))
        client = create_test_client(handler, with_authenticator(AuthenticatorFunc(add_header)))

        await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert handler.last_request.headers["Authorization"] == "Bearer from-func"


class TestContext:
    @pytest.mark.unit
    async def test_missing_context_is_rejected_before_io(self):
        handler = RecordingHandler(json_response(200))
        client = create_test_client(handler)

        with pytest.raises(ContextRequiredError):
            await client.send(None, client.new_request("GET", "api/user/me"))

        assert handler.call_count == 0

    @pytest.mark.unit
    async def test_cancelled_context_is_not_sent(self):
        handler = RecordingHandler(json_response(200))
        client = create_test_client(handler)
        ctx = Context.background()
        ctx.cancel()

        with pytest.raises(ContextCancelledError):
            await client.send(ctx, client.new_request("GET", "api/user/me"))

        assert handler.call_count == 0

    @pytest.mark.unit
    async def test_deadline_aborts_slow_request(self):
        """An expired deadline surfaces as DeadlineExceededError, not a transport error."""

        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200)

        client = create_test_client(slow)

        with pytest.raises(DeadlineExceededError):
            await client.send(Context.with_timeout(0.05), client.new_request("GET", "api/user/me"))

    @pytest.mark.unit
    async def test_cancel_during_request(self):
        started = asyncio.Event()

        async def hang(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(5)
            return httpx.Response(200)

        client = create_test_client(hang)
        ctx = Context.background()

        async def cancel_when_started():
            await started.wait()
            ctx.cancel()

        canceller = asyncio.create_task(cancel_when_started())
        with pytest.raises(ContextCancelledError):
            await client.send(ctx, client.new_request("GET", "api/user/me"))
        await canceller


class TestTransportFailures:
    @pytest.mark.unit
    async def test_connection_error_becomes_transport_error(self):
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = create_test_client(unreachable)

        with pytest.raises(TransportError, match="connection refused") as exc_info:
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


class TestDecompression:
    @pytest.mark.unit
    async def test_gzip_body_is_inflated(self):
        handler = RecordingHandler(gzip_response(b"ok"))
        client = create_test_client(handler)

        response = await client.send(Context.background(), client.new_request("GET", "api/token"))

        assert response.content == b"ok"
        assert "Content-Encoding" not in response.headers

    @pytest.mark.unit
    async def test_gzip_json_decodes(self):
        handler = RecordingHandler(gzip_response(b'{"token": {"key": "abc"}}'))
        client = create_test_client(handler)

        token = await client.users.token(Context.background())

        assert token.token.key == "abc"

    @pytest.mark.unit
    async def test_gzip_response_replays_on_every_call(self):
        handler = RecordingHandler(gzip_response(b"ok"))
        client = create_test_client(handler)

        first = await client.send(Context.background(), client.new_request("GET", "api/token"))
        second = await client.send(Context.background(), client.new_request("GET", "api/token"))

        assert first.content == second.content == b"ok"
        assert handler.call_count == 2

    @pytest.mark.unit
    async def test_gzip_error_response_is_inflated_before_mapping(self):
        handler = RecordingHandler(gzip_response(b'{"message": "bad"}', status_code=500))
        client = create_test_client(handler)

        with pytest.raises(ServerError) as exc_info:
            await client.send(Context.background(), client.new_request("GET", "api/token"))

        assert exc_info.value.message == "bad"

    @pytest.mark.unit
    async def test_corrupt_gzip_raises_decompression_error(self, caplog):
        caplog.set_level(logging.WARNING)
        corrupt = httpx.Response(
            200,
            headers={"Content-Encoding": "gzip"},
            stream=httpx.ByteStream(b"definitely not gzip"),
        )
        client = create_test_client(RecordingHandler(corrupt))

        with pytest.raises(DecompressionError):
            await client.send(Context.background(), client.new_request("GET", "api/token"))

        assert "failed to inflate gzipped response" in caplog.text

    @pytest.mark.unit
    async def test_plain_body_is_untouched(self):
        client = create_test_client(RecordingHandler(httpx.Response(200, content=b"plain")))

        response = await client.send(Context.background(), client.new_request("GET", "api/token"))

        assert response.content == b"plain"


class TestErrorMapping:
    @pytest.mark.unit
    async def test_error_body_is_parsed_and_still_readable(self):
        body = b'{"message":"bad","errors":[{"message":"m","reason":"r"}]}'
        client = create_test_client(RecordingHandler(httpx.Response(500, content=body)))

        with pytest.raises(ServerError) as exc_info:
            await client.send(Context.background(), client.new_request("GET", "api/user/me"))

        error = exc_info.value
        assert error.message == "bad"
        assert len(error.errors) == 1
        assert (error.errors[0].message, error.errors[0].reason) == ("m", "r")
        assert error.response.content == body
        assert error.method == "GET"
        assert error.url == "https://sysdig.test/api/api/user/me"


class TestDebugTap:
    @pytest.mark.unit
    async def test_debug_logs_request_and_response(self, caplog):
        caplog.set_level(logging.DEBUG, logger="sysdig_client")
        handler = RecordingHandler(json_response(200, {"token": {"key": "k"}}, headers={"X-Trace": "t1"}))
        client = create_test_client(handler, with_debug(True))

        await client.send(Context.background(), client.new_request("POST", "v2/events", {"name": "deploy"}))

        assert "-> request: POST https://sysdig.test/api/v2/events" in caplog.text
        assert '{"name": "deploy"}' in caplog.text
        assert "<- response: 200" in caplog.text
        assert "x-trace: t1" in caplog.text

    @pytest.mark.unit
    async def test_no_debug_output_by_default(self, caplog):
        caplog.set_level(logging.DEBUG, logger="sysdig_client")
        client = create_test_client(RecordingHandler(json_response(200)))

        await client.send(Context.background(), client.new_request("GET", "api/token"))

        assert "-> request" not in caplog.text

    @pytest.mark.unit
    async def test_debug_uses_configured_logger(self, caplog):
        caplog.set_level(logging.DEBUG, logger="myapp.sysdig")
        client = create_test_client(
            RecordingHandler(json_response(200)),
            with_debug(True),
            with_logger(logging.getLogger("myapp.sysdig")),
        )

        await client.send(Context.background(), client.new_request("GET", "api/token"))

        assert any(record.name == "myapp.sysdig" for record in caplog.records)


class TestHelpers:
    @pytest.mark.unit
    def test_is_authentication_error(self):
        assert is_authentication_error(httpx.Response(401))
        assert is_authentication_error(httpx.Response(403))
        assert not is_authentication_error(httpx.Response(404))
        assert not is_authentication_error(httpx.Response(200))
        assert not is_authentication_error(None)

    @pytest.mark.unit
    def test_gzipped(self):
        assert gzipped(httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=gzip.compress(b"x")))
        assert gzipped(httpx.Response(200, headers={"Content-Encoding": "x-gzip"}, content=b""))
        assert not gzipped(httpx.Response(200, content=b"x"))
