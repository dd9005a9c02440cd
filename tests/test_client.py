"""Tests for the Client facade."""

import httpx
import pytest

from sysdig_client import Client, Context, with_authenticator, with_base_url
from sysdig_client.auth import AccessTokenAuthenticator
from sysdig_client.errors import ContextRequiredError, NotFoundError
from sysdig_client.services import (
    AlertsService,
    DashboardsService,
    EventsService,
    NotificationChannelsService,
    PrometheusService,
    TeamsService,
    UsersService,
)
from sysdig_client.services.users import TokenResponse
from sysdig_client.testing import RecordingHandler, create_test_client, error_response, json_response


def test_client_instantiation():
    """A client needs no options."""
    client = Client()

    assert str(client.base_url) == "https://app.sysdigcloud.com/"
    assert client.authenticator is None


def test_services_are_attached():
    client = Client()

    assert isinstance(client.users, UsersService)
    assert isinstance(client.teams, TeamsService)
    assert isinstance(client.events, EventsService)
    assert isinstance(client.alerts, AlertsService)
    assert isinstance(client.dashboards, DashboardsService)
    assert isinstance(client.notification_channels, NotificationChannelsService)
    assert isinstance(client.prometheus, PrometheusService)


@pytest.mark.unit
async def test_authenticated_call_end_to_end():
    handler = RecordingHandler(json_response(200, {"token": {"key": "abc"}}))
    client = create_test_client(
        handler,
        with_authenticator(AccessTokenAuthenticator("token-123", sysdig_team_id="42")),
    )

    token = await client.users.token(Context.background())

    request = handler.last_request
    assert token.token.key == "abc"
    assert str(request.url) == "https://sysdig.test/api/api/token"
    assert request.headers["Authorization"] == "Bearer token-123"
    assert request.headers["TeamID"] == "42"
    assert request.headers["Accept"] == "application/json"
    await client.aclose()


@pytest.mark.unit
async def test_do_returns_value_and_response():
    client = create_test_client(RecordingHandler(json_response(200, {"token": {"key": "abc"}}, {"X-Trace": "t-1"})))

    value, response = await client.do(Context.background(), client.new_request("GET", "api/token"), TokenResponse)

    assert value.token.key == "abc"
    assert response.headers["X-Trace"] == "t-1"


@pytest.mark.unit
async def test_send_returns_buffered_response(client, ok_handler):
    response = await client.send(Context.background(), client.new_request("GET", "api/user/me"))

    assert response.status_code == 200
    assert ok_handler.call_count == 1


@pytest.mark.unit
async def test_missing_context_is_rejected_before_sending(client, ok_handler):
    with pytest.raises(ContextRequiredError, match="a context is required"):
        await client.users.me(None)

    assert ok_handler.call_count == 0


@pytest.mark.unit
async def test_api_errors_surface_from_services():
    client = create_test_client(RecordingHandler(error_response(404, "not found", [("no such team", "notFound")])))

    with pytest.raises(NotFoundError) as exc_info:
        await client.teams.get(Context.background(), 1)

    assert str(exc_info.value) == "GET https://sysdig.test/api/api/team/1: 404 not found [no such team (notFound)]"


@pytest.mark.unit
async def test_base_url_can_be_swapped():
    handler = RecordingHandler(json_response(200))
    client = create_test_client(handler)

    client.base_url = httpx.URL("https://other.test/")
    await client.alerts.delete(Context.background(), 3)

    assert handler.last_request.url.host == "other.test"


@pytest.mark.unit
async def test_from_env(monkeypatch):
    monkeypatch.setenv("SYSDIG_ACCESS_TOKEN", "token-123")

    async with Client.from_env(with_base_url("https://sysdig.test/")) as client:
        assert isinstance(client.authenticator, AccessTokenAuthenticator)
        assert client.base_url.host == "sysdig.test"
