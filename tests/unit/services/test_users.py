"""Tests for the users service."""

from datetime import UTC, datetime

import pytest

from sysdig_client.errors import UnauthorizedError
from sysdig_client.testing import error_response, json_response

ME_PAYLOAD = {
    "user": {
        "id": 7,
        "username": "ada@example.com",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "systemRole": "ROLE_USER",
        "enabled": True,
        "currentTeam": 42,
        "dateCreated": 1609459200000,
        "properties": {"OpenID Connect profile id": "oidc-1", "has_been_invited": True},
        "customerSettings": {"sysdig": {"enabledSSE": True}, "plan": {"maxAgents": 10}},
        "teamRoles": [{"teamId": 42, "teamName": "Monitor", "role": "ROLE_TEAM_EDIT", "admin": False}],
        "somethingNew": {"nested": True},
    }
}


class TestUsersService:
    @pytest.mark.unit
    async def test_me(self, make_client, ctx):
        client, handler = make_client(json_response(200, ME_PAYLOAD))

        me = await client.users.me(ctx)

        assert handler.last_request.method == "GET"
        assert handler.last_request.url.path == "/api/api/user/me"
        user = me.user
        assert user.username == "ada@example.com"
        assert user.first_name == "Ada"
        assert user.current_team == 42
        assert user.date_created == datetime(2021, 1, 1, tzinfo=UTC)
        assert user.properties.open_id_connect_profile_id == "oidc-1"
        assert user.properties.has_been_invited is True
        assert user.customer_settings.sysdig.enabled_sse is True
        assert user.customer_settings.plan.max_agents == 10
        assert user.team_roles[0].team_name == "Monitor"

    @pytest.mark.unit
    async def test_token(self, make_client, ctx):
        client, handler = make_client(json_response(200, {"token": {"key": "abc-123"}}))

        token = await client.users.token(ctx)

        assert token.token.key == "abc-123"
        assert handler.last_request.url.path == "/api/api/token"

    @pytest.mark.unit
    async def test_connected_agents(self, make_client, ctx):
        client, handler = make_client(json_response(200, {"total": 2, "agents": [{"id": "a"}, {"id": "b"}]}))

        agents = await client.users.connected_agents(ctx)

        assert agents.total == 2
        assert [agent.id for agent in agents.agents] == ["a", "b"]
        assert handler.last_request.url.path == "/api/api/agents/connected"

    @pytest.mark.unit
    async def test_error_response_raises(self, make_client, ctx):
        client, _ = make_client(error_response(401, "Bad credentials"))

        with pytest.raises(UnauthorizedError) as exc_info:
            await client.users.me(ctx)

        assert exc_info.value.message == "Bad credentials"
