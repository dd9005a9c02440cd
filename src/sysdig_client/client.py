"""The Sysdig API client."""

import logging
from typing import Any

import httpx

from sysdig_client.auth.base import Authenticator
from sysdig_client.auth.credentials import CredentialResolver
from sysdig_client.config import ClientConfig, ClientOption, options_from_env
from sysdig_client.context import Context
from sysdig_client.services import (
    AlertsService,
    DashboardsService,
    EventsService,
    NotificationChannelsService,
    PrometheusService,
    TeamsService,
    UsersService,
)
from sysdig_client.transport.decoding import decode_response
from sysdig_client.transport.pipeline import SendPipeline
from sysdig_client.transport.request import build_request


class Client:
    """Client for the Sysdig Monitor REST API.

    Every call takes a ``Context`` first and goes through the same pipeline:
    the configured authenticator adds credentials, a 401/403 from a
    refreshable authenticator triggers one refresh-and-retry, gzip bodies are
    inflated and non-2xx responses raise an ``APIError``.

    Args:
        *options: Option callables from ``sysdig_client.config``, applied in
            order.

    Example:
        ```python
        from sysdig_client import Client, Context, with_authenticator
        from sysdig_client.auth import AccessTokenAuthenticator

        async with Client(with_authenticator(AccessTokenAuthenticator(token))) as client:
            me = await client.users.me(Context.background())
        ```
    """

    def __init__(self, *options: ClientOption) -> None:
        config = ClientConfig()
        for option in options:
            option(config)

        # Both may be replaced after construction, mainly by tests.
        self.base_url: httpx.URL = config.base_url
        self.user_agent: str = config.user_agent

        self._response_compression = config.response_compression
        self._owns_http_client = config.http_client is None
        self._owns_authenticator = config.owns_authenticator
        self._pipeline = SendPipeline(
            http_client=config.http_client or httpx.AsyncClient(),
            authenticator=config.authenticator,
            logger=config.logger,
            debug=config.debug,
        )

        self.users = UsersService(self)
        self.teams = TeamsService(self)
        self.events = EventsService(self)
        self.alerts = AlertsService(self)
        self.dashboards = DashboardsService(self)
        self.notification_channels = NotificationChannelsService(self)
        self.prometheus = PrometheusService(self)

    @classmethod
    def from_env(cls, *options: ClientOption, resolver: CredentialResolver | None = None) -> "Client":
        """Build a client from ``SYSDIG_*`` settings, then apply ``options``."""
        return cls(*options_from_env(resolver), *options)

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._pipeline.http_client

    @property
    def authenticator(self) -> Authenticator | None:
        return self._pipeline.authenticator

    @property
    def logger(self) -> logging.Logger:
        return self._pipeline.logger

    @property
    def debug(self) -> bool:
        return self._pipeline.debug

    def set_logger(self, logger: logging.Logger) -> None:
        self._pipeline.logger = logger

    def new_request(self, method: str, path: str, body: Any = None) -> httpx.Request:
        """Build a request for ``path`` relative to the base URL.

        Raises:
            ConfigurationError: If the base URL has no trailing slash.
            EncodeError: If ``body`` cannot be encoded as JSON.
        """
        return build_request(
            self.base_url,
            method,
            path,
            body,
            user_agent=self.user_agent,
            compress=self._response_compression,
        )

    async def send(self, ctx: Context | None, request: httpx.Request) -> httpx.Response:
        """Send ``request`` and return the buffered response. See ``SendPipeline.send``."""
        return await self._pipeline.send(ctx, request)

    async def do(self, ctx: Context | None, request: httpx.Request, into: Any = None) -> tuple[Any, httpx.Response]:
        """Send ``request`` and decode the body into ``into``.

        Returns:
            ``(value, response)``. See ``decode_response`` for how ``into``
            selects the value. The response is closed.
        """
        response = await self.send(ctx, request)
        value = await decode_response(response, into)
        return value, response

    async def aclose(self) -> None:
        """Close the HTTP client and authenticator if this client owns them."""
        try:
            close_authenticator = getattr(self.authenticator, "aclose", None)
            if self._owns_authenticator and close_authenticator is not None:
                await close_authenticator()
        finally:
            if self._owns_http_client:
                await self.http_client.aclose()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
