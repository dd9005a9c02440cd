"""Sysdig Client - async client for the Sysdig Monitor REST API.

Works against Sysdig SaaS and IBM Cloud Monitoring instances:
- Pluggable authentication, with transparent refresh-and-retry for
  refreshable credentials such as IBM Cloud IAM tokens
- Typed pydantic models for users, teams, events, alerts, dashboards,
  notification channels and Prometheus queries
- Structured errors for every non-2xx response

Example:
    ```python
    from sysdig_client import Client, Context, with_authenticator
    from sysdig_client.auth import AccessTokenAuthenticator

    authenticator = AccessTokenAuthenticator.from_env()
    async with Client(with_authenticator(authenticator)) as client:
        me = await client.users.me(Context.with_timeout(10))
        print(me.user.username)
    ```
"""

import logging

__version__ = "0.1.0"

from sysdig_client.client import Client  # noqa: E402
from sysdig_client.config import (  # noqa: E402
    DEFAULT_BASE_URL,
    USER_AGENT,
    ClientConfig,
    ClientOption,
    Region,
    options_from_env,
    with_authenticator,
    with_base_url,
    with_debug,
    with_http_client,
    with_ibm_base_url,
    with_logger,
    with_response_compression,
    with_user_agent,
)
from sysdig_client.context import Context  # noqa: E402
from sysdig_client.errors import APIError, SysdigError  # noqa: E402
from sysdig_client.scope import EventScope, Scope  # noqa: E402

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_BASE_URL",
    "USER_AGENT",
    "APIError",
    "Client",
    "ClientConfig",
    "ClientOption",
    "Context",
    "EventScope",
    "Region",
    "Scope",
    "SysdigError",
    "__version__",
    "options_from_env",
    "with_authenticator",
    "with_base_url",
    "with_debug",
    "with_http_client",
    "with_ibm_base_url",
    "with_logger",
    "with_response_compression",
    "with_user_agent",
]
