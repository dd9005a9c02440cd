"""Client configuration and the option functions that build it.

Options are plain callables applied in order to a fresh ``ClientConfig``;
the first one that raises aborts client construction.

Example:
    ```python
    from sysdig_client import Client, Region, with_debug, with_ibm_base_url

    client = Client(with_ibm_base_url(Region.EU_DE, private_endpoint=True), with_debug(True))
    ```
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

import httpx

from sysdig_client import __version__
from sysdig_client.auth.access_token import ACCESS_TOKEN_ENV_VAR, AccessTokenAuthenticator
from sysdig_client.auth.base import Authenticator
from sysdig_client.auth.credentials import CredentialResolver
from sysdig_client.auth.ibm_iam import IBM_API_KEY_ENV_VAR, IBMIAMAuthenticator, has_api_key_file
from sysdig_client.errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.sysdigcloud.com/"
IBM_MONITORING_DOMAIN = "monitoring.cloud.ibm.com"
USER_AGENT = f"sysdig-client-python/{__version__}"
DEFAULT_LOGGER_NAME = "sysdig_client"

BASE_URL_ENV_VAR = "SYSDIG_BASE_URL"
IBM_REGION_ENV_VAR = "SYSDIG_IBM_REGION"
IBM_PRIVATE_ENDPOINT_ENV_VAR = "SYSDIG_IBM_PRIVATE_ENDPOINT"
DEBUG_ENV_VAR = "SYSDIG_DEBUG"


class Region(StrEnum):
    """IBM Cloud Monitoring regions."""

    US_SOUTH = "us-south"
    EU_DE = "eu-de"
    JP_OSA = "jp-osa"
    JP_TOK = "jp-tok"
    US_EAST = "us-east"
    AU_SYD = "au-syd"
    CA_TOR = "ca-tor"
    BR_SAO = "br-sao"


def ibm_base_url(region: Region | str, private_endpoint: bool = False) -> str:
    """The monitoring endpoint for ``region``, public or private."""
    if private_endpoint:
        return f"https://{region}.private.{IBM_MONITORING_DOMAIN}/"
    return f"https://{region}.{IBM_MONITORING_DOMAIN}/"


@dataclass
class ClientConfig:
    """Everything a ``Client`` is built from.

    The base URL is not checked for a trailing slash here; that happens each
    time a request is built.
    """

    base_url: httpx.URL = field(default_factory=lambda: httpx.URL(DEFAULT_BASE_URL))
    user_agent: str = USER_AGENT
    http_client: httpx.AsyncClient | None = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(DEFAULT_LOGGER_NAME))
    debug: bool = False
    response_compression: bool = False
    authenticator: Authenticator | None = None
    owns_authenticator: bool = False


ClientOption = Callable[[ClientConfig], None]


def parse_base_url(raw: str | httpx.URL) -> httpx.URL:
    """Parse an absolute base URL.

    Raises:
        ConfigurationError: If ``raw`` is not an absolute http(s) URL.
    """
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError(f"invalid base URL {str(raw)!r}: {e}") from e
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(f"invalid base URL {str(raw)!r}: an absolute http(s) URL is required")
    return url


def with_base_url(base_url: str | httpx.URL) -> ClientOption:
    """Send requests to ``base_url``. It should end with ``/``."""
    url = parse_base_url(base_url)

    def apply(config: ClientConfig) -> None:
        config.base_url = url

    return apply


def with_ibm_base_url(region: Region | str, private_endpoint: bool = False) -> ClientOption:
    """Send requests to the IBM Cloud Monitoring endpoint of ``region``."""
    if not region:
        raise ConfigurationError("IBM region cannot be blank")
    return with_base_url(ibm_base_url(region, private_endpoint))


def with_http_client(http_client: httpx.AsyncClient) -> ClientOption:
    """Dispatch through ``http_client``. The client will not close it."""
    if not isinstance(http_client, httpx.AsyncClient):
        raise ConfigurationError(f"http client must be an httpx.AsyncClient, got {type(http_client).__name__}")

    def apply(config: ClientConfig) -> None:
        config.http_client = http_client

    return apply


def with_user_agent(user_agent: str) -> ClientOption:
    def apply(config: ClientConfig) -> None:
        config.user_agent = user_agent

    return apply


def with_authenticator(authenticator: Authenticator | None, owned: bool = False) -> ClientOption:
    """Authenticate every request with ``authenticator``; None disables auth.

    An ``owned`` authenticator with an ``aclose`` method is closed along with
    the client.
    """
    if authenticator is not None and not isinstance(authenticator, Authenticator):
        raise ConfigurationError(
            f"{type(authenticator).__name__} does not implement authenticate(request)"
        )

    def apply(config: ClientConfig) -> None:
        config.authenticator = authenticator
        config.owns_authenticator = owned

    return apply


def with_response_compression(enabled: bool) -> ClientOption:
    """Ask the server to gzip responses."""

    def apply(config: ClientConfig) -> None:
        config.response_compression = enabled

    return apply


def with_logger(logger: logging.Logger) -> ClientOption:
    def apply(config: ClientConfig) -> None:
        config.logger = logger

    return apply


def with_debug(enabled: bool) -> ClientOption:
    """Log every request and response at DEBUG level."""

    def apply(config: ClientConfig) -> None:
        config.debug = enabled

    return apply


def options_from_env(resolver: CredentialResolver | None = None) -> list[ClientOption]:
    """Options derived from ``SYSDIG_*`` environment variables and ``.env``.

    ``SYSDIG_BASE_URL`` wins over ``SYSDIG_IBM_REGION``. An IAM API key
    (``SYSDIG_IBM_API_KEY`` or ``SYSDIG_IBM_API_KEY_FILE``) wins over
    ``SYSDIG_ACCESS_TOKEN``. Unset variables contribute no option, so the
    defaults apply. Authenticators built here are owned by the client.
    """
    resolver = resolver or CredentialResolver()
    options: list[ClientOption] = []

    base_url = resolver.resolve(env_var_name=BASE_URL_ENV_VAR, mask_in_logs=False)
    region = resolver.resolve(env_var_name=IBM_REGION_ENV_VAR, mask_in_logs=False)
    if base_url:
        options.append(with_base_url(base_url))
    elif region:
        private = resolver.resolve_flag(env_var_name=IBM_PRIVATE_ENDPOINT_ENV_VAR)
        options.append(with_ibm_base_url(region, private))

    if resolver.resolve(env_var_name=IBM_API_KEY_ENV_VAR) or has_api_key_file(resolver):
        options.append(with_authenticator(IBMIAMAuthenticator.from_env(resolver), owned=True))
    elif resolver.resolve(env_var_name=ACCESS_TOKEN_ENV_VAR):
        options.append(with_authenticator(AccessTokenAuthenticator.from_env(resolver), owned=True))
    else:
        logger.debug("No Sysdig credentials found in the environment")

    if resolver.resolve_flag(env_var_name=DEBUG_ENV_VAR):
        options.append(with_debug(True))

    return options
