"""IBM Cloud IAM authentication.

Exchanges an IBM Cloud API key for a short-lived IAM bearer token and keeps it
fresh. IAM tokens are valid for one hour; by default the token is renewed five
minutes before that window closes. The authenticator is refreshable, so an
expired or revoked token answered with 401/403 triggers one transparent
refresh-and-retry in the client.

Example:
    ```python
    from sysdig_client import Client, Region, with_authenticator, with_ibm_base_url
    from sysdig_client.auth import IBMIAMAuthenticator

    authenticator = IBMIAMAuthenticator(api_key, ibm_instance_id=instance_id)
    client = Client(with_ibm_base_url(Region.US_SOUTH, False), with_authenticator(authenticator))
    ```
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta

import httpx
from pydantic import BaseModel, ValidationError

from sysdig_client.auth.access_token import IBM_INSTANCE_ID_ENV_VAR, SYSDIG_TEAM_ID_ENV_VAR
from sysdig_client.auth.base import AUTHORIZATION_HEADER, authorization_header_for, set_routing_headers
from sysdig_client.auth.credentials import CredentialResolver
from sysdig_client.auth.exceptions import AuthenticatorConfigError, CredentialNotFoundError, TokenRefreshError

logger = logging.getLogger(__name__)

DEFAULT_IAM_ENDPOINT = "https://iam.cloud.ibm.com/identity/token"
TEST_IAM_ENDPOINT = "https://iam.test.cloud.ibm.com/identity/token"

DEFAULT_REFRESH_BEFORE_EXPIRATION = timedelta(minutes=5)
TOKEN_VALID_DURATION = timedelta(hours=1)

IBM_API_KEY_ENV_VAR = "SYSDIG_IBM_API_KEY"
IBM_API_KEY_FILE_ENV_VAR = "SYSDIG_IBM_API_KEY_FILE"

APIKEY_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"


class IAMTokenResponse(BaseModel):
    """Token payload returned by the IAM identity endpoint."""

    access_token: str
    refresh_token: str = ""
    uaa_token: str = ""
    uaa_refresh_token: str = ""
    token_type: str = ""


@dataclass
class CachedToken:
    token: IAMTokenResponse
    refreshed_at: float

    def age(self, now: float) -> float:
        return now - self.refreshed_at


class IBMIAMAuthenticator:
    """Authenticate with a bearer token obtained from IBM Cloud IAM.

    Args:
        api_key: IBM Cloud API key. Must not be empty.
        ibm_instance_id: IBM Cloud Monitoring instance to target.
        sysdig_team_id: Sysdig team to target, if any.
        iam_endpoint: IAM token endpoint.
        refresh_before: How long before the token's one-hour validity window
            closes to renew it. Must be shorter than the window.
        http_client: Client used for the token exchange. One is created (and
            owned) when omitted.
        clock: Monotonic clock, overridable for tests.

    Raises:
        AuthenticatorConfigError: If the API key is empty or ``refresh_before``
            is outside the token validity window.
    """

    def __init__(
        self,
        api_key: str,
        *,
        ibm_instance_id: str | None = None,
        sysdig_team_id: str | None = None,
        iam_endpoint: str = DEFAULT_IAM_ENDPOINT,
        refresh_before: timedelta = DEFAULT_REFRESH_BEFORE_EXPIRATION,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if not api_key:
            raise AuthenticatorConfigError("apikey cannot be blank")
        if refresh_before < timedelta(0) or refresh_before >= TOKEN_VALID_DURATION:
            raise AuthenticatorConfigError(
                f"invalid refresh before duration: {refresh_before}, "
                f"must be less than expiration time: {TOKEN_VALID_DURATION}"
            )
        self._api_key = api_key
        self.ibm_instance_id = ibm_instance_id
        self.sysdig_team_id = sysdig_team_id
        self.iam_endpoint = iam_endpoint
        self._refresh_after = (TOKEN_VALID_DURATION - refresh_before).total_seconds()
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._clock = clock

        self._lock = asyncio.Lock()
        self._cached: CachedToken | None = None

    @classmethod
    def from_env(cls, resolver: CredentialResolver | None = None, **kwargs) -> "IBMIAMAuthenticator":
        """Build an authenticator from ``SYSDIG_IBM_API_KEY`` and friends.

        The key itself wins over ``SYSDIG_IBM_API_KEY_FILE``, a path to a file
        holding it.

        Raises:
            CredentialNotFoundError: If no API key is configured.
            CredentialFileError: If the key file cannot be read.
        """
        resolver = resolver or CredentialResolver()
        api_key = resolver.resolve(env_var_name=IBM_API_KEY_ENV_VAR)
        if api_key is None and has_api_key_file(resolver):
            api_key = resolver.resolve_from_file(env_var_name=IBM_API_KEY_FILE_ENV_VAR, required=True)
        if api_key is None:
            raise CredentialNotFoundError(
                f"Required credential not found (checked env vars: {IBM_API_KEY_ENV_VAR}, {IBM_API_KEY_FILE_ENV_VAR})",
                env_var_name=IBM_API_KEY_ENV_VAR,
            )
        return cls(
            api_key,
            ibm_instance_id=resolver.resolve(env_var_name=IBM_INSTANCE_ID_ENV_VAR, mask_in_logs=False),
            sysdig_team_id=resolver.resolve(env_var_name=SYSDIG_TEAM_ID_ENV_VAR, mask_in_logs=False),
            **kwargs,
        )

    @property
    def last_refresh(self) -> float | None:
        """Monotonic time of the last successful refresh."""
        cached = self._cached
        return cached.refreshed_at if cached else None

    def needs_refresh(self) -> bool:
        cached = self._cached
        return cached is None or cached.age(self._clock()) > self._refresh_after

    async def authenticate(self, request: httpx.Request) -> None:
        if self.needs_refresh():
            await self.refresh()
        access_token = self._cached.token.access_token

        request.headers[AUTHORIZATION_HEADER] = authorization_header_for(access_token)
        set_routing_headers(request, self.ibm_instance_id, self.sysdig_team_id)

    async def refresh(self) -> None:
        """Exchange the API key for a new IAM token.

        Raises:
            TokenRefreshError: If the exchange fails or returns an unusable payload.
        """
        async with self._lock:
            token = await self._request_token()
            self._cached = CachedToken(token=token, refreshed_at=self._clock())
            logger.debug(f"Refreshed IAM token from {self.iam_endpoint}")

    async def _request_token(self) -> IAMTokenResponse:
        form = {
            "grant_type": APIKEY_GRANT_TYPE,
            "response_type": "cloud_iam",
            "apikey": self._api_key,
        }
        try:
            response = await self._client().post(
                self.iam_endpoint,
                data=form,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise TokenRefreshError(f"failed to refresh token: {e}") from e

        if response.status_code != 200:
            raise TokenRefreshError(
                f"failed to refresh token: {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return IAMTokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise TokenRefreshError(f"failed to decode token response: {e}", status_code=200) from e

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
        return self._http_client

    async def aclose(self) -> None:
        """Close the token exchange client if this authenticator created it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "IBMIAMAuthenticator":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(api_key='***', ibm_instance_id={self.ibm_instance_id!r}, "
            f"iam_endpoint={self.iam_endpoint!r})"
        )


def has_api_key_file(resolver: CredentialResolver) -> bool:
    return bool(resolver.resolve(env_var_name=IBM_API_KEY_FILE_ENV_VAR, mask_in_logs=False))
