"""Static access token authentication.

See https://cloud.ibm.com/docs/monitoring?topic=monitoring-api_monitoring_token
for IBM Cloud and the Sysdig API getting-started guide for Sysdig Cloud.
"""

import httpx

from sysdig_client.auth.base import AUTHORIZATION_HEADER, authorization_header_for, set_routing_headers
from sysdig_client.auth.credentials import CredentialResolver
from sysdig_client.auth.exceptions import AuthenticatorConfigError

ACCESS_TOKEN_ENV_VAR = "SYSDIG_ACCESS_TOKEN"
IBM_INSTANCE_ID_ENV_VAR = "SYSDIG_IBM_INSTANCE_ID"
SYSDIG_TEAM_ID_ENV_VAR = "SYSDIG_TEAM_ID"


class AccessTokenAuthenticator:
    """Attach a fixed Sysdig access token to every request.

    Args:
        access_token: Sysdig API token. Must not be empty.
        ibm_instance_id: IBM Cloud Monitoring instance to target, if any.
        sysdig_team_id: Sysdig team to target, if any.

    Raises:
        AuthenticatorConfigError: If ``access_token`` is empty.
    """

    def __init__(
        self,
        access_token: str,
        *,
        ibm_instance_id: str | None = None,
        sysdig_team_id: str | None = None,
    ) -> None:
        if not access_token:
            raise AuthenticatorConfigError("access token must be set")
        self._token = access_token
        self.ibm_instance_id = ibm_instance_id
        self.sysdig_team_id = sysdig_team_id

    @classmethod
    def from_env(cls, resolver: CredentialResolver | None = None) -> "AccessTokenAuthenticator":
        """Build an authenticator from ``SYSDIG_ACCESS_TOKEN`` and friends.

        Raises:
            CredentialNotFoundError: If no access token is configured.
        """
        resolver = resolver or CredentialResolver()
        token = resolver.resolve(env_var_name=ACCESS_TOKEN_ENV_VAR, required=True)
        return cls(
            token,
            ibm_instance_id=resolver.resolve(env_var_name=IBM_INSTANCE_ID_ENV_VAR, mask_in_logs=False),
            sysdig_team_id=resolver.resolve(env_var_name=SYSDIG_TEAM_ID_ENV_VAR, mask_in_logs=False),
        )

    async def authenticate(self, request: httpx.Request) -> None:
        request.headers[AUTHORIZATION_HEADER] = authorization_header_for(self._token)
        set_routing_headers(request, self.ibm_instance_id, self.sysdig_team_id)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(access_token='***', ibm_instance_id={self.ibm_instance_id!r}, "
            f"sysdig_team_id={self.sysdig_team_id!r})"
        )
