"""Authentication for the Sysdig client.

- Authenticator / Refreshable capability contracts
- Static access token authentication
- Auto-refreshing IBM Cloud IAM authentication
- Multi-source credential resolution (value → env → .env → default)

Example:
    ```python
    from sysdig_client.auth import AccessTokenAuthenticator

    authenticator = AccessTokenAuthenticator.from_env()
    ```
"""

from sysdig_client.auth.access_token import AccessTokenAuthenticator
from sysdig_client.auth.base import (
    AUTHORIZATION_HEADER,
    IBM_INSTANCE_ID_HEADER,
    SYSDIG_TEAM_ID_HEADER,
    Authenticator,
    AuthenticatorFunc,
    Refreshable,
    authorization_header_for,
    supports_refresh,
)
from sysdig_client.auth.credentials import CredentialResolver
from sysdig_client.auth.exceptions import (
    AuthenticationError,
    AuthenticatorConfigError,
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    TokenRefreshError,
)
from sysdig_client.auth.ibm_iam import (
    DEFAULT_IAM_ENDPOINT,
    DEFAULT_REFRESH_BEFORE_EXPIRATION,
    TEST_IAM_ENDPOINT,
    TOKEN_VALID_DURATION,
    IBMIAMAuthenticator,
)

__all__ = [
    "AUTHORIZATION_HEADER",
    "DEFAULT_IAM_ENDPOINT",
    "DEFAULT_REFRESH_BEFORE_EXPIRATION",
    "IBM_INSTANCE_ID_HEADER",
    "SYSDIG_TEAM_ID_HEADER",
    "TEST_IAM_ENDPOINT",
    "TOKEN_VALID_DURATION",
    "AccessTokenAuthenticator",
    "AuthenticationError",
    "Authenticator",
    "AuthenticatorConfigError",
    "AuthenticatorFunc",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "IBMIAMAuthenticator",
    "Refreshable",
    "TokenRefreshError",
    "authorization_header_for",
    "supports_refresh",
]
