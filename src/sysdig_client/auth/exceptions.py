"""Exceptions for authentication and credential resolution.

Example:
    ```python
    from sysdig_client.auth.exceptions import CredentialNotFoundError

    if not api_key:
        raise CredentialNotFoundError("IAM API key not found", env_var_name="SYSDIG_IBM_API_KEY")
    ```
"""

from sysdig_client.errors.exceptions import ConfigurationError, SysdigError


class AuthenticationError(SysdigError):
    """Base exception for authenticator failures.

    Raised before a request is sent; the send pipeline never retries these.
    """

    pass


class AuthenticatorConfigError(AuthenticationError, ConfigurationError):
    """Raised when an authenticator is constructed with invalid settings.

    Example:
        ```python
        try:
            AccessTokenAuthenticator("")
        except AuthenticatorConfigError as e:
            print(f"Bad authenticator: {e}")
        ```
    """

    pass


class TokenRefreshError(AuthenticationError):
    """Raised when exchanging credentials for a fresh bearer token fails.

    Attributes:
        status_code: HTTP status of the token endpoint response, if one arrived.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CredentialError(SysdigError):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).

    Example:
        ```python
        try:
            token = resolver.resolve(env_var_name="SYSDIG_ACCESS_TOKEN", required=True)
        except CredentialNotFoundError as e:
            print(f"Missing credential: {e.env_var_name}")
        ```
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        """Initialize CredentialNotFoundError.

        Args:
            message: Error message describing what credential is missing.
            env_var_name: Optional environment variable name for reference.
        """
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read."""

    pass
