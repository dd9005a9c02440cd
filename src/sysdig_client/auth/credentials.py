"""Multi-source resolution of Sysdig credentials and settings.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv, loaded into the environment once)
4. Default value

Example:
    ```python
    from sysdig_client.auth import CredentialResolver

    resolver = CredentialResolver()
    token = resolver.resolve(env_var_name="SYSDIG_ACCESS_TOKEN", required=True)
    debug = resolver.resolve_flag(env_var_name="SYSDIG_DEBUG")
    api_key = resolver.resolve_from_file(file_path="~/.config/sysdig/apikey")
    ```

Credential values are never logged; only the source they came from.
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from sysdig_client.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

_TRUTHY = frozenset(["1", "true", "yes", "on"])
_FALSY = frozenset(["0", "false", "no", "off", ""])


class CredentialResolver:
    """Resolve credentials from explicit values, the environment, .env files and defaults.

    Args:
        dotenv_path: Path to a .env file. If None, python-dotenv searches
            parent directories.
        load_dotenv: Whether to load a .env file at all.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once, even with concurrent callers."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except Exception as e:
                # A broken .env file must not prevent explicit or environment credentials.
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    @staticmethod
    def _mask_credential(value: str | None) -> str:
        if value is None:
            return "None"
        return "***"

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a credential from the first source that provides it.

        Args:
            value: Explicit value, wins over everything else.
            env_var_name: Environment variable to consult.
            default: Fallback when no other source provides a value.
            required: Raise instead of returning None when nothing is found.
            mask_in_logs: Log ``***`` instead of the value. Disable only for
                non-secret settings such as instance IDs.

        Returns:
            The resolved value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If ``required`` and no source has a value.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = self._mask_credential(result) if mask_in_logs else result
            logger.debug(f"Resolved credential from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_flag(self, *, env_var_name: str, default: bool = False) -> bool:
        """Resolve a boolean setting such as ``SYSDIG_DEBUG``.

        Unrecognized values fall back to ``default`` with a warning.
        """
        raw = self.resolve(env_var_name=env_var_name, mask_in_logs=False)
        if raw is None:
            return default
        normalized = raw.strip().lower()
        if normalized in _TRUTHY:
            return True
        if normalized in _FALSY:
            return False
        logger.warning(f"Ignoring unrecognized boolean value for {env_var_name}: {raw!r}")
        return default

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential from a file.

        The path may come directly or from an environment variable, and may
        use ``~`` and ``$VAR`` expansion. Surrounding whitespace is stripped.

        Args:
            file_path: Path to the credential file.
            env_var_name: Environment variable holding the path, used when
                ``file_path`` is None.
            required: Raise instead of returning None on any failure.

        Returns:
            File contents, or None if unavailable and not required.

        Raises:
            CredentialFileError: If ``required`` and the file cannot be read.
        """
        path_to_use = None

        if file_path is not None:
            path_to_use = str(file_path)
        elif env_var_name:
            path_to_use = self.resolve(env_var_name=env_var_name, mask_in_logs=False) or None

        if path_to_use is None:
            if required:
                error_msg = "No file path provided for credential resolution"
                if env_var_name:
                    error_msg += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(error_msg)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path_to_use)))

        try:
            content = path_obj.read_text().strip()
            logger.debug(f"Resolved credential from file: {path_obj} (***)")
            return content

        except FileNotFoundError:
            error_msg = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.debug(error_msg)
            return None

        except PermissionError:
            error_msg = f"Permission denied reading credential file: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.warning(error_msg)
            return None

        except OSError as e:
            error_msg = f"Error reading credential file {path_obj}: {e}"
            if required:
                raise CredentialFileError(error_msg) from e
            logger.warning(error_msg)
            return None
