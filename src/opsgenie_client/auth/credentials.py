"""API key resolution for the OpsGenie CLI.

Resolution order for the API key (highest to lowest priority):
1. Explicitly provided value
2. `OPSGENIE_API_KEY` environment variable (a `.env` file is loaded into the
   environment first, via python-dotenv)
3. JSON config file `~/.opsgenie-cli-auth.json` (`{"api_key": "..."}`)

Example:
    ```python
    from opsgenie_client.auth import CredentialResolver

    resolver = CredentialResolver()
    api_key = resolver.resolve_api_key()

    # `opsgenie-cli auth login` stores the key for later runs
    resolver.save_api_key("0123-abcd")
    ```

Security Considerations:
    - Credentials are never logged in full (masked with ***)
    - Only source information is logged (env var name, file path)
    - The config file is written with mode 0600
"""

import json
import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from opsgenie_client.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

API_KEY_ENV_VAR = "OPSGENIE_API_KEY"
CONFIG_FILE_NAME = ".opsgenie-cli-auth.json"
CONFIG_FILE_MODE = 0o600


def default_config_path() -> Path:
    """Path of the auth config file in the user's home directory."""
    try:
        return Path.home() / CONFIG_FILE_NAME
    except RuntimeError:
        # No resolvable home directory
        return Path(CONFIG_FILE_NAME)


class CredentialResolver:
    """Resolve the OpsGenie API key from the environment or the config file.

    Args:
        dotenv_path: Path to .env file. If None, python-dotenv searches parent
            directories.
        load_dotenv: Whether to load a .env file at all. Default is True.
        config_path: Auth config file (default: ~/.opsgenie-cli-auth.json)
    """

    def __init__(
        self,
        dotenv_path: str | None = None,
        load_dotenv: bool = True,
        config_path: str | Path | None = None,
    ):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv
        self.config_path = Path(config_path) if config_path is not None else default_config_path()

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def _mask_credential(self, value: str | None) -> str:
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
    ) -> str | None:
        """Resolve a credential from an explicit value, the environment or a default.

        Empty environment variables count as unset.

        Raises:
            CredentialNotFoundError: If required=True and nothing was found
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and os.environ.get(env_var_name):
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            logger.debug(f"Resolved credential from {source}: {self._mask_credential(result)}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def load_auth_config(self) -> dict:
        """Read the JSON auth config file.

        Raises:
            CredentialNotFoundError: The file does not exist
            CredentialFileError: The file cannot be read or is not a JSON object
        """
        try:
            raw = self.config_path.read_text()
        except FileNotFoundError:
            raise CredentialNotFoundError(
                f"{API_KEY_ENV_VAR} not set and no config file found: "
                f"set {API_KEY_ENV_VAR} or run 'opsgenie-cli auth login'",
                env_var_name=API_KEY_ENV_VAR,
            ) from None
        except OSError as e:
            raise CredentialFileError(f"Error reading auth config {self.config_path}: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise CredentialFileError(f"Invalid auth config {self.config_path}: {e}") from e
        if not isinstance(data, dict):
            raise CredentialFileError(f"Invalid auth config {self.config_path}: expected a JSON object")
        return data

    def resolve_api_key(self, value: str | None = None) -> str:
        """Resolve the OpsGenie API key.

        Args:
            value: Explicit key (highest priority)

        Returns:
            The API key

        Raises:
            CredentialNotFoundError: Neither the environment nor the config
                file provides a non-empty key
            CredentialFileError: The config file exists but is unreadable
        """
        key = self.resolve(value=value, env_var_name=API_KEY_ENV_VAR)
        if key:
            return key

        api_key = self.load_auth_config().get("api_key")
        if not isinstance(api_key, str) or not api_key:
            raise CredentialNotFoundError(
                "no valid authentication found: config file exists but api_key is empty",
                env_var_name=API_KEY_ENV_VAR,
            )
        logger.debug(f"Resolved credential from config file: {self.config_path} (***)")
        return api_key

    def save_api_key(self, api_key: str) -> Path:
        """Write the API key to the config file with mode 0600.

        Returns:
            Path of the written file

        Raises:
            CredentialFileError: The file cannot be written
        """
        payload = json.dumps({"api_key": api_key}, indent=2)
        try:
            fd = os.open(self.config_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
            with os.fdopen(fd, "w") as fh:
                fh.write(payload)
            os.chmod(self.config_path, CONFIG_FILE_MODE)
        except OSError as e:
            raise CredentialFileError(f"Error writing auth config {self.config_path}: {e}") from e

        logger.debug(f"Saved credential to config file: {self.config_path} (***)")
        return self.config_path
