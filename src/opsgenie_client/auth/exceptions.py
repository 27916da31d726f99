"""Exceptions for API key resolution.

Example:
    ```python
    from opsgenie_client.auth.exceptions import CredentialNotFoundError

    try:
        api_key = resolver.resolve_api_key()
    except CredentialNotFoundError as e:
        print(f"Missing credential: {e.env_var_name}")
    ```
"""

from opsgenie_client.errors.exceptions import OpsgenieError


class CredentialError(OpsgenieError):
    """Base exception for credential-related errors."""

    pass


class CredentialNotFoundError(CredentialError):
    """No API key in the environment, .env file or auth config file.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Credential or auth config file cannot be read, parsed or written."""

    pass
