"""API key resolution for the OpsGenie client.

Resolution chain: explicit value, then the `OPSGENIE_API_KEY` environment
variable (a .env file is honoured), then `~/.opsgenie-cli-auth.json`.

Example:
    ```python
    from opsgenie_client.auth import CredentialResolver

    api_key = CredentialResolver().resolve_api_key()
    ```
"""

from opsgenie_client.auth.credentials import (
    API_KEY_ENV_VAR,
    CredentialResolver,
    default_config_path,
)
from opsgenie_client.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)

__all__ = [
    "API_KEY_ENV_VAR",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "default_config_path",
]
