"""Client configuration and base URL selection."""

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opsgenie_client.auth.credentials import CredentialResolver

BASE_URL_US = "https://api.opsgenie.com"
BASE_URL_EU = "https://api.eu.opsgenie.com"

# Overrides the region URL (proxies, test servers)
BASE_URL_ENV_VAR = "OPSGENIE_API_URL"

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_MAX_POLL_DURATION = 30.0


@dataclass(frozen=True)
class ClientConfig:
    """Settings for one `OpsgenieClient`.

    A new config (and client) is needed whenever the API key changes; the
    client never refreshes credentials on its own.

    Attributes:
        api_key: OpsGenie API key sent as `GenieKey <api_key>`.
        region: "us" or "eu". Unknown regions fall back to US.
        base_url: Explicit base URL, takes precedence over region and env.
        timeout: Per-attempt HTTP timeout in seconds.
        debug: Emit per-attempt diagnostics to stderr.
        max_retries: Retries on 429 before giving up (attempts = retries + 1).
        backoff_factor: First retry delay in seconds, doubled per retry.
        poll_interval: Delay between async request status polls.
        max_poll_duration: Wall-clock budget for polling one async request.
    """

    api_key: str
    region: str = "us"
    base_url: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_factor: float = 1.0
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_poll_duration: float = DEFAULT_MAX_POLL_DURATION

    def resolved_base_url(self) -> str:
        """Return the base URL: explicit value, then env override, then region."""
        if self.base_url:
            return self.base_url
        override = os.environ.get(BASE_URL_ENV_VAR)
        if override:
            return override
        if self.region == "eu":
            return BASE_URL_EU
        return BASE_URL_US

    def masked(self) -> dict[str, object]:
        """Config values safe to log (API key masked)."""
        return {
            "api_key": "***" if self.api_key else None,
            "base_url": self.resolved_base_url(),
            "timeout": self.timeout,
            "debug": self.debug,
            "max_retries": self.max_retries,
        }

    @classmethod
    def from_environment(
        cls,
        *,
        region: str = "us",
        debug: bool = False,
        resolver: "CredentialResolver | None" = None,
        **overrides,
    ) -> "ClientConfig":
        """Build a config whose API key comes from the credential chain.

        Raises:
            CredentialNotFoundError: No key in the environment or config file.
            CredentialFileError: The config file exists but cannot be read.
        """
        from opsgenie_client.auth.credentials import CredentialResolver

        resolver = resolver or CredentialResolver()
        return cls(api_key=resolver.resolve_api_key(), region=region, debug=debug, **overrides)
