"""OpsGenie Client - Resilient transport layer for the OpsGenie REST API.

This library provides the HTTP plumbing shared by every OpsGenie CLI command:
- Rate-limit aware retry with exponential backoff
- Polling of asynchronously processed (202 Accepted) requests
- Pagination across `paging.next` links with single-object normalization
- Structured API errors with a fallback for non-JSON bodies
- Credential resolution (environment, .env, config file)

Example:
    ```python
    from opsgenie_client import ClientConfig, OpsgenieClient

    config = ClientConfig.from_environment(region="eu")

    with OpsgenieClient(config) as client:
        alerts = client.list_all("/v2/alerts", {"query": "status:open"})
        client.post("/v2/alerts", {"message": "Disk full on db-1"})
    ```
"""

import logging

__version__ = "0.1.0"

from opsgenie_client.client import OpsgenieClient  # noqa: E402
from opsgenie_client.config import ClientConfig  # noqa: E402
from opsgenie_client.decoding import json_value, list_of  # noqa: E402

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ClientConfig",
    "OpsgenieClient",
    "__version__",
    "json_value",
    "list_of",
]
