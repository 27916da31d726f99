"""Transport layer components for the OpsGenie client.

Modules:
    retry: Rate-limit retry transport (429 only, exponential backoff)
    polling: Polling of 202 Accepted requests until a terminal state
    pagination: `paging.next` walker with payload shape normalization
    factory: Builds the retrying and single-attempt transports over one pool

Example:
    ```python
    from opsgenie_client.transport import create_transport_stack

    stack = create_transport_stack(max_retries=3)
    ```
"""

from opsgenie_client.transport.factory import TransportStack, create_transport_stack
from opsgenie_client.transport.pagination import PageEnvelope, PaginationWalker, PayloadShape
from opsgenie_client.transport.polling import AsyncRequestPoller
from opsgenie_client.transport.retry import LoggingTransport, RateLimitRetry

__all__ = [
    "AsyncRequestPoller",
    "LoggingTransport",
    "PageEnvelope",
    "PaginationWalker",
    "PayloadShape",
    "RateLimitRetry",
    "TransportStack",
    "create_transport_stack",
]
