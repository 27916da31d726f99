"""Factory for the client's transport stack."""

import time
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from opsgenie_client.transport.retry import LoggingTransport, RateLimitRetry


@dataclass(frozen=True)
class TransportStack:
    """Two views over one connection pool.

    Attributes:
        retrying: Retries 429 with backoff; used for single requests
        single_attempt: One attempt per request; used for pagination and polling
        base: The shared primitive transport (owns the connection pool)
    """

    retrying: RateLimitRetry
    single_attempt: LoggingTransport
    base: httpx.BaseTransport


def create_transport_stack(
    *,
    base_transport: httpx.BaseTransport | None = None,
    max_retries: int = 3,
    backoff_factor: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> TransportStack:
    """Build the retrying and single-attempt transports.

    Args:
        base_transport: Primitive transport (default: httpx.HTTPTransport())
        max_retries: Retries on 429 for the retrying transport
        backoff_factor: First retry delay in seconds
        sleep: Blocking sleep used between retries

    Returns:
        TransportStack sharing `base_transport` between both views
    """
    base = base_transport or httpx.HTTPTransport()
    return TransportStack(
        retrying=RateLimitRetry(
            wrapped_transport=base,
            max_retries=max_retries,
            backoff_factor=backoff_factor,
            sleep=sleep,
        ),
        single_attempt=LoggingTransport(wrapped_transport=base),
        base=base,
    )
