"""Rate-limit retry transport for the OpsGenie API.

OpsGenie signals rate limiting with HTTP 429. `RateLimitRetry` re-sends the
same request on 429 with exponential backoff and hands every other response
back untouched:

| Outcome              | Behaviour                                   |
|----------------------|---------------------------------------------|
| 429                  | Sleep 1s, 2s, 4s... then retry, all methods |
| Connection/timeout   | Raised immediately, never retried           |
| Anything else        | Returned as-is (202 polling is done above)  |

Once `max_retries` retries are spent the last 429 response is returned and
the caller decides how to surface it.

## Example

```python
import httpx

from opsgenie_client.transport.retry import RateLimitRetry

transport = RateLimitRetry(wrapped_transport=httpx.HTTPTransport(), max_retries=3)

with httpx.Client(transport=transport, base_url="https://api.opsgenie.com") as client:
    response = client.get("/v2/alerts")
```
"""

import logging
import time
from collections.abc import Callable

import httpx

from opsgenie_client.log import truncate
from opsgenie_client.models import RateLimitInfo

logger = logging.getLogger(__name__)

# Characters of request/response bodies shown in debug output
DEBUG_BODY_LIMIT = 2000


def log_attempt(request: httpx.Request) -> None:
    """Debug line for an outgoing request: method, URL and truncated body."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    body = request.content.decode("utf-8", errors="replace") if request.content else ""
    if body:
        logger.debug(f"{request.method} {request.url} body={truncate(body, DEBUG_BODY_LIMIT)}")
    else:
        logger.debug(f"{request.method} {request.url}")


def log_response(response: httpx.Response) -> None:
    """Debug lines for a received response: status, rate limit and body."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    rate_limit = RateLimitInfo.from_headers(response.headers)
    response.read()
    logger.debug(f"Response status: {response.status_code}")
    logger.debug(f"X-RateLimit-Remaining: {rate_limit.remaining} / {rate_limit.limit}")
    logger.debug(f"Response body: {truncate(response.text, DEBUG_BODY_LIMIT)}")


class LoggingTransport(httpx.BaseTransport):
    """Single-attempt transport that only adds per-attempt debug logging.

    Used for pagination and async polling, where a 429 is not retried.
    """

    def __init__(self, *, wrapped_transport: httpx.BaseTransport) -> None:
        self._wrapped_transport = wrapped_transport

    def __enter__(self):
        self._wrapped_transport.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._wrapped_transport.__exit__(exc_type, exc_val, exc_tb)

    def close(self) -> None:
        self._wrapped_transport.close()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        log_attempt(request)
        response = self._wrapped_transport.handle_request(request)
        log_response(response)
        return response


class RateLimitRetry(httpx.BaseTransport):
    """Retry transport that retries every method on 429 Too Many Requests.

    Retrying a 429 is safe for POST as well: the server rejected the request
    before accepting any work. Requests that got any other status, including
    202 Accepted, are never re-sent.

    Args:
        wrapped_transport: The underlying transport to wrap
        max_retries: Maximum number of retries (default: 3, i.e. 4 attempts)
        backoff_factor: Delay before the first retry in seconds (default: 1.0)
        sleep: Blocking sleep function (injectable for tests)

    Example:
        ```python
        transport = RateLimitRetry(
            wrapped_transport=httpx.HTTPTransport(),
            max_retries=3,
        )
        ```
    """

    RATE_LIMIT_STATUS: int = 429

    def __init__(
        self,
        *,
        wrapped_transport: httpx.BaseTransport,
        max_retries: int = 3,
        backoff_factor: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._wrapped_transport = wrapped_transport
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self._sleep = sleep

    def __enter__(self):
        """Enter context, delegating to wrapped transport."""
        self._wrapped_transport.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context, delegating to wrapped transport."""
        self._wrapped_transport.__exit__(exc_type, exc_val, exc_tb)

    def close(self) -> None:
        self._wrapped_transport.close()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, retrying on 429 with exponential backoff.

        Args:
            request: The HTTP request to send

        Returns:
            First non-429 response, or the last 429 once retries are spent

        Raises:
            httpx.TransportError: Network failures propagate on first sight
        """
        retries = 0

        while True:
            log_attempt(request)
            response = self._wrapped_transport.handle_request(request)
            log_response(response)

            if not self._should_retry(response, retries):
                return response

            retries += 1
            delay = self._calculate_backoff_delay(retries)
            logger.info(
                f"Request {request.method} {request.url} rate limited (429), "
                f"retrying in {delay}s (attempt {retries}/{self.max_retries})"
            )
            response.close()
            self._sleep(delay)

    def _should_retry(self, response: httpx.Response, current_retries: int) -> bool:
        """Determine if request should be retried.

        Args:
            response: The HTTP response received
            current_retries: Number of retries attempted so far

        Returns:
            True if should retry, False otherwise
        """
        if current_retries >= self.max_retries:
            return False
        return response.status_code == self.RATE_LIMIT_STATUS

    def _calculate_backoff_delay(self, retry_number: int) -> float:
        """Calculate exponential backoff delay.

        Uses formula: backoff_factor * (2 ** (retry_number - 1))
        Default backoff sequence: 1, 2, 4 seconds

        Args:
            retry_number: Current retry attempt (1-indexed)

        Returns:
            Delay in seconds
        """
        return self.backoff_factor * (2 ** (retry_number - 1))
