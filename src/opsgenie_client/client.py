"""OpsGenie API client."""

import json
import logging
import threading
import time
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from opsgenie_client.config import ClientConfig
from opsgenie_client.decoding import Decoder, decode_body, json_value, unwrap_data
from opsgenie_client.errors.exceptions import (
    RequestEncodeError,
    RetriesExceededError,
    TransportError,
)
from opsgenie_client.errors.handler import normalize_error
from opsgenie_client.log import configure_debug_logging
from opsgenie_client.transport.factory import create_transport_stack
from opsgenie_client.transport.pagination import PaginationWalker
from opsgenie_client.transport.polling import AsyncRequestPoller

logger = logging.getLogger(__name__)

AUTH_SCHEME = "GenieKey"
USER_AGENT_PREFIX = "opsgenie-cli"


def user_agent() -> str:
    from opsgenie_client import __version__

    return f"{USER_AGENT_PREFIX}/{__version__}"


def encode_body(body: Any) -> bytes | None:
    """Serialize a request body to JSON before any network I/O.

    Raises:
        RequestEncodeError: The value has no JSON representation
    """
    if body is None:
        return None
    try:
        return json.dumps(body, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise RequestEncodeError(f"marshal request: {e}") from e


class OpsgenieClient:
    """Synchronous client for the OpsGenie REST API.

    Every operation blocks until it completes, including rate-limit backoff
    and async request polling. One client is built per process and used for
    one logical operation at a time.

    Args:
        config: Client settings (API key, base URL, timeouts)
        transport: Primitive transport (default: httpx.HTTPTransport()).
            Pass `httpx.MockTransport` in tests.
        sleep: Blocking sleep used for backoff and poll intervals
        clock: Monotonic clock used for the poll deadline

    Example:
        ```python
        config = ClientConfig(api_key="...", region="eu")
        with OpsgenieClient(config) as client:
            alert = client.get_data("/v2/alerts/abc", {"identifierType": "id"})
        ```
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self._base_url = config.resolved_base_url()
        if config.debug:
            configure_debug_logging()

        stack = create_transport_stack(
            base_transport=transport,
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
            sleep=sleep,
        )
        self._http = self._build_http_client(stack.retrying)
        self._single = self._build_http_client(stack.single_attempt)
        self._poller = AsyncRequestPoller(
            self._single,
            poll_interval=config.poll_interval,
            max_poll_duration=config.max_poll_duration,
            sleep=sleep,
            clock=clock,
        )
        self._walker = PaginationWalker(self._single)
        logger.debug(f"OpsGenie client configured: {config.masked()}")

    def _build_http_client(self, transport: httpx.BaseTransport) -> httpx.Client:
        return httpx.Client(
            base_url=self._base_url,
            timeout=self.config.timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"{AUTH_SCHEME} {self.config.api_key}",
                "User-Agent": user_agent(),
            },
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._http.close()
        self._single.close()

    def __enter__(self) -> "OpsgenieClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get(
        self,
        path: str,
        *,
        into: Decoder | None = json_value,
        cancel: threading.Event | None = None,
    ) -> Any:
        """GET `path` and decode the response."""
        return self._execute("GET", path, None, into, cancel=cancel)

    def post(
        self,
        path: str,
        body: Any = None,
        *,
        into: Decoder | None = json_value,
        cancel: threading.Event | None = None,
        poll_timeout: float | None = None,
    ) -> Any:
        """POST a JSON body to `path` and decode the response."""
        return self._execute("POST", path, body, into, cancel=cancel, poll_timeout=poll_timeout)

    def put(
        self,
        path: str,
        body: Any = None,
        *,
        into: Decoder | None = json_value,
        cancel: threading.Event | None = None,
        poll_timeout: float | None = None,
    ) -> Any:
        """PUT a JSON body to `path` and decode the response."""
        return self._execute("PUT", path, body, into, cancel=cancel, poll_timeout=poll_timeout)

    def patch(
        self,
        path: str,
        body: Any = None,
        *,
        into: Decoder | None = json_value,
        cancel: threading.Event | None = None,
        poll_timeout: float | None = None,
    ) -> Any:
        """PATCH `path` with a JSON body and decode the response."""
        return self._execute("PATCH", path, body, into, cancel=cancel, poll_timeout=poll_timeout)

    def delete(
        self,
        path: str,
        *,
        into: Decoder | None = json_value,
        cancel: threading.Event | None = None,
        poll_timeout: float | None = None,
    ) -> Any:
        """DELETE `path`. Most endpoints answer 202 and are polled to completion."""
        return self._execute("DELETE", path, None, into, cancel=cancel, poll_timeout=poll_timeout)

    def get_data(
        self,
        path: str,
        params: Mapping[str, Any] | httpx.QueryParams | None = None,
        *,
        into: Decoder | None = json_value,
    ) -> Any:
        """GET a `{"data": ...}` envelope and return the decoded `data` member.

        Returns:
            Decoded `data`, or None when it is absent or null
        """
        query = httpx.QueryParams(params or {})
        full_path = f"{path}?{query}" if query else path
        response = self._send("GET", full_path, None)
        if response.status_code == 202:
            return self._poller.poll(response.content, into)
        return unwrap_data(response.content, into)

    def list_all(
        self,
        path: str,
        params: Mapping[str, Any] | httpx.QueryParams | None = None,
        *,
        into: Decoder | None = json_value,
    ) -> Any:
        """Collect every page of a list endpoint into one list.

        A 429 on any page fails the whole walk; pages are not retried. With
        `into=None` every page is still fetched and the call returns None.
        """
        return self._walker.collect_all(path, params, into)

    def _execute(
        self,
        method: str,
        path: str,
        body: Any,
        into: Decoder | None,
        *,
        cancel: threading.Event | None = None,
        poll_timeout: float | None = None,
    ) -> Any:
        response = self._send(method, path, body)

        if response.status_code == 202:
            return self._poller.poll(response.content, into, cancel=cancel, timeout=poll_timeout)

        return decode_body(response.content, into)

    def _send(self, method: str, path: str, body: Any) -> httpx.Response:
        """Send through the retrying transport and classify the response.

        Returns:
            A 2xx response (202 included, for the caller to poll)

        Raises:
            RequestEncodeError: Body is not JSON serializable (nothing sent)
            TransportError: Network failure, timeout included
            RetriesExceededError: Still 429 after every retry
            APIError: Any other non-2xx response
        """
        content = encode_body(body)
        try:
            response = self._http.request(method, path, content=content)
        except httpx.TransportError as e:
            raise TransportError(f"request failed: {e}") from e

        if response.status_code == 429:
            raise RetriesExceededError(
                self.config.max_retries, normalize_error(response.status_code, response.content)
            )

        if not response.is_success:
            raise normalize_error(response.status_code, response.content)

        return response
