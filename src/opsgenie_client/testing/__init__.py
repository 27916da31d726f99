"""Testing utilities for code built on the OpsGenie client.

Example:
    ```python
    from opsgenie_client.testing import create_mock_client, json_response


    def test_lists_alerts():
        client, clock = create_mock_client(lambda request: json_response(200, {"data": []}))
        assert client.list_all("/v2/alerts") == []
    ```
"""

import json
from collections.abc import Callable
from typing import Any

import httpx

from opsgenie_client.client import OpsgenieClient
from opsgenie_client.config import ClientConfig

TEST_API_KEY = "test-key"
TEST_BASE_URL = "https://api.opsgenie.test"


class FakeClock:
    """Monotonic clock advanced only by its own `sleep`.

    Records every requested delay so tests can assert backoff sequences
    without waiting.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def json_response(status_code: int, payload: Any = None, headers: dict[str, str] | None = None) -> httpx.Response:
    """Build a response with a JSON body (empty body when payload is None)."""
    content = b"" if payload is None else json.dumps(payload).encode()
    return httpx.Response(
        status_code,
        content=content,
        headers={"content-type": "application/json", **(headers or {})},
    )


def error_response(status_code: int, message: str, errors: list[str] | None = None) -> httpx.Response:
    """Build an OpsGenie error response `{"message", "code", "errors"?}`."""
    payload: dict[str, Any] = {"message": message, "code": status_code}
    if errors is not None:
        payload["errors"] = errors
    return json_response(status_code, payload)


def create_mock_client(
    handler: Callable[[httpx.Request], httpx.Response],
    **config: Any,
) -> tuple[OpsgenieClient, FakeClock]:
    """Build a client whose HTTP traffic goes to `handler`.

    Sleeps are instantaneous and recorded on the returned FakeClock.

    Args:
        handler: Called with every request, returns the response to send back
        **config: ClientConfig overrides (api_key and base_url have test defaults)

    Returns:
        Tuple of (client, clock)
    """
    config.setdefault("api_key", TEST_API_KEY)
    config.setdefault("base_url", TEST_BASE_URL)
    clock = FakeClock()
    client = OpsgenieClient(
        ClientConfig(**config),
        transport=httpx.MockTransport(handler),
        sleep=clock.sleep,
        clock=clock,
    )
    return client, clock


__all__ = [
    "TEST_API_KEY",
    "TEST_BASE_URL",
    "FakeClock",
    "create_mock_client",
    "error_response",
    "json_response",
]
