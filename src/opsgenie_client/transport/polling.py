"""Polling of requests the API accepted for asynchronous processing.

Write operations on alerts answer `202 Accepted` with a `requestId`. The
outcome is only visible through `GET /v2/alerts/requests/<requestId>`, so the
poller queries that endpoint at a fixed interval until the request succeeds,
fails, is cancelled, or the deadline passes. A timeout does not mean the
request failed: it may still complete server-side.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

import httpx

from opsgenie_client.config import DEFAULT_MAX_POLL_DURATION, DEFAULT_POLL_INTERVAL
from opsgenie_client.decoding import Decoder, decode_body, parse_json
from opsgenie_client.errors.exceptions import (
    AsyncRequestFailedError,
    AsyncRequestTimeoutError,
    DecodeError,
    PollCancelledError,
    TransportError,
)
from opsgenie_client.errors.handler import normalize_error
from opsgenie_client.models import AsyncTicket, PollOutcome

logger = logging.getLogger(__name__)

REQUEST_STATUS_PATH = "/v2/alerts/requests/{request_id}"


class AsyncRequestPoller:
    """Blocking poller for 202 Accepted requests.

    Args:
        http: Client for status requests. Must not retry on 429: a poll that is
            rate limited fails the operation.
        poll_interval: Seconds slept before every status request (default: 1.0)
        max_poll_duration: Wall-clock budget in seconds (default: 30.0)
        sleep: Blocking sleep function (injectable for tests)
        clock: Monotonic clock used for the deadline (injectable for tests)
    """

    def __init__(
        self,
        http: httpx.Client,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_poll_duration: float = DEFAULT_MAX_POLL_DURATION,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._http = http
        self.poll_interval = poll_interval
        self.max_poll_duration = max_poll_duration
        self._sleep = sleep
        self._clock = clock

    def poll(
        self,
        body: bytes,
        into: Decoder | None,
        *,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Wait for the async request announced by a 202 body to finish.

        Args:
            body: Raw body of the 202 response
            into: Result target for the final payload (None to skip decoding)
            cancel: Event that aborts polling when set
            timeout: Overrides `max_poll_duration` for this call

        Returns:
            Decoded final payload, or None when decoding was skipped or failed

        Raises:
            APIError: A status request returned non-2xx
            TransportError: A status request failed at the network level
            DecodeError: A status response was not a valid status envelope
            AsyncRequestFailedError: The request ended `failed` or `cancelled`
            AsyncRequestTimeoutError: No terminal state before the deadline
            PollCancelledError: `cancel` was set
        """
        ticket = AsyncTicket.from_body(body)
        if ticket is None:
            # Accepted and already complete: nothing to poll
            return self._decode_best_effort(body, into)

        logger.debug(f"Async request accepted, polling requestId={ticket.request_id}")

        budget = self.max_poll_duration if timeout is None else timeout
        deadline = self._clock() + budget
        path = REQUEST_STATUS_PATH.format(request_id=ticket.request_id)

        while self._clock() < deadline:
            if cancel is not None and cancel.is_set():
                raise PollCancelledError(ticket.request_id)

            self._sleep(self.poll_interval)

            if cancel is not None and cancel.is_set():
                raise PollCancelledError(ticket.request_id)

            raw, outcome = self._fetch_status(ticket, path)
            logger.debug(f"Poll result: isSuccess={outcome.success} status={outcome.state}")

            if outcome.success:
                return self._decode_best_effort(raw, into)

            if outcome.is_terminal_failure:
                raise AsyncRequestFailedError(ticket.request_id, outcome.state)

        raise AsyncRequestTimeoutError(ticket.request_id, budget)

    def _fetch_status(self, ticket: AsyncTicket, path: str) -> tuple[bytes, PollOutcome]:
        try:
            response = self._http.get(path)
        except httpx.TransportError as e:
            raise TransportError(f"poll request {ticket.request_id}: {e}") from e

        if not response.is_success:
            raise normalize_error(response.status_code, response.content)

        envelope = parse_json(response.content, "parse poll response")
        try:
            outcome = PollOutcome.from_envelope(envelope)
        except TypeError as e:
            raise DecodeError(f"parse poll response: {e}") from e
        return response.content, outcome

    def _decode_best_effort(self, raw: bytes, into: Decoder | None) -> Any:
        """Decode `raw` into `into`, dropping decode failures.

        The operation already succeeded at this point, so a malformed payload
        must not turn it into a failure.
        """
        try:
            return decode_body(raw, into)
        except DecodeError as e:
            logger.debug(f"Ignoring undecodable async result: {e}")
            return None
