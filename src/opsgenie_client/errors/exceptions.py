"""Structured exceptions for OpsGenie API calls."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from opsgenie_client.errors.models import ErrorResponse


class OpsgenieError(Exception):
    """Base exception for everything the transport layer raises."""

    recoverable: bool = False

    def to_dict(self) -> dict:
        """Machine-readable form printed by the CLI in JSON output mode."""
        return {
            "code": "ERROR",
            "message": str(self),
            "recoverable": self.recoverable,
        }


class TransportError(OpsgenieError):
    """Connection, DNS or timeout failure. Never retried."""

    pass


class RequestEncodeError(OpsgenieError):
    """Request body has no JSON representation. Raised before any I/O."""

    pass


class DecodeError(OpsgenieError):
    """A response body could not be decoded into the requested shape."""

    pass


class APIError(OpsgenieError):
    """Non-2xx response from the API.

    Structured errors (JSON body with a non-empty `message`) carry an
    `ErrorResponse`; unstructured errors only carry the truncated raw body
    in their message.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_response: "ErrorResponse | None" = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_response = error_response
        self.body = body

    @property
    def code(self) -> int | None:
        return self.status_code

    @property
    def details(self) -> list[str]:
        if self.error_response is None:
            return []
        return list(self.error_response.errors)

    @property
    def is_structured(self) -> bool:
        return self.error_response is not None


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class ValidationError(ClientError):
    """422 Unprocessable Entity."""

    pass


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    pass


class ServerError(APIError):
    """5xx server errors."""

    pass


class RetriesExceededError(OpsgenieError):
    """Still rate limited after every retry was spent."""

    recoverable = True

    def __init__(self, max_retries: int, last_error: APIError):
        super().__init__(f"exceeded {max_retries} retries: {last_error}")
        self.max_retries = max_retries
        self.last_error = last_error


class AsyncRequestError(OpsgenieError):
    """Base for failures of a request accepted with 202."""

    def __init__(self, message: str, request_id: str):
        super().__init__(message)
        self.request_id = request_id


class AsyncRequestFailedError(AsyncRequestError):
    """The async request reached the `failed` or `cancelled` state."""

    def __init__(self, request_id: str, state: str):
        super().__init__(f"async request {request_id} {state}", request_id)
        self.state = state


class AsyncRequestTimeoutError(AsyncRequestError):
    """No terminal state before the polling deadline.

    The request may still complete server-side after this is raised.
    """

    recoverable = True

    def __init__(self, request_id: str, timeout: float):
        super().__init__(
            f"timed out waiting for async request {request_id} after {timeout:g}s",
            request_id,
        )
        self.timeout = timeout


class PollCancelledError(AsyncRequestError):
    """Polling was aborted through the caller's cancellation event."""

    def __init__(self, request_id: str):
        super().__init__(f"polling for async request {request_id} cancelled", request_id)
