"""Error handling for OpsGenie API calls."""

from opsgenie_client.errors.exceptions import (
    APIError,
    AsyncRequestError,
    AsyncRequestFailedError,
    AsyncRequestTimeoutError,
    BadRequestError,
    ClientError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    NotFoundError,
    OpsgenieError,
    PollCancelledError,
    RateLimitError,
    RequestEncodeError,
    RetriesExceededError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from opsgenie_client.errors.handler import normalize_error, raise_for_status
from opsgenie_client.errors.models import ErrorResponse

__all__ = [
    "APIError",
    "AsyncRequestError",
    "AsyncRequestFailedError",
    "AsyncRequestTimeoutError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "DecodeError",
    "ErrorResponse",
    "ForbiddenError",
    "NotFoundError",
    "OpsgenieError",
    "PollCancelledError",
    "RateLimitError",
    "RequestEncodeError",
    "RetriesExceededError",
    "ServerError",
    "TransportError",
    "UnauthorizedError",
    "ValidationError",
    "normalize_error",
    "raise_for_status",
]
