"""Error normalization for non-2xx HTTP responses."""

import httpx

from opsgenie_client.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from opsgenie_client.errors.models import ErrorResponse
from opsgenie_client.log import truncate

# Raw body characters kept in unstructured error messages
MAX_ERROR_BODY = 500

EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def exception_class_for(status_code: int) -> type[APIError]:
    """Pick the APIError subclass for an HTTP status code."""
    if status_code in EXCEPTION_MAP:
        return EXCEPTION_MAP[status_code]
    if 400 <= status_code < 500:
        return ClientError
    if 500 <= status_code < 600:
        return ServerError
    return APIError


def normalize_error(status_code: int, body: bytes | str) -> APIError:
    """Convert a non-2xx response body into an exception (not raised).

    A JSON body with a non-empty `message` gives a structured error whose
    code is the real HTTP status, whatever the body claims. Anything else
    gives a generic error carrying the status and the truncated raw body.

    Args:
        status_code: HTTP status of the response
        body: Raw response body

    Returns:
        APIError subclass matching the status code
    """
    text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
    exc_class = exception_class_for(status_code)

    error_response = ErrorResponse.from_body(text)
    if error_response is not None:
        error_response.code = status_code
        return exc_class(
            error_response.to_exception_message(),
            status_code=status_code,
            error_response=error_response,
            body=text,
        )

    return exc_class(
        f"API error (status {status_code}): {truncate(text, MAX_ERROR_BODY)}",
        status_code=status_code,
        body=text,
    )


def raise_for_status(response: httpx.Response) -> None:
    """Raise the normalized error for a non-2xx response.

    Args:
        response: HTTP response object (body is read if needed)

    Raises:
        APIError subclass based on status code
    """
    if response.is_success:
        return

    raise normalize_error(response.status_code, response.read())
