"""Wire-level records shared by the transport components."""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

TERMINAL_FAILURE_STATES = frozenset(["failed", "cancelled"])


@dataclass(frozen=True)
class Paging:
    """Paging links of a list envelope. All links are absolute URLs."""

    next: str | None = None
    prev: str | None = None
    first: str | None = None
    last: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Paging | None":
        """Build from the `paging` block; None when the block is absent.

        Raises:
            TypeError: The block is not an object or a link is not a string
        """
        if data is None:
            return None
        if not isinstance(data, dict):
            raise TypeError(f"expected 'paging' to be an object, got {type(data).__name__}")
        return cls(**{name: _link(data, name) for name in ("next", "prev", "first", "last")})


def _link(data: dict, name: str) -> str | None:
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"paging.{name} must be a string, got {value!r}")
    return value or None


@dataclass(frozen=True)
class AsyncTicket:
    """Handle for a request accepted with 202 Accepted."""

    request_id: str
    preliminary_result: Any = None

    @classmethod
    def from_body(cls, body: bytes) -> "AsyncTicket | None":
        """Parse `{"requestId": ..., "result": ...}`.

        Returns:
            AsyncTicket, or None when the body is not JSON or carries no
            non-empty string `requestId`
        """
        try:
            data = json.loads(body) if body else None
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None

        request_id = data.get("requestId")
        if not isinstance(request_id, str) or not request_id:
            return None
        return cls(request_id=request_id, preliminary_result=data.get("result"))


@dataclass(frozen=True)
class PollOutcome:
    """One answer from the async request status endpoint."""

    success: bool
    state: str
    final_payload: Any = None

    @classmethod
    def from_envelope(cls, envelope: Any) -> "PollOutcome":
        """Build from `{"data": {"isSuccess": bool, "status": str, ...}}`.

        A missing `data` block counts as still processing.

        Raises:
            TypeError: The envelope or its fields have the wrong JSON types
        """
        if not isinstance(envelope, dict):
            raise TypeError(f"expected a JSON object, got {type(envelope).__name__}")

        data = envelope.get("data")
        if data is None:
            return cls(success=False, state="")
        if not isinstance(data, dict):
            raise TypeError(f"expected 'data' to be an object, got {type(data).__name__}")

        is_success = data.get("isSuccess", False)
        status = data.get("status") or ""
        if not isinstance(is_success, bool):
            raise TypeError(f"'isSuccess' must be a boolean, got {is_success!r}")
        if not isinstance(status, str):
            raise TypeError(f"'status' must be a string, got {status!r}")
        return cls(success=is_success, state=status, final_payload=data)

    @property
    def is_terminal_failure(self) -> bool:
        return not self.success and self.state in TERMINAL_FAILURE_STATES

    @property
    def is_terminal(self) -> bool:
        return self.success or self.is_terminal_failure


@dataclass(frozen=True)
class RateLimitInfo:
    """Rate limit headers of a response. Missing or invalid values are 0."""

    limit: int = 0
    remaining: int = 0

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimitInfo":
        return cls(
            limit=_int_header(headers.get("X-RateLimit-Limit")),
            remaining=_int_header(headers.get("X-RateLimit-Remaining")),
        )


def _int_header(value: str | None) -> int:
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        return 0
