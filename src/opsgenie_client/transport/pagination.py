"""Pagination across OpsGenie list endpoints.

List endpoints answer `{"data": [...], "paging": {"next": "<absolute url>"}}`.
Some "list" endpoints return a single object under `data` instead of an
array, and some omit `data` entirely; `PageEnvelope` normalizes all three
shapes to a list before results are combined.
"""

import enum
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit

import httpx

from opsgenie_client.decoding import Decoder, apply_target, json_value, parse_json
from opsgenie_client.errors.exceptions import DecodeError, TransportError
from opsgenie_client.errors.handler import normalize_error
from opsgenie_client.models import Paging

logger = logging.getLogger(__name__)

PAGE_SIZE_PARAM = "limit"
DEFAULT_PAGE_SIZE = 100


class PayloadShape(enum.Enum):
    ABSENT = "absent"
    OBJECT = "object"
    ARRAY = "array"


@dataclass(frozen=True)
class PageEnvelope:
    """One fetched page: payload tagged with its shape, plus the next cursor."""

    shape: PayloadShape
    payload: Any = None
    next_path: str | None = None

    @classmethod
    def from_json(cls, envelope: Any) -> "PageEnvelope":
        """Classify a parsed page body.

        Raises:
            TypeError: The page body is not a JSON object
        """
        if not isinstance(envelope, dict):
            raise TypeError(f"expected a JSON object, got {type(envelope).__name__}")

        data = envelope.get("data")
        if data is None:
            shape = PayloadShape.ABSENT
        elif isinstance(data, list):
            shape = PayloadShape.ARRAY
        else:
            shape = PayloadShape.OBJECT

        paging = Paging.from_dict(envelope.get("paging"))
        next_path = next_page_path(paging.next) if paging else None
        return cls(shape=shape, payload=data, next_path=next_path)

    def items(self) -> list[Any]:
        """Page payload as a list, in source order."""
        if self.shape is PayloadShape.ARRAY:
            return list(self.payload)
        if self.shape is PayloadShape.OBJECT:
            return [self.payload]
        return []


def next_page_path(next_url: str | None) -> str | None:
    """Reduce an absolute `paging.next` URL to path plus query.

    Scheme and host are dropped: every page is fetched from the client's own
    base URL.
    """
    if not next_url:
        return None
    try:
        parts = urlsplit(next_url)
    except ValueError:
        logger.debug(f"Ignoring unparseable paging.next URL: {next_url}")
        return None
    if not parts.path:
        return None
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


def first_page_path(path: str, params: Mapping[str, Any] | httpx.QueryParams | None) -> str:
    """Initial cursor: `path?params`, with the default page size injected."""
    query = httpx.QueryParams(params or {})
    if PAGE_SIZE_PARAM not in query:
        query = query.set(PAGE_SIZE_PARAM, str(DEFAULT_PAGE_SIZE))
    return f"{path}?{query}"


class PaginationWalker:
    """Follows `paging.next` links and concatenates every page's `data`.

    Pages are fetched with a single attempt each: a 429 in the middle of a
    walk fails the whole collection instead of being retried.

    Args:
        http: Client for page requests (no rate-limit retry)
    """

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def collect_all(
        self,
        path: str,
        params: Mapping[str, Any] | httpx.QueryParams | None = None,
        into: Decoder | None = json_value,
    ) -> Any:
        """Fetch every page of a list endpoint.

        Args:
            path: List endpoint path, without query string
            params: Query parameters for the first page
            into: Result target applied to the combined list. With None every
                page is still fetched and checked, but nothing is returned.

        Returns:
            Decoded combined list, in page order then source order, or None
            when no target was supplied

        Raises:
            APIError: A page returned non-2xx (429 included)
            TransportError: A page request failed at the network level
            DecodeError: A page or its paging links were malformed, or the
                target rejected the result
        """
        items: list[Any] = []
        cursor: str | None = first_page_path(path, params)
        pages = 0

        while cursor:
            logger.debug(f"ListAll fetching: {cursor}")
            page = self._fetch_page(cursor)
            pages += 1
            items.extend(page.items())
            cursor = page.next_path

        logger.debug(f"ListAll collected {len(items)} items from {pages} pages")

        if into is None:
            return None
        return apply_target(items, into, "decode combined results")

    def _fetch_page(self, cursor: str) -> PageEnvelope:
        try:
            response = self._http.get(cursor)
        except httpx.TransportError as e:
            raise TransportError(f"request failed: {e}") from e

        if not response.is_success:
            raise normalize_error(response.status_code, response.content)

        try:
            return PageEnvelope.from_json(parse_json(response.content, "parse page"))
        except TypeError as e:
            raise DecodeError(f"parse page: {e}") from e
