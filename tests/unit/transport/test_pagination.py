"""Tests for the pagination walker and page envelope normalization."""

from dataclasses import dataclass

import httpx
import pytest

from opsgenie_client import list_of
from opsgenie_client.errors import DecodeError, ForbiddenError, RateLimitError
from opsgenie_client.testing import create_mock_client, error_response, json_response
from opsgenie_client.transport.pagination import (
    PageEnvelope,
    PayloadShape,
    first_page_path,
    next_page_path,
)


@dataclass
class Alert:
    id: str

    @classmethod
    def from_dict(cls, data: dict) -> "Alert":
        return cls(id=data["id"])


class TestPageEnvelope:
    """The three payload shapes normalize to a list."""

    @pytest.mark.unit
    def test_array_payload(self):
        page = PageEnvelope.from_json({"data": [{"id": "a"}, {"id": "b"}]})

        assert page.shape is PayloadShape.ARRAY
        assert page.items() == [{"id": "a"}, {"id": "b"}]
        assert page.next_path is None

    @pytest.mark.unit
    def test_single_object_payload(self):
        page = PageEnvelope.from_json({"data": {"id": "a"}})

        assert page.shape is PayloadShape.OBJECT
        assert page.items() == [{"id": "a"}]

    @pytest.mark.unit
    @pytest.mark.parametrize("envelope", [{}, {"data": None}, {"result": "ok"}])
    def test_absent_payload(self, envelope):
        page = PageEnvelope.from_json(envelope)

        assert page.shape is PayloadShape.ABSENT
        assert page.items() == []

    @pytest.mark.unit
    def test_empty_array_payload(self):
        assert PageEnvelope.from_json({"data": []}).items() == []

    @pytest.mark.unit
    def test_next_link_reduced_to_path_and_query(self):
        page = PageEnvelope.from_json(
            {"data": [], "paging": {"next": "https://api.opsgenie.com/v2/alerts?limit=2&offset=2"}}
        )

        assert page.next_path == "/v2/alerts?limit=2&offset=2"

    @pytest.mark.unit
    def test_rejects_non_object_page(self):
        with pytest.raises(TypeError):
            PageEnvelope.from_json([1, 2, 3])


class TestPagePaths:
    @pytest.mark.unit
    def test_default_limit_injected(self):
        assert first_page_path("/v2/alerts", None) == "/v2/alerts?limit=100"

    @pytest.mark.unit
    def test_custom_limit_preserved(self):
        path = first_page_path("/v2/alerts", {"limit": "20", "query": "status:open"})

        assert "limit=20" in path
        assert "limit=100" not in path
        assert "query=status%3Aopen" in path

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "next_url,expected",
        [
            (None, None),
            ("", None),
            ("https://api.eu.opsgenie.com/v2/teams", "/v2/teams"),
            ("https://api.opsgenie.com/v2/alerts?offset=100&limit=100", "/v2/alerts?offset=100&limit=100"),
        ],
    )
    def test_next_page_path(self, next_url, expected):
        assert next_page_path(next_url) == expected


class TestListAll:
    """list_all follows `paging.next` and concatenates pages in order."""

    @pytest.mark.unit
    def test_two_pages_concatenate_in_order(self):
        fetched: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            fetched.append(str(request.url))
            if request.url.params.get("offset") == "2":
                return json_response(200, {"data": [{"id": "c"}]})
            return json_response(
                200,
                {
                    "data": [{"id": "a"}, {"id": "b"}],
                    "paging": {"next": "https://api.opsgenie.com/v2/alerts?limit=2&offset=2"},
                },
            )

        client, _ = create_mock_client(handler)
        result = client.list_all("/v2/alerts", {"limit": "2"})

        assert result == [{"id": "a"}, {"id": "b"}, {"id": "c"}]
        assert len(fetched) == 2
        # Host of the next link is discarded in favour of the client's base URL
        assert fetched[1] == "https://api.opsgenie.test/v2/alerts?limit=2&offset=2"

    @pytest.mark.unit
    def test_single_object_data_gives_one_element(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response(200, {"data": {"id": "sched-1", "name": "Primary"}})

        client, _ = create_mock_client(handler)

        assert client.list_all("/v2/schedules/sched-1/on-calls") == [{"id": "sched-1", "name": "Primary"}]

    @pytest.mark.unit
    def test_empty_pages_give_empty_list(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                return json_response(200, {"data": [], "paging": {"next": "https://x/v2/alerts?offset=100"}})
            return json_response(200, {"data": []})

        client, _ = create_mock_client(handler)

        assert client.list_all("/v2/alerts") == []
        assert calls == 2

    @pytest.mark.unit
    def test_missing_data_field_gives_empty_list(self):
        client, _ = create_mock_client(lambda request: json_response(200, {"took": 0.01}))

        assert client.list_all("/v2/alerts") == []

    @pytest.mark.unit
    def test_sends_default_limit(self):
        seen: list[httpx.QueryParams] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params)
            return json_response(200, {"data": []})

        client, _ = create_mock_client(handler)
        client.list_all("/v2/alerts", {"query": "status:open"})

        assert seen[0]["limit"] == "100"
        assert seen[0]["query"] == "status:open"

    @pytest.mark.unit
    def test_rate_limit_aborts_walk_without_retry(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return error_response(429, "rate limited")

        client, clock = create_mock_client(handler)
        with pytest.raises(RateLimitError):
            client.list_all("/v2/alerts")

        assert calls == 1
        assert clock.sleeps == []

    @pytest.mark.unit
    def test_error_on_second_page_aborts(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                return json_response(200, {"data": [{"id": "a"}], "paging": {"next": "https://x/v2/alerts?offset=1"}})
            return error_response(403, "Forbidden")

        client, _ = create_mock_client(handler)
        with pytest.raises(ForbiddenError):
            client.list_all("/v2/alerts")

    @pytest.mark.unit
    def test_invalid_page_json(self):
        client, _ = create_mock_client(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(DecodeError) as exc_info:
            client.list_all("/v2/alerts")

        assert "parse page" in str(exc_info.value)

    @pytest.mark.unit
    def test_typed_target(self):
        client, _ = create_mock_client(lambda request: json_response(200, {"data": [{"id": "a"}, {"id": "b"}]}))

        assert client.list_all("/v2/alerts", into=list_of(Alert.from_dict)) == [Alert("a"), Alert("b")]

    @pytest.mark.unit
    def test_decode_combined_results_error(self):
        client, _ = create_mock_client(lambda request: json_response(200, {"data": [{"name": "no id"}]}))

        with pytest.raises(DecodeError) as exc_info:
            client.list_all("/v2/alerts", into=list_of(Alert.from_dict))

        assert "decode combined results" in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.parametrize("paging", [{"next": 5}, {"next": ["https://x/v2/alerts?offset=1"]}, "next-page"])
    def test_malformed_paging_is_parse_error(self, paging):
        client, _ = create_mock_client(lambda request: json_response(200, {"data": [1], "paging": paging}))

        with pytest.raises(DecodeError) as exc_info:
            client.list_all("/v2/alerts")

        assert "parse page" in str(exc_info.value)

    @pytest.mark.unit
    def test_no_target_walks_pages_and_returns_none(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                return json_response(200, {"data": [{"id": "a"}], "paging": {"next": "https://x/v2/alerts?offset=1"}})
            return json_response(200, {"data": [{"id": "b"}]})

        client, _ = create_mock_client(handler)

        assert client.list_all("/v2/alerts", into=None) is None
        assert calls == 2
