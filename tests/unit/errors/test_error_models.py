"""Tests for the OpsGenie error body model."""

import pytest

from opsgenie_client.errors.models import ErrorResponse


@pytest.mark.unit
def test_from_body_minimal():
    error = ErrorResponse.from_body(b'{"message":"Alert not found","code":404}')

    assert error == ErrorResponse(message="Alert not found", code=404, errors=[])


@pytest.mark.unit
def test_from_body_with_errors_and_extra_fields():
    error = ErrorResponse.from_body('{"message":"Invalid","code":422,"errors":["a","b"],"took":0.002}')

    assert error.errors == ["a", "b"]


@pytest.mark.unit
def test_from_body_optional_fields_absent_or_null():
    assert ErrorResponse.from_body('{"message":"Invalid"}') == ErrorResponse(message="Invalid")
    assert ErrorResponse.from_body('{"message":"Invalid","code":null,"errors":null}') == ErrorResponse(message="Invalid")


@pytest.mark.unit
@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"not json",
        b"[]",
        b'"just a string"',
        b'{"code":500}',
        b'{"message":"","code":500}',
        b'{"message":42}',
        b'{"message":"Alert not found","code":"not-a-number"}',
        b'{"message":"Alert not found","code":true}',
        b'{"message":"Invalid","errors":"only one"}',
        b'{"message":"Invalid","errors":["a", 2]}',
    ],
)
def test_from_body_rejects_unstructured(body):
    assert ErrorResponse.from_body(body) is None


@pytest.mark.unit
def test_to_exception_message_without_details():
    message = ErrorResponse(message="Forbidden", code=403).to_exception_message()

    assert message == "OpsGenie API error 403: Forbidden"
    assert "details:" not in message


@pytest.mark.unit
def test_to_exception_message_with_details():
    error = ErrorResponse(message="Bad Request", code=400, errors=["field required", "invalid format"])

    assert error.to_exception_message() == (
        "OpsGenie API error 400: Bad Request (details: field required, invalid format)"
    )
