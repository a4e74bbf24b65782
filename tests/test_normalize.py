from __future__ import annotations

import json

import pytest

from enterprise_errors import RequestSnapshot, StructuredError, normalize_error, validation_error


class DriverError(Exception):
    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResponse:
    def __init__(self, status_code: int, text: str, headers: dict[str, str]) -> None:
        self.status_code = status_code
        self.text = text
        self.headers = headers


class UpstreamError(Exception):
    def __init__(self, response: FakeResponse) -> None:
        super().__init__(f"upstream returned {response.status_code}")
        self.response = response


@pytest.mark.parametrize(
    "raw",
    [
        TypeError("bad"),
        SyntaxError("bad"),
        DriverError("SAP DBTech JDBC: [258]", "HY000"),
        {"response": {"status": 502}},
        {"foo": "bar"},
        "plain string",
        None,
        42,
    ],
)
def test_status_and_code_always_populated(raw) -> None:
    error = normalize_error(raw)

    assert isinstance(error, StructuredError)
    assert error.status
    assert error.code


def test_structured_error_passes_through_unchanged() -> None:
    original = validation_error("Email is required")

    assert normalize_error(original, module="users") is original
    assert original.module is None


def test_syntax_error() -> None:
    err = SyntaxError("unexpected token")
    error = normalize_error(err, module="parser")

    assert (error.status, error.code) == (500, "SYNTAX_ERR")
    assert error.message == "Invalid Syntax Encountered"
    assert error.module == "parser"
    assert error.internal["error"] is err


def test_json_decode_error_counts_as_syntax_error() -> None:
    with pytest.raises(json.JSONDecodeError) as info:
        json.loads("{not json")

    assert normalize_error(info.value).code == "SYNTAX_ERR"


def test_type_error_is_runtime_error() -> None:
    err = TypeError("x is not a function")
    error = normalize_error(err)

    assert error.status == 500
    assert error.code == "RUNTIME_ERR"
    assert error.message == "Unexpected server error"
    assert error.internal["error"] is err


@pytest.mark.parametrize("err", [AttributeError("y"), NameError("z"), OverflowError("big"), RecursionError("deep")])
def test_other_runtime_errors(err) -> None:
    assert normalize_error(err).code == "RUNTIME_ERR"


@pytest.mark.parametrize(
    "err",
    [
        DriverError("general error", "HY000"),
        DriverError("invalid transaction termination", "3A000"),
        DriverError("SAP DBTech JDBC: [301]: unique constraint violated", "301"),
        {"code": "HY010", "message": "function sequence error"},
    ],
)
def test_database_errors(err) -> None:
    error = normalize_error(err)

    assert (error.status, error.code) == (500, "HANA_DB_ERR")
    assert error.message == "Database execution failed"


def test_database_detection_needs_code_and_message() -> None:
    assert normalize_error({"code": "HY000"}).code == "UNKNOWN_ERR"
    assert normalize_error({"message": "SAP DBTech JDBC"}).code == "UNKNOWN_ERR"


def test_http_error_from_mapping() -> None:
    raw = {"response": {"status": 503, "data": {"error": "down"}, "headers": {"retry-after": "30"}}}
    error = normalize_error(raw)

    assert error.status == 503
    assert error.code == "CPI_HTTP_ERR"
    assert error.message == "CPI request failed with status 503"
    assert error.internal == {"status": 503, "data": {"error": "down"}, "headers": {"retry-after": "30"}}


def test_http_error_from_client_exception() -> None:
    err = UpstreamError(FakeResponse(404, "not found", {"content-type": "text/plain"}))
    error = normalize_error(err, module="cpi")

    assert error.status == 404
    assert error.code == "CPI_HTTP_ERR"
    assert error.internal["data"] == "not found"
    assert error.internal["headers"] == {"content-type": "text/plain"}


def test_http_error_keeps_non_mapping_headers_as_is() -> None:
    error = normalize_error({"response": {"status": 503, "headers": "retry-after: 30"}})

    assert error.status == 503
    assert error.code == "CPI_HTTP_ERR"
    assert error.internal["headers"] == "retry-after: 30"


def test_database_check_wins_over_http_check() -> None:
    raw = {"code": "HY000", "message": "failed", "response": {"status": 502}}

    assert normalize_error(raw).code == "HANA_DB_ERR"


def test_unknown_object_without_message() -> None:
    error = normalize_error({"foo": "bar"})

    assert error.status == 500
    assert error.code == "UNKNOWN_ERR"
    assert error.message == "Unknown failure"
    assert error.internal == {"foo": "bar"}


def test_unknown_exception_keeps_its_message() -> None:
    error = normalize_error(ValueError("quantity overflow"))

    assert error.code == "UNKNOWN_ERR"
    assert error.message == "quantity overflow"


def test_request_context_is_threaded_through() -> None:
    snapshot = RequestSnapshot(data={"id": 1}, user={"id": "carol"}, event="READ", method="GET", url="/books")
    error = normalize_error(TypeError("boom"), module="catalog", request=snapshot)

    assert error.module == "catalog"
    assert error.internal["user"] == {"id": "carol"}
    assert error.internal["url"] == "/books"
    assert error.internal["method"] == "GET"
