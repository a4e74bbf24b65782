import json
from collections.abc import Iterable, Mapping
from typing import Any

from enterprise_errors.core.error import StructuredError
from enterprise_errors.core.fields import read_field
from enterprise_errors.settings import (
    CPI_HTTP_ERR,
    DB_ERROR_CODE_PREFIXES,
    DB_ERROR_MESSAGE_MARKER,
    HANA_DB_ERR,
    RUNTIME_ERR,
    SYNTAX_ERR,
    UNKNOWN_ERR,
)

_SYNTAX_ERRORS = (SyntaxError, json.JSONDecodeError)
_RUNTIME_ERRORS = (TypeError, AttributeError, NameError, ReferenceError, OverflowError, RecursionError)


def _message_of(err: Any) -> str | None:
    message = read_field(err, "message")
    if message:
        return str(message)
    if isinstance(err, BaseException) and str(err):
        return str(err)
    return None


def is_database_error(err: Any) -> bool:
    """Match SQLSTATE-style codes (HY*, 3A*) or SAP DBTech driver messages."""
    code = read_field(err, "code") or read_field(err, "sqlstate")
    message = _message_of(err)
    if not isinstance(code, str) or not message:
        return False
    return code.startswith(DB_ERROR_CODE_PREFIXES) or DB_ERROR_MESSAGE_MARKER in message


def _response_status(err: Any) -> int | None:
    response = read_field(err, "response")
    if response is None:
        return None
    return read_field(response, "status") or read_field(response, "status_code")


def is_http_error(err: Any) -> bool:
    """Match errors carrying a nested HTTP response with a status."""
    return bool(_response_status(err))


def _response_view(err: Any) -> dict[str, Any]:
    response = read_field(err, "response")
    data = read_field(response, "data")
    if data is None:
        data = read_field(response, "text")
    headers = read_field(response, "headers")
    return {
        "status": _response_status(err),
        "data": data,
        "headers": dict(headers) if isinstance(headers, Mapping) else headers,
    }


def normalize_error(
    err: Any,
    module: str | None = None,
    request: Any = None,
    *,
    frame_markers: Iterable[str] = (),
) -> StructuredError:
    """Classify any raised value into a StructuredError.

    Checks run in a fixed order and the first match wins. A value that looks
    like both a database error and an HTTP error is reported as a database
    error.

    Args:
        err: the raised value; an exception, a mapping or any object.
        module: logical subsystem to attribute the error to.
        request: request snapshot or request-like object for ``internal``.
        frame_markers: substrings of file or function names to drop from
            the stack trace.
    """
    if isinstance(err, StructuredError):
        return err

    common = {"module": module, "request": request, "frame_markers": frame_markers}

    if isinstance(err, _SYNTAX_ERRORS):
        return StructuredError(
            "Invalid Syntax Encountered",
            status=500,
            code=SYNTAX_ERR,
            internal=err,
            **common,
        )

    if isinstance(err, _RUNTIME_ERRORS):
        return StructuredError(
            "Unexpected server error",
            status=500,
            code=RUNTIME_ERR,
            internal=err,
            **common,
        )

    if is_database_error(err):
        return StructuredError(
            "Database execution failed",
            status=500,
            code=HANA_DB_ERR,
            internal=err,
            **common,
        )

    if is_http_error(err):
        view = _response_view(err)
        return StructuredError(
            f"CPI request failed with status {view['status']}",
            status=view["status"],
            code=CPI_HTTP_ERR,
            internal=view,
            **common,
        )

    return StructuredError(
        _message_of(err) or "Unknown failure",
        status=500,
        code=UNKNOWN_ERR,
        internal=err,
        **common,
    )
