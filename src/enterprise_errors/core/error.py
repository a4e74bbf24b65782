from __future__ import annotations

import traceback
from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel

from enterprise_errors.core.request import RequestSnapshot, snapshot_request
from enterprise_errors.settings import (
    AUTHORIZATION_ERR,
    BUSINESS_ERR,
    DEFAULT_CODE,
    DEFAULT_STATUS,
    VALIDATION_ERR,
)


class ErrorKind(StrEnum):
    GENERIC = "generic"
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    BUSINESS_LOGIC = "business_logic"


class ErrorDetail(BaseModel):
    """A single field-level or rule-level violation."""

    message: str
    target: str | None = None
    code: str | None = None


class ErrorResponse(BaseModel):
    """External view of an error, safe to hand back to API clients."""

    message: str
    status: int
    code: str
    target: str | None = None
    details: list[ErrorDetail] | None = None


def _is_marked(frame: traceback.FrameSummary, markers: tuple[str, ...]) -> bool:
    return any(marker in frame.filename or marker in frame.name for marker in markers)


def format_exception_stack(exc: BaseException, frame_markers: Iterable[str] = ()) -> str:
    """Format ``exc`` with its traceback, dropping frames matching ``frame_markers``."""
    markers = tuple(frame_markers)
    te = traceback.TracebackException.from_exception(exc)
    if markers:
        te.stack = traceback.StackSummary.from_list([f for f in te.stack if not _is_marked(f, markers)])
    return "".join(te.format()).rstrip("\n")


def _coerce_details(details: Iterable[Any] | None) -> tuple[ErrorDetail, ...] | None:
    if details is None:
        return None
    coerced = []
    for item in details:
        if isinstance(item, ErrorDetail):
            coerced.append(item)
        elif isinstance(item, Mapping):
            coerced.append(ErrorDetail.model_validate(dict(item)))
        else:
            coerced.append(ErrorDetail(message=str(item)))
    return tuple(coerced)


def _coerce_status(status: Any) -> int:
    try:
        return int(status) if status else DEFAULT_STATUS
    except (TypeError, ValueError):
        return DEFAULT_STATUS


def _build_internal(internal: Any, snapshot: RequestSnapshot | None) -> dict[str, Any]:
    if internal is None:
        merged: dict[str, Any] = {}
    elif isinstance(internal, Mapping):
        merged = dict(internal)
    else:
        merged = {"error": internal}
    if snapshot is not None:
        merged.update(snapshot.as_internal())
    return merged


class StructuredError(Exception):
    """Canonical error record shared by classification, persistence and alerts.

    Application code raises it directly (usually through one of the named
    constructors below); ``normalize_error`` produces it for everything else.
    All fields are read-only once constructed.

    ``internal`` merges the caller's diagnostic payload with the request
    snapshot and is never exposed to API clients. ``stack`` comes from the
    wrapped exception when ``internal`` is one, otherwise from this error.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
        target: str | None = None,
        details: Iterable[Any] | None = None,
        module: str | None = None,
        internal: Any = None,
        request: Any = None,
        kind: ErrorKind = ErrorKind.GENERIC,
        frame_markers: Iterable[str] = (),
    ):
        super().__init__(message)
        self._message = message
        self._status = _coerce_status(status)
        self._code = code or DEFAULT_CODE
        self._target = target or None
        self._details = _coerce_details(details)
        self._module = module or None
        self._kind = ErrorKind(kind)
        self._internal = _build_internal(internal, snapshot_request(request))
        self._frame_markers = tuple(frame_markers)

        self._origin_stack: str | None = None
        if isinstance(internal, BaseException) and internal.__traceback__ is not None:
            self._origin_stack = format_exception_stack(internal, self._frame_markers)
        # Call site of the constructor, for errors that are never raised
        self._created_at = [f for f in traceback.extract_stack()[:-1] if f.filename != __file__]

    @property
    def message(self) -> str:
        return self._message

    @property
    def status(self) -> int:
        return self._status

    @property
    def code(self) -> str:
        return self._code

    @property
    def target(self) -> str | None:
        return self._target

    @property
    def details(self) -> list[ErrorDetail] | None:
        return list(self._details) if self._details is not None else None

    @property
    def module(self) -> str | None:
        return self._module

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def internal(self) -> dict[str, Any]:
        return dict(self._internal)

    @property
    def stack(self) -> str:
        if self._origin_stack is not None:
            return self._origin_stack
        if self.__traceback__ is not None:
            return format_exception_stack(self, self._frame_markers)
        frames = [f for f in self._created_at if not _is_marked(f, self._frame_markers)]
        header = f"{type(self).__name__}: {self._message}\n"
        return (header + "".join(traceback.format_list(frames))).rstrip("\n")

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            message=self._message,
            status=self._status,
            code=self._code,
            target=self._target,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self._message!r}, status={self._status}, code={self._code!r})"


def validation_error(
    message: str,
    *,
    status: int = 400,
    code: str = VALIDATION_ERR,
    **fields: Any,
) -> StructuredError:
    return StructuredError(message, status=status, code=code, kind=ErrorKind.VALIDATION, **fields)


def authorization_error(
    message: str = "You are not authorized to perform this action",
    *,
    status: int = 401,
    code: str = AUTHORIZATION_ERR,
    **fields: Any,
) -> StructuredError:
    """Authorization failure; pass ``status=403`` for forbidden-but-authenticated."""
    return StructuredError(message, status=status, code=code, kind=ErrorKind.AUTHORIZATION, **fields)


def business_logic_error(
    message: str = "Business rule violation occurred",
    *,
    status: int = 422,
    code: str = BUSINESS_ERR,
    **fields: Any,
) -> StructuredError:
    return StructuredError(message, status=status, code=code, kind=ErrorKind.BUSINESS_LOGIC, **fields)
