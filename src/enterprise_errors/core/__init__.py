from enterprise_errors.core.error import (
    ErrorDetail,
    ErrorKind,
    ErrorResponse,
    StructuredError,
    authorization_error,
    business_logic_error,
    format_exception_stack,
    validation_error,
)
from enterprise_errors.core.normalize import is_database_error, is_http_error, normalize_error
from enterprise_errors.core.request import RequestSnapshot, snapshot_request

__all__ = [
    "StructuredError",
    "ErrorKind",
    "ErrorDetail",
    "ErrorResponse",
    "validation_error",
    "authorization_error",
    "business_logic_error",
    "format_exception_stack",
    "normalize_error",
    "is_database_error",
    "is_http_error",
    "RequestSnapshot",
    "snapshot_request",
]
