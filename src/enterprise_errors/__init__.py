from enterprise_errors.config import ErrorServiceConfig
from enterprise_errors.core import (
    ErrorDetail,
    ErrorKind,
    ErrorResponse,
    RequestSnapshot,
    StructuredError,
    authorization_error,
    business_logic_error,
    normalize_error,
    snapshot_request,
    validation_error,
)
from enterprise_errors.exceptions import ConfigurationError, NotConnectedError
from enterprise_errors.handlers import handle_errors, report_to_request
from enterprise_errors.notify import (
    EmailMessage,
    HttpEmailTransport,
    build_error_email_body,
    create_email_notifier,
)
from enterprise_errors.persistence import (
    ErrorRecord,
    Persistence,
    PostgresPersistence,
    SqlitePersistence,
    log_error,
)
from enterprise_errors.service import ErrorService

__all__ = [
    # Core
    "StructuredError",
    "ErrorKind",
    "ErrorDetail",
    "ErrorResponse",
    "normalize_error",
    "RequestSnapshot",
    "snapshot_request",
    # Error types
    "validation_error",
    "authorization_error",
    "business_logic_error",
    # Handler wrapping
    "handle_errors",
    "report_to_request",
    # Persistence
    "Persistence",
    "ErrorRecord",
    "log_error",
    "SqlitePersistence",
    "PostgresPersistence",
    # Notification
    "EmailMessage",
    "create_email_notifier",
    "build_error_email_body",
    "HttpEmailTransport",
    # Service
    "ErrorService",
    "ErrorServiceConfig",
    # Exceptions
    "ConfigurationError",
    "NotConnectedError",
]
