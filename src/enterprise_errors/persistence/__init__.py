from enterprise_errors.persistence.base import Persistence
from enterprise_errors.persistence.error_log import log_error
from enterprise_errors.persistence.models import ErrorRecord
from enterprise_errors.persistence.postgres import PostgresPersistence
from enterprise_errors.persistence.sqlite import SqlitePersistence

__all__ = [
    "Persistence",
    "ErrorRecord",
    "log_error",
    "SqlitePersistence",
    "PostgresPersistence",
]
