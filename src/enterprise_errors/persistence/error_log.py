import logging

from enterprise_errors.core.error import StructuredError
from enterprise_errors.persistence.base import Persistence
from enterprise_errors.persistence.models import ErrorRecord

logger = logging.getLogger(__name__)


async def log_error(
    error: StructuredError,
    persistence: Persistence,
    table_name: str,
    *,
    log: logging.Logger | None = None,
) -> bool:
    """Write one row for ``error``; failures are logged and never raised.

    Returns True when the row was committed. A single attempt is made.
    """
    log = log or logger
    try:
        await persistence.insert_error(table_name, ErrorRecord.from_error(error))
    except Exception as e:
        log.error("[errors] failed to log error %s to %s: %s", error.code, table_name, e, exc_info=True)
        return False
    return True
