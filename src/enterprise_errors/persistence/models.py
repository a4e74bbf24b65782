from datetime import UTC, datetime

from pydantic import BaseModel

from enterprise_errors.core.encoding import to_json
from enterprise_errors.core.error import StructuredError


class ErrorRecord(BaseModel):
    """One persisted error row; nested structures are stored as JSON text."""

    id: int | None = None
    date: str
    time: str
    message: str | None = None
    status: int
    code: str
    target: str | None = None
    details: str | None = None
    module: str | None = None
    internal: str | None = None
    stack: str | None = None

    @classmethod
    def from_error(cls, error: StructuredError, now: datetime | None = None) -> "ErrorRecord":
        now = now or datetime.now(UTC)
        return cls(
            date=now.strftime("%Y-%m-%d"),
            time=now.strftime("%H:%M:%S"),
            message=error.message,
            status=error.status,
            code=error.code,
            target=error.target,
            details=to_json(error.details or []),
            module=error.module,
            internal=to_json(error.internal),
            stack=error.stack,
        )
