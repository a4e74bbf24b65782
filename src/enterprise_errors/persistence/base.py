from typing import Protocol

from enterprise_errors.persistence.models import ErrorRecord


class Persistence(Protocol):
    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def migrate(self, table_name: str) -> None: ...

    async def insert_error(self, table_name: str, record: ErrorRecord) -> None: ...

    async def list_errors(
        self,
        table_name: str,
        limit: int = 50,
        code: str | None = None,
    ) -> list[ErrorRecord]: ...
