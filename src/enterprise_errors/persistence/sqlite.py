from typing import Any

import aiosqlite

from enterprise_errors.exceptions import NotConnectedError
from enterprise_errors.migrations.schemas import get_migration_sql, validate_table_name
from enterprise_errors.persistence.models import ErrorRecord

_COLUMNS = ("date", "time", "message", "status", "code", "target", "details", "module", "internal", "stack")


class SqlitePersistence:
    def __init__(self, *, database_name: str):
        self._database_path = database_name.replace("sqlite:///", "")
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        if self._conn:
            return
        self._conn = await aiosqlite.connect(self._database_path)
        self._conn.row_factory = aiosqlite.Row

    async def disconnect(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def migrate(self, table_name: str) -> None:
        if not self._conn:
            raise NotConnectedError()

        await self._conn.executescript(get_migration_sql("sqlite", table_name))
        await self._conn.commit()

    async def insert_error(self, table_name: str, record: ErrorRecord) -> None:
        if not self._conn:
            raise NotConnectedError()

        table = validate_table_name(table_name)
        columns = ", ".join(f'"{c}"' for c in _COLUMNS)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        try:
            await self._conn.execute(
                f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
                tuple(getattr(record, c) for c in _COLUMNS),
            )
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    async def list_errors(
        self,
        table_name: str,
        limit: int = 50,
        code: str | None = None,
    ) -> list[ErrorRecord]:
        if not self._conn:
            raise NotConnectedError()

        table = validate_table_name(table_name)
        params: list[Any] = []
        where = ""
        if code:
            where = "WHERE code = ?"
            params.append(code)
        params.append(limit)

        cursor = await self._conn.execute(
            f"SELECT * FROM {table} {where} ORDER BY id DESC LIMIT ?",
            tuple(params),
        )
        rows = await cursor.fetchall()
        return [ErrorRecord(**dict(row)) for row in rows]
