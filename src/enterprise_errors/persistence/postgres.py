import logging
import ssl as ssl_module
from typing import Any

import asyncpg

from enterprise_errors.exceptions import NotConnectedError
from enterprise_errors.migrations.schemas import get_migration_sql, validate_table_name
from enterprise_errors.persistence.models import ErrorRecord

logger = logging.getLogger(__name__)

_COLUMNS = ("date", "time", "message", "status", "code", "target", "details", "module", "internal", "stack")


def _build_ssl_context(ssl_config: bool | str) -> ssl_module.SSLContext | str | None:
    if isinstance(ssl_config, str):
        lower = ssl_config.lower().strip()
        if lower in ("false", "0", "no", "off", "", "disable"):
            return None
        if lower in ("true", "1", "yes", "on", "require"):
            ctx = ssl_module.create_default_context()
            ctx.check_hostname = False
            ctx.verify_mode = ssl_module.CERT_NONE
            return ctx
        return ssl_config

    if ssl_config is True:
        ctx = ssl_module.create_default_context()
        ctx.check_hostname = False
        ctx.verify_mode = ssl_module.CERT_NONE
        return ctx

    return None


class PostgresPersistence:
    def __init__(
        self,
        *,
        host: str,
        port: int,
        user: str,
        database: str,
        password: str,
        ssl: bool | str = False,
    ):
        self._host = host
        self._port = port
        self._user = user
        self._database = database
        self._password = password
        self._ssl = ssl
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool:
            return
        ssl_param = _build_ssl_context(self._ssl)
        ssl_display = self._ssl if isinstance(self._ssl, str) else ("require" if self._ssl else "disabled")
        logger.info(
            "[errors] connecting to postgresql at %s:%s/%s (user=%s, ssl=%s)",
            self._host,
            self._port,
            self._database,
            self._user,
            ssl_display,
        )
        try:
            self._pool = await asyncpg.create_pool(
                host=self._host,
                port=self._port,
                user=self._user,
                database=self._database,
                password=self._password,
                ssl=ssl_param,
                min_size=1,
                max_size=5,
                timeout=30,
                command_timeout=30,
            )
        except OSError as e:
            logger.error("[errors] cannot reach postgresql at %s:%s - %s", self._host, self._port, e)
            raise
        except asyncpg.InvalidPasswordError:
            logger.error(
                "[errors] authentication failed for user '%s' on database '%s'",
                self._user,
                self._database,
            )
            raise

    async def disconnect(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None

    async def migrate(self, table_name: str) -> None:
        if not self._pool:
            raise NotConnectedError()

        async with self._pool.acquire() as conn:
            await conn.execute(get_migration_sql("postgres", table_name))

    async def insert_error(self, table_name: str, record: ErrorRecord) -> None:
        if not self._pool:
            raise NotConnectedError()

        table = validate_table_name(table_name)
        columns = ", ".join(f'"{c}"' for c in _COLUMNS)
        placeholders = ", ".join(f"${i}" for i in range(1, len(_COLUMNS) + 1))
        async with self._pool.acquire() as conn:
            # transaction() rolls back when the insert raises
            async with conn.transaction():
                await conn.execute(
                    f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
                    *(getattr(record, c) for c in _COLUMNS),
                )

    async def list_errors(
        self,
        table_name: str,
        limit: int = 50,
        code: str | None = None,
    ) -> list[ErrorRecord]:
        if not self._pool:
            raise NotConnectedError()

        table = validate_table_name(table_name)
        params: list[Any] = []
        where = ""
        if code:
            params.append(code)
            where = f"WHERE code = ${len(params)}"
        params.append(limit)

        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT * FROM {table} {where} ORDER BY id DESC LIMIT ${len(params)}",
                *params,
            )
        return [ErrorRecord(**dict(row)) for row in rows]
