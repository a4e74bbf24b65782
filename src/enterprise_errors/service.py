from __future__ import annotations

import asyncio
import logging
from typing import Any

from enterprise_errors.config import ErrorServiceConfig
from enterprise_errors.core.error import StructuredError
from enterprise_errors.handlers.wrapper import Handler, handle_errors
from enterprise_errors.notify.email import BodyBuilder, Notifier, SendEmail, create_email_notifier
from enterprise_errors.persistence.base import Persistence
from enterprise_errors.persistence.error_log import log_error
from enterprise_errors.persistence.models import ErrorRecord
from enterprise_errors.persistence.postgres import PostgresPersistence
from enterprise_errors.persistence.sqlite import SqlitePersistence

logger = logging.getLogger(__name__)


class ErrorService:
    """Assembles persistence, alerting and handler wrapping from one config.

    The configuration is read once here; every wrapped handler shares it
    read-only. The database connection is opened lazily on the first write,
    so building the service at import time is safe.
    """

    def __init__(
        self,
        config: ErrorServiceConfig | None = None,
        *,
        send_email: SendEmail | None = None,
        body_builder: BodyBuilder | None = None,
        persistence: Persistence | None = None,
    ):
        self._config = config or ErrorServiceConfig()
        self._persistence: Persistence | None = persistence
        self._connected = False
        self._initialized = False
        self._init_lock = asyncio.Lock()
        self._notifier: Notifier = create_email_notifier(
            send_email=send_email,
            body_builder=body_builder,
            to=self._config.mail_to,
            cc=self._config.mail_cc,
        )

    @property
    def config(self) -> ErrorServiceConfig:
        return self._config

    @property
    def persistence_enabled(self) -> bool:
        return self._persistence is not None or self._config.database_type is not None

    def _build_persistence(self) -> Persistence:
        if self._config.database_type == "sqlite":
            return SqlitePersistence(database_name=self._config.database_name)
        return PostgresPersistence(
            host=self._config.database_host,
            port=self._config.database_port,
            user=self._config.database_user,
            database=self._config.database_name,
            password=self._config.database_password,
            ssl=self._config.database_ssl,
        )

    async def _ensure_initialized(self) -> Persistence:
        async with self._init_lock:
            if self._persistence and self._initialized:
                return self._persistence

            if self._persistence is None:
                self._persistence = self._build_persistence()

            # A failed migration is retried on the next call without reconnecting
            if not self._connected:
                await self._persistence.connect()
                self._connected = True
            if self._config.auto_migrate:
                await self._persistence.migrate(self._config.table_name)
            self._initialized = True
            logger.info("[errors] error log ready (table=%s)", self._config.table_name)
            return self._persistence

    # Persistence protocol, so wrapped handlers can write through the service
    async def connect(self) -> None:
        await self._ensure_initialized()

    async def disconnect(self) -> None:
        await self.close()

    async def migrate(self, table_name: str) -> None:
        persistence = await self._ensure_initialized()
        await persistence.migrate(table_name)

    async def insert_error(self, table_name: str, record: ErrorRecord) -> None:
        persistence = await self._ensure_initialized()
        await persistence.insert_error(table_name, record)

    async def list_errors(self, table_name: str | None = None, limit: int = 50, code: str | None = None) -> list[ErrorRecord]:
        persistence = await self._ensure_initialized()
        return await persistence.list_errors(table_name or self._config.table_name, limit, code)

    async def log_error(self, error: StructuredError) -> bool:
        if not self.persistence_enabled:
            return False
        return await log_error(error, self, self._config.table_name)

    async def notify(self, error: StructuredError) -> None:
        await self._notifier(self._config.environment, error)

    def handle_errors(self, fn: Handler | None = None, **overrides: Any) -> Any:
        """Wrap ``fn`` with this service's module, environment, table and notifier.

        Any ``handle_errors`` keyword may be overridden per handler.
        """
        options: dict[str, Any] = {
            "notify": self._notifier,
            "persistence": self if self.persistence_enabled else None,
            "table_name": self._config.table_name,
            "module": self._config.module,
            "env": self._config.environment,
            "frame_markers": self._config.frame_markers,
        }
        options.update(overrides)
        return handle_errors(fn, **options)

    async def close(self) -> None:
        if self._persistence and self._connected:
            await self._persistence.disconnect()
        self._connected = False
        self._initialized = False
