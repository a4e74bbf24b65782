"""Shared helpers for tests."""

from __future__ import annotations

from typing import Any

from enterprise_errors import ErrorRecord, ErrorResponse


class FakeRequest:
    """Request object exposing the fields snapshot_request reads and an error hook."""

    def __init__(
        self,
        data: Any = None,
        user: Any = None,
        event: str | None = "createOrder",
        method: str = "POST",
        url: str = "/odata/v4/orders",
    ) -> None:
        self.data = data if data is not None else {"amount": 10}
        self.user = user if user is not None else {"id": "alice"}
        self.event = event
        self.method = method
        self.url = url
        self.headers = {"x-request-id": "req-1"}
        self.errors: list[ErrorResponse] = []

    def error(self, response: ErrorResponse) -> None:
        self.errors.append(response)


class RecordingPersistence:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.rows: list[tuple[str, ErrorRecord]] = []

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    async def migrate(self, table_name: str) -> None:
        pass

    async def insert_error(self, table_name: str, record: ErrorRecord) -> None:
        if self.fail:
            raise ConnectionError("database unavailable")
        self.rows.append((table_name, record))

    async def list_errors(self, table_name: str, limit: int = 50, code: str | None = None) -> list[ErrorRecord]:
        return [r for t, r in self.rows if t == table_name and (code is None or r.code == code)][:limit]
