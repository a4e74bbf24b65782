from __future__ import annotations

import pytest
import pytest_asyncio

from enterprise_errors import SqlitePersistence
from tests.helpers import FakeRequest, RecordingPersistence


@pytest.fixture()
def request_obj() -> FakeRequest:
    return FakeRequest()


@pytest.fixture()
def recording_persistence() -> RecordingPersistence:
    return RecordingPersistence()


@pytest_asyncio.fixture()
async def sqlite_persistence(tmp_path):
    persistence = SqlitePersistence(database_name=str(tmp_path / "errors.db"))
    await persistence.connect()
    await persistence.migrate("error_logs")
    yield persistence
    await persistence.disconnect()
