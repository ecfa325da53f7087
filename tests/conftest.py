from datetime import datetime, timedelta, timezone

import pytest

from sanjeevani.access import (
    EmergencyAccessController,
    InMemorySnapshotProvider,
    SeparatorQRDecoder,
    StaticCredentialChecker,
)
from sanjeevani.audit import InMemoryAccessLogStore
from sanjeevani.config import get_settings


class FakeClock:
    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def credentials():
    return StaticCredentialChecker(authorized=["doc1", "doc2"])


@pytest.fixture
def snapshots():
    return InMemorySnapshotProvider({
        "PAT100": {"name": "John Doe", "bloodGroup": "O+"},
        "PAT200": {"name": "Sarah Smith", "bloodGroup": "A-"},
    })


@pytest.fixture
def log_store():
    return InMemoryAccessLogStore()


@pytest.fixture
def controller(credentials, snapshots, log_store, clock):
    return EmergencyAccessController(
        credentials,
        SeparatorQRDecoder(),
        snapshots,
        log_store,
        clock=clock,
    )
