"""
Shared fixtures.

No test touches the real home directory: storage is in memory or under
pytest's tmp_path, and time comes from a FakeClock.
"""

from datetime import datetime, timedelta, timezone

import pytest

from moneypath.audit import AuditLogger
from moneypath.config import LedgerSettings
from moneypath.services.storage import InMemoryStorage
from moneypath.store import FinanceStore


STATE_KEY = "financeData"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def advance(self, **kwargs) -> None:
        self.moment += timedelta(**kwargs)

    def set(self, moment: datetime) -> None:
        self.moment = moment


@pytest.fixture
def clock():
    # Mid-day UTC so the local display date is the 15th in test timezones
    return FakeClock(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def ledger_settings():
    return LedgerSettings(
        default_categories=["Udhari", "Outside", "Useless"],
        default_roommates=["You", "Ravi"],
    )


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def store(storage, ledger_settings, clock):
    return FinanceStore(
        storage=storage,
        key=STATE_KEY,
        ledger_settings=ledger_settings,
        audit_logger=AuditLogger(),
        clock=clock,
    )
