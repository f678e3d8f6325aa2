from datetime import datetime, timedelta, timezone

import pytest

from brandpawa.challenges import ChallengeEnrollmentManager, PlanEntitlements, build_default_catalog
from brandpawa.db import get_engine, get_session_factory, init_db
from brandpawa.diagnostics import DiagnosticSessionManager
from brandpawa.ledger import InMemoryLedger
from brandpawa.scoring import load_default_diagnostics
from brandpawa.store import InMemoryRecordStore

FIXED_NOW = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# --- Ports ---

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def ledger(clock):
    return InMemoryLedger(clock=clock)


@pytest.fixture
def sql_session_factory():
    """Fresh in-memory SQLite database per test."""
    engine = get_engine("sqlite:///:memory:", echo=False)
    init_db(engine)
    yield get_session_factory(engine)
    engine.dispose()


# --- Managers ---

@pytest.fixture(scope="session")
def diagnostics():
    return load_default_diagnostics()


@pytest.fixture
def diagnostic_manager(store, ledger, diagnostics, clock):
    return DiagnosticSessionManager(store, ledger, definitions=diagnostics, clock=clock)


@pytest.fixture
def plans():
    """user_id -> subscription plan. Tests mutate it to grant Pro."""
    return {"pro-user": "pro", "free-user": "free"}


@pytest.fixture
def challenge_manager(store, ledger, clock, plans):
    return ChallengeEnrollmentManager(
        store,
        ledger,
        catalog=build_default_catalog(),
        entitlements=PlanEntitlements(plans.get),
        clock=clock,
        points_per_task=10,
        grace_days=1,
    )
