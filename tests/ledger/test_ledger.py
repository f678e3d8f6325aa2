# tests/ledger/test_ledger.py
import pytest
from pydantic import ValidationError

from brandpawa.ledger import (
    ChallengeCompleted,
    ChallengeStarted,
    ChallengeTaskCompleted,
    InMemoryLedger,
    SqlLedger,
    TestCompleted as DiagnosticCompleted,
    parse_event,
)


# --- Events ---

def test_event_rejects_unknown_fields():
    with pytest.raises(ValidationError):
        DiagnosticCompleted(diagnostic_id="d1", diagnostic="D", score=50, stage="Emerging", colour="red")


def test_event_requires_its_fields():
    with pytest.raises(ValidationError):
        ChallengeStarted(enrollment_id="e1", challenge="Visibility Challenge")


def test_events_are_immutable():
    event = ChallengeTaskCompleted(enrollment_id="e1", challenge="C", day=1, task_title="T", points=10)
    with pytest.raises(ValidationError):
        event.points = 20


def test_points_awarded_per_event_kind():
    assert DiagnosticCompleted(diagnostic_id="d1", diagnostic="D", score=50, stage="Emerging").points_awarded == 0
    assert ChallengeTaskCompleted(enrollment_id="e1", challenge="C", day=2, task_title="T", points=10).points_awarded == 10
    completed = ChallengeCompleted(enrollment_id="e1", challenge="C", duration=7, streak=7, task_points=10, bonus_points=100)
    assert completed.points_awarded == 110


def test_parse_event_dispatches_on_event_type():
    event = parse_event({
        "event_type": "challenge_task_completed",
        "enrollment_id": "e1",
        "challenge": "C",
        "day": 3,
        "task_title": "First Signal",
        "points": 10,
    })
    assert isinstance(event, ChallengeTaskCompleted)
    assert event.day == 3


def test_parse_event_unknown_type():
    with pytest.raises(ValidationError):
        parse_event({"event_type": "badge_unlocked", "badge": "gold"})


# --- Ledger adapters ---

@pytest.fixture(params=["memory", "sql"])
def any_ledger(request, clock, sql_session_factory):
    if request.param == "memory":
        return InMemoryLedger(clock=clock)
    return SqlLedger(sql_session_factory, clock=clock)


def test_append_and_total(any_ledger, clock):
    any_ledger.append("u1", ChallengeTaskCompleted(enrollment_id="e1", challenge="C", day=1, task_title="T", points=10))
    clock.advance(days=1)
    any_ledger.append("u1", ChallengeCompleted(enrollment_id="e1", challenge="C", duration=2, streak=2, task_points=10, bonus_points=100))
    any_ledger.append("u2", ChallengeTaskCompleted(enrollment_id="e9", challenge="C", day=1, task_title="T", points=10))

    assert any_ledger.point_total("u1") == 120
    assert any_ledger.point_total("u2") == 10
    assert any_ledger.point_total("nobody") == 0


def test_entries_newest_first(any_ledger, clock):
    any_ledger.append("u1", ChallengeStarted(enrollment_id="e1", challenge_id="visibility", challenge="V", duration=7, duration_name="7-Day"))
    clock.advance(hours=1)
    entry = any_ledger.append("u1", ChallengeTaskCompleted(enrollment_id="e1", challenge="V", day=1, task_title="T", points=10))

    entries = any_ledger.entries("u1")
    assert [e.event_type for e in entries] == ["challenge_task_completed", "challenge_started"]
    assert entries[0].points == 10
    assert entries[0].event.model_dump() == entry.event.model_dump()
    assert len(any_ledger.entries("u1", limit=1)) == 1
