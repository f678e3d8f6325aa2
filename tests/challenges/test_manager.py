# tests/challenges/test_manager.py
from datetime import timedelta

import pytest

from brandpawa.challenges import BrandType, EnrollmentStatus
from brandpawa.constants import EntityType
from brandpawa.errors import (
    AlreadyCompleted,
    AlreadyEnrolled,
    InvalidResponse,
    InvalidTransition,
    NotEntitled,
    NotFound,
)


# --- Helper Functions ---
def complete_days(manager, user_id, enrollment, days):
    for day in days:
        enrollment = manager.complete_task(user_id, enrollment.enrollment_id, day, f"Day {day} done")
    return enrollment


# --- start_enrollment ---

def test_start_enrollment_initial_state(challenge_manager, ledger, clock):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7", BrandType.BUSINESS)

    assert enrollment.current_day == 1
    assert enrollment.completed_days == []
    assert enrollment.streak == 0
    assert enrollment.status == EnrollmentStatus.ACTIVE
    assert enrollment.brand_type == BrandType.BUSINESS
    assert enrollment.start_date == clock().date()
    assert enrollment.end_date == clock().date() + timedelta(days=7)

    entry = ledger.entries("u1")[0]
    assert entry.event_type == "challenge_started"
    assert entry.event.duration == 7
    assert entry.event.duration_name == "7-Day Activation Sprint"
    assert entry.points == 0


def test_start_enrollment_is_persisted(challenge_manager, store):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-14", "personal")
    key = ("u1", "visibility", enrollment.enrollment_id)
    assert store.get(EntityType.CHALLENGE_ENROLLMENT, key)["duration_days"] == 14
    assert challenge_manager.get_enrollment("u1", enrollment.enrollment_id).model_dump() == enrollment.model_dump()


def test_one_live_enrollment_per_challenge_any_duration(challenge_manager):
    first = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    with pytest.raises(AlreadyEnrolled) as excinfo:
        challenge_manager.start_enrollment("u1", "visibility", "visibility-30")
    assert excinfo.value.enrollment_id == first.enrollment_id

    # paused still counts as live
    challenge_manager.pause_enrollment("u1", first.enrollment_id)
    with pytest.raises(AlreadyEnrolled):
        challenge_manager.start_enrollment("u1", "visibility", "visibility-7")

    # other users are unaffected
    challenge_manager.start_enrollment("u2", "visibility", "visibility-7")


def test_new_attempt_allowed_after_completion(challenge_manager):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    complete_days(challenge_manager, "u1", enrollment, range(1, 8))
    second = challenge_manager.start_enrollment("u1", "visibility", "visibility-14")
    assert second.enrollment_id != enrollment.enrollment_id
    assert len(challenge_manager.list_enrollments("u1")) == 2
    assert len(challenge_manager.list_enrollments("u1", status=EnrollmentStatus.ACTIVE)) == 1


def test_pro_challenge_requires_entitlement(challenge_manager, store, ledger, plans):
    with pytest.raises(NotEntitled):
        challenge_manager.start_enrollment("free-user", "authority", "authority-30")
    assert len(store) == 0
    assert ledger.entries("free-user") == []

    plans["free-user"] = "enterprise"
    enrollment = challenge_manager.start_enrollment("free-user", "authority", "authority-30")
    assert enrollment.duration_days == 30


def test_pro_user_can_start_authority(challenge_manager):
    enrollment = challenge_manager.start_enrollment("pro-user", "authority", "authority-60")
    assert enrollment.end_date - enrollment.start_date == timedelta(days=60)


def test_start_unknown_challenge_or_duration(challenge_manager):
    with pytest.raises(NotFound):
        challenge_manager.start_enrollment("u1", "networking", "networking-7")
    with pytest.raises(NotFound):
        challenge_manager.start_enrollment("u1", "visibility", "visibility-21")


def test_start_rejects_unknown_brand_type(challenge_manager, ledger):
    with pytest.raises(InvalidResponse) as excinfo:
        challenge_manager.start_enrollment("u1", "visibility", "visibility-7", "agency")
    assert "agency" in str(excinfo.value)
    assert challenge_manager.list_enrollments("u1") == []
    assert ledger.entries("u1") == []


# --- complete_task ---

def test_complete_current_day_advances_pointer(challenge_manager, ledger):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    enrollment = challenge_manager.complete_task("u1", enrollment.enrollment_id, 1, "  Known for clarity  ")

    assert enrollment.current_day == 2
    assert enrollment.completed_days == [1]
    assert enrollment.streak == 1
    assert enrollment.last_activity_date is not None

    submissions = challenge_manager.submissions(enrollment.enrollment_id)
    assert len(submissions) == 1
    assert submissions[0].response == "Known for clarity"
    assert submissions[0].task_title == "Visibility Reset"

    entry = ledger.entries("u1")[0]
    assert entry.event_type == "challenge_task_completed"
    assert entry.event.day == 1
    assert entry.points == 10


def test_complete_same_day_twice_rejected(challenge_manager):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    complete_days(challenge_manager, "u1", enrollment, [1, 2])
    with pytest.raises(AlreadyCompleted):
        challenge_manager.complete_task("u1", enrollment.enrollment_id, 2, "again")
    assert challenge_manager.get_enrollment("u1", enrollment.enrollment_id).completed_days == [1, 2]


def test_skipping_ahead_does_not_move_pointer(challenge_manager):
    """Thirty-day run: days 1-7 in order, then day 10 directly."""
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-30")
    enrollment = complete_days(challenge_manager, "u1", enrollment, range(1, 8))
    assert enrollment.current_day == 8

    enrollment = challenge_manager.complete_task("u1", enrollment.enrollment_id, 10, "jumped ahead")
    assert enrollment.current_day == 8
    assert enrollment.completed_days == [1, 2, 3, 4, 5, 6, 7, 10]
    assert enrollment.streak == 7

    enrollment = challenge_manager.complete_task("u1", enrollment.enrollment_id, 8, "back on track")
    assert enrollment.current_day == 9
    assert enrollment.streak == 8


def test_text_task_requires_response(challenge_manager):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    for response in (None, "", "   "):
        with pytest.raises(InvalidResponse):
            challenge_manager.complete_task("u1", enrollment.enrollment_id, 1, response)
    assert challenge_manager.get_enrollment("u1", enrollment.enrollment_id).completed_days == []
    assert challenge_manager.submissions(enrollment.enrollment_id) == []


def test_day_without_task(challenge_manager):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    with pytest.raises(NotFound):
        challenge_manager.complete_task("u1", enrollment.enrollment_id, 8, "extra")


def test_unknown_enrollment(challenge_manager):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    with pytest.raises(NotFound):
        challenge_manager.complete_task("u2", enrollment.enrollment_id, 1, "not mine")


def test_final_day_completes_and_awards_bonus(challenge_manager, ledger, clock):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    enrollment = complete_days(challenge_manager, "u1", enrollment, range(1, 8))

    assert enrollment.status == EnrollmentStatus.COMPLETED
    assert enrollment.completed_at == clock()
    assert enrollment.current_day == 8
    assert enrollment.streak == 7

    entry = ledger.entries("u1")[0]
    assert entry.event_type == "challenge_completed"
    assert entry.event.bonus_points == 100
    assert entry.event.task_points == 10
    assert ledger.point_total("u1") == 7 * 10 + 100

    with pytest.raises(InvalidTransition):
        challenge_manager.complete_task("u1", enrollment.enrollment_id, 1, "late")


def test_final_day_number_completes_even_with_gaps(challenge_manager):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    enrollment = complete_days(challenge_manager, "u1", enrollment, [1, 7])
    assert enrollment.status == EnrollmentStatus.COMPLETED
    assert enrollment.current_day == 2


def test_pro_challenge_reward(challenge_manager, ledger):
    enrollment = challenge_manager.start_enrollment("pro-user", "authority", "authority-30")
    complete_days(challenge_manager, "pro-user", enrollment, range(1, 31))
    assert ledger.entries("pro-user")[0].event.bonus_points == 250
    assert ledger.point_total("pro-user") == 30 * 10 + 250


# --- pause / resume / fail ---

def test_pause_and_resume(challenge_manager, ledger):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    paused = challenge_manager.pause_enrollment("u1", enrollment.enrollment_id)
    assert paused.status == EnrollmentStatus.PAUSED
    assert ledger.entries("u1")[0].event_type == "challenge_paused"

    with pytest.raises(InvalidTransition):
        challenge_manager.complete_task("u1", enrollment.enrollment_id, 1, "while paused")
    with pytest.raises(InvalidTransition):
        challenge_manager.pause_enrollment("u1", enrollment.enrollment_id)

    resumed = challenge_manager.resume_enrollment("u1", enrollment.enrollment_id)
    assert resumed.status == EnrollmentStatus.ACTIVE
    assert ledger.entries("u1")[0].event_type == "challenge_resumed"
    assert challenge_manager.complete_task("u1", enrollment.enrollment_id, 1, "back").current_day == 2


def test_resume_requires_paused(challenge_manager):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    with pytest.raises(InvalidTransition):
        challenge_manager.resume_enrollment("u1", enrollment.enrollment_id)


def test_fail_is_terminal(challenge_manager, ledger):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    failed = challenge_manager.fail_enrollment("u1", enrollment.enrollment_id)
    assert failed.status == EnrollmentStatus.FAILED
    assert ledger.entries("u1")[0].event_type == "challenge_failed"

    for transition in (challenge_manager.fail_enrollment, challenge_manager.pause_enrollment, challenge_manager.resume_enrollment):
        with pytest.raises(InvalidTransition):
            transition("u1", enrollment.enrollment_id)

    # a failed attempt does not block a new one
    challenge_manager.start_enrollment("u1", "visibility", "visibility-7")


def test_fail_lapsed_enrollments(challenge_manager, clock):
    short = challenge_manager.start_enrollment("pro-user", "visibility", "visibility-7")
    longer = challenge_manager.start_enrollment("pro-user", "authority", "authority-30")

    clock.advance(days=7)
    assert challenge_manager.fail_lapsed_enrollments("pro-user") == []

    clock.advance(days=1)
    failed = challenge_manager.fail_lapsed_enrollments("pro-user")
    assert [e.enrollment_id for e in failed] == [short.enrollment_id]
    assert challenge_manager.get_enrollment("pro-user", longer.enrollment_id).status == EnrollmentStatus.ACTIVE


# --- reporting ---

def test_stats_and_weekly_progress(challenge_manager, clock):
    enrollment = challenge_manager.start_enrollment("u1", "visibility", "visibility-14")
    complete_days(challenge_manager, "u1", enrollment, [1, 2, 3, 9])

    stats = challenge_manager.stats("u1", enrollment.enrollment_id)
    assert stats.total_tasks == 14
    assert stats.completed_tasks == 4
    assert stats.longest_streak == 3
    assert stats.current_streak == 3
    assert stats.points_earned == 40
    assert stats.days_remaining == 14

    clock.advance(days=3)
    assert challenge_manager.stats("u1", enrollment.enrollment_id).current_streak == 0

    weeks = challenge_manager.weekly_progress("u1", enrollment.enrollment_id)
    assert [(w.completed, w.total, w.points) for w in weeks] == [(3, 7, 30), (1, 7, 10)]


def test_best_streak_over_all_enrollments(challenge_manager):
    assert challenge_manager.best_streak("u1") == 0
    first = challenge_manager.start_enrollment("u1", "visibility", "visibility-7")
    complete_days(challenge_manager, "u1", first, range(1, 8))
    second = challenge_manager.start_enrollment("u1", "visibility", "visibility-30")
    complete_days(challenge_manager, "u1", second, [1, 2])
    assert challenge_manager.best_streak("u1") == 7
