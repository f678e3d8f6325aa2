# brandpawa/challenges/manager.py
# Lifecycle of challenge enrollments: start, daily completion, pause/resume, failure.

import logging
import uuid
from datetime import date, timedelta
from typing import List, Optional, Union

from ..constants import EntityType
from ..core.clock import Clock, utc_now
from ..core.config import settings
from ..errors import (
    AlreadyCompleted,
    AlreadyEnrolled,
    InvalidResponse,
    InvalidTransition,
    NotEntitled,
    NotFound,
)
from ..ledger import (
    ChallengeCompleted,
    ChallengeFailed,
    ChallengePaused,
    ChallengeResumed,
    ChallengeStarted,
    ChallengeTaskCompleted,
    Ledger,
)
from ..store.base import RecordStore
from .catalog import ChallengeCatalog, build_default_catalog
from .entitlements import EntitlementChecker
from .models import (
    BrandType,
    ChallengeEnrollment,
    ChallengeStats,
    EnrollmentStatus,
    TaskSubmission,
    WeeklyProgress,
)
from .progress import best_streak, challenge_stats, compute_streak, weekly_breakdown

logger = logging.getLogger(__name__)


class ChallengeEnrollmentManager:
    """
    Drives challenge enrollments against the record store and ledger.

    Each operation loads the enrollment fresh, applies one transition and
    writes it back. Enrollments are keyed (user_id, challenge_id, enrollment_id).
    """

    def __init__(
        self,
        store: RecordStore,
        ledger: Ledger,
        catalog: Optional[ChallengeCatalog] = None,
        entitlements: Optional[EntitlementChecker] = None,
        clock: Optional[Clock] = None,
        points_per_task: Optional[int] = None,
        grace_days: Optional[int] = None,
    ):
        self._store = store
        self._ledger = ledger
        self._catalog = catalog or build_default_catalog()
        self._entitlements = entitlements
        self._clock = clock or utc_now
        self.points_per_task = settings.points_per_task if points_per_task is None else points_per_task
        self.grace_days = settings.streak_grace_days if grace_days is None else grace_days

    @property
    def catalog(self) -> ChallengeCatalog:
        return self._catalog

    def reward_points(self, challenge_id: str) -> int:
        reward = self._catalog.get(challenge_id).reward_points
        return settings.default_reward_points if reward is None else reward

    # --- Lookups ---

    def list_enrollments(
        self, user_id: str, status: Optional[EnrollmentStatus] = None
    ) -> List[ChallengeEnrollment]:
        """Oldest first."""
        records = self._store.list_by_key(EntityType.CHALLENGE_ENROLLMENT, (user_id,), order_by="created_at")
        enrollments = [ChallengeEnrollment.model_validate(record) for record in records]
        if status is not None:
            enrollments = [e for e in enrollments if e.status == status]
        return enrollments

    def get_enrollment(self, user_id: str, enrollment_id: str) -> ChallengeEnrollment:
        for enrollment in self.list_enrollments(user_id):
            if enrollment.enrollment_id == enrollment_id:
                return enrollment
        raise NotFound(f"Enrollment '{enrollment_id}' not found for user '{user_id}'")

    def submissions(self, enrollment_id: str) -> List[TaskSubmission]:
        records = self._store.list_by_key(EntityType.TASK_SUBMISSION, (enrollment_id,), order_by="day_number")
        return [TaskSubmission.model_validate(record) for record in records]

    # --- Transitions ---

    def start_enrollment(
        self,
        user_id: str,
        challenge_id: str,
        duration_id: str,
        brand_type: Union[BrandType, str] = BrandType.PERSONAL,
    ) -> ChallengeEnrollment:
        """
        Enrolls the user in one duration of a challenge.

        At most one active or paused enrollment may exist per (user, challenge),
        whatever its duration. Pro challenges are checked before anything is
        written.
        """
        challenge = self._catalog.get(challenge_id)
        duration = self._catalog.duration(challenge_id, duration_id)
        try:
            brand_type = BrandType(brand_type)
        except ValueError as e:
            raise InvalidResponse(
                f"Unknown brand type '{brand_type}'; expected one of {[b.value for b in BrandType]}"
            ) from e

        if challenge.is_pro and (
            self._entitlements is None or not self._entitlements.is_entitled(user_id, challenge_id)
        ):
            logger.warning(f"User '{user_id}' is not entitled to Pro challenge '{challenge_id}'")
            raise NotEntitled(user_id, challenge_id)

        for existing in self.list_enrollments(user_id):
            if existing.challenge_id == challenge_id and existing.is_live:
                logger.warning(
                    f"User '{user_id}' already has {existing.status.value} enrollment "
                    f"'{existing.enrollment_id}' in '{challenge_id}'"
                )
                raise AlreadyEnrolled(user_id, challenge_id, existing.enrollment_id)

        now = self._clock()
        start_date = now.date()
        enrollment = ChallengeEnrollment(
            enrollment_id=uuid.uuid4().hex,
            user_id=user_id,
            challenge_id=challenge_id,
            duration_id=duration.id,
            duration_days=duration.duration_days,
            brand_type=brand_type,
            start_date=start_date,
            end_date=start_date + timedelta(days=duration.duration_days),
            created_at=now,
            updated_at=now,
        )
        self._save(enrollment)
        self._ledger.append(user_id, ChallengeStarted(
            enrollment_id=enrollment.enrollment_id,
            challenge_id=challenge_id,
            challenge=challenge.name,
            duration=duration.duration_days,
            duration_name=duration.name,
        ))
        logger.info(f"User '{user_id}' started '{challenge_id}' ({duration.name}) as {enrollment.enrollment_id}")
        return enrollment

    def complete_task(
        self,
        user_id: str,
        enrollment_id: str,
        day_number: int,
        user_response: Optional[str] = None,
    ) -> ChallengeEnrollment:
        """
        Marks one day done. Each day can be completed once.

        The day pointer only advances when the current day is completed;
        finishing another day leaves it where it is. Completing the final day
        completes the enrollment and awards the challenge reward.
        """
        enrollment = self.get_enrollment(user_id, enrollment_id)
        if enrollment.status != EnrollmentStatus.ACTIVE:
            raise InvalidTransition(
                f"Enrollment '{enrollment_id}' is {enrollment.status.value}; only active enrollments accept tasks"
            )
        if day_number in enrollment.completed_days:
            logger.warning(f"Day {day_number} of enrollment '{enrollment_id}' was already completed")
            raise AlreadyCompleted(f"Day {day_number} of enrollment '{enrollment_id}' is already completed")

        challenge = self._catalog.get(enrollment.challenge_id)
        duration = self._catalog.duration(enrollment.challenge_id, enrollment.duration_id)
        task = duration.task(day_number)
        if task is None:
            raise NotFound(f"No task for day {day_number} in '{duration.id}'")

        response = user_response.strip() if user_response else None
        if task.requires_text and not response:
            raise InvalidResponse(f"Day {day_number} ('{task.title}') requires a written response")

        now = self._clock()
        submission = TaskSubmission(
            enrollment_id=enrollment_id,
            user_id=user_id,
            day_number=day_number,
            task_title=task.title,
            response=response,
            points=self.points_per_task,
            submitted_at=now,
        )
        self._store.upsert(
            EntityType.TASK_SUBMISSION, (enrollment_id, str(day_number)), submission.model_dump(mode="json")
        )

        completed_days = sorted(set(enrollment.completed_days) | {day_number})
        update = {
            "completed_days": completed_days,
            "streak": compute_streak(completed_days),
            "last_activity_date": now.date(),
            "updated_at": now,
        }
        if day_number == enrollment.current_day:
            update["current_day"] = day_number + 1

        finished = day_number == enrollment.duration_days
        if finished:
            update["status"] = EnrollmentStatus.COMPLETED
            update["completed_at"] = now
        enrollment = enrollment.model_copy(update=update)
        self._save(enrollment)

        if finished:
            bonus = self.reward_points(challenge.id)
            self._ledger.append(user_id, ChallengeCompleted(
                enrollment_id=enrollment_id,
                challenge=challenge.name,
                duration=enrollment.duration_days,
                streak=enrollment.streak,
                task_points=self.points_per_task,
                bonus_points=bonus,
            ))
            logger.info(f"User '{user_id}' completed '{challenge.id}' enrollment {enrollment_id} (+{bonus} bonus)")
        else:
            self._ledger.append(user_id, ChallengeTaskCompleted(
                enrollment_id=enrollment_id,
                challenge=challenge.name,
                day=day_number,
                task_title=task.title,
                points=self.points_per_task,
            ))
            logger.info(f"User '{user_id}' completed day {day_number} of enrollment {enrollment_id}")
        return enrollment

    def pause_enrollment(self, user_id: str, enrollment_id: str) -> ChallengeEnrollment:
        enrollment = self._transition(
            user_id, enrollment_id, EnrollmentStatus.PAUSED, allowed_from={EnrollmentStatus.ACTIVE}
        )
        self._ledger.append(user_id, ChallengePaused(
            enrollment_id=enrollment_id, challenge=self._catalog.get(enrollment.challenge_id).name
        ))
        return enrollment

    def resume_enrollment(self, user_id: str, enrollment_id: str) -> ChallengeEnrollment:
        enrollment = self._transition(
            user_id, enrollment_id, EnrollmentStatus.ACTIVE, allowed_from={EnrollmentStatus.PAUSED}
        )
        self._ledger.append(user_id, ChallengeResumed(
            enrollment_id=enrollment_id, challenge=self._catalog.get(enrollment.challenge_id).name
        ))
        return enrollment

    def fail_enrollment(self, user_id: str, enrollment_id: str) -> ChallengeEnrollment:
        """Hook for an external lapse decision. Completed and failed enrollments are terminal."""
        enrollment = self._transition(
            user_id,
            enrollment_id,
            EnrollmentStatus.FAILED,
            allowed_from={EnrollmentStatus.ACTIVE, EnrollmentStatus.PAUSED},
        )
        self._ledger.append(user_id, ChallengeFailed(
            enrollment_id=enrollment_id, challenge=self._catalog.get(enrollment.challenge_id).name
        ))
        return enrollment

    def fail_lapsed_enrollments(self, user_id: str, today: Optional[date] = None) -> List[ChallengeEnrollment]:
        """Fails every active enrollment whose end date is before `today`."""
        today = today or self._clock().date()
        failed = []
        for enrollment in self.list_enrollments(user_id, status=EnrollmentStatus.ACTIVE):
            if enrollment.end_date < today:
                failed.append(self.fail_enrollment(user_id, enrollment.enrollment_id))
        return failed

    # --- Reporting ---

    def stats(self, user_id: str, enrollment_id: str, today: Optional[date] = None) -> ChallengeStats:
        enrollment = self.get_enrollment(user_id, enrollment_id)
        duration = self._catalog.duration(enrollment.challenge_id, enrollment.duration_id)
        return challenge_stats(
            enrollment,
            duration.tasks,
            reward_points=self.reward_points(enrollment.challenge_id),
            today=today or self._clock().date(),
            points_per_task=self.points_per_task,
            grace_days=self.grace_days,
        )

    def weekly_progress(self, user_id: str, enrollment_id: str) -> List[WeeklyProgress]:
        enrollment = self.get_enrollment(user_id, enrollment_id)
        duration = self._catalog.duration(enrollment.challenge_id, enrollment.duration_id)
        return weekly_breakdown(
            enrollment, duration.tasks, total_days=duration.duration_days, points_per_task=self.points_per_task
        )

    def best_streak(self, user_id: str) -> int:
        return best_streak(self.list_enrollments(user_id))

    # --- Helpers ---

    def _transition(self, user_id, enrollment_id, target, allowed_from) -> ChallengeEnrollment:
        enrollment = self.get_enrollment(user_id, enrollment_id)
        if enrollment.status not in allowed_from:
            raise InvalidTransition(
                f"Cannot move enrollment '{enrollment_id}' from {enrollment.status.value} to {target.value}"
            )
        enrollment = enrollment.model_copy(update={"status": target, "updated_at": self._clock()})
        self._save(enrollment)
        logger.info(f"Enrollment '{enrollment_id}' for user '{user_id}' is now {target.value}")
        return enrollment

    def _save(self, enrollment: ChallengeEnrollment) -> None:
        self._store.upsert(
            EntityType.CHALLENGE_ENROLLMENT,
            (enrollment.user_id, enrollment.challenge_id, enrollment.enrollment_id),
            enrollment.model_dump(mode="json"),
        )
