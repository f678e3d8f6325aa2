# brandpawa/challenges/progress.py
# Pure progress arithmetic over enrollments: streaks, weekly windows, stats.

import math
from datetime import date
from typing import Iterable, List, Optional, Sequence

from ..constants import DAYS_PER_WEEK
from ..core.config import settings
from .models import ChallengeEnrollment, ChallengeStats, EnrollmentStatus, Task, WeeklyProgress


def compute_streak(completed_days: Iterable[int]) -> int:
    """
    Length of the longest run of consecutive day numbers.

    This is not a "current as of today" streak; see active_streak for that.
    """
    days = sorted(set(completed_days))
    if not days:
        return 0
    longest = run = 1
    for previous, day in zip(days, days[1:]):
        run = run + 1 if day == previous + 1 else 1
        longest = max(longest, run)
    return longest


def active_streak(enrollment: ChallengeEnrollment, today: date, grace_days: Optional[int] = None) -> int:
    """The stored streak if the latest completion is within `grace_days` of today, else 0."""
    grace_days = settings.streak_grace_days if grace_days is None else grace_days
    if enrollment.last_activity_date is None:
        return 0
    if (today - enrollment.last_activity_date).days > grace_days:
        return 0
    return enrollment.streak


def weekly_breakdown(
    enrollment: ChallengeEnrollment,
    tasks: Sequence[Task],
    total_days: Optional[int] = None,
    points_per_task: Optional[int] = None,
) -> List[WeeklyProgress]:
    """Splits the tasks into 7-day windows and tallies completions per window."""
    total_days = total_days or enrollment.duration_days
    points_per_task = settings.points_per_task if points_per_task is None else points_per_task
    completed = set(enrollment.completed_days)

    weeks = []
    for week in range(1, math.ceil(total_days / DAYS_PER_WEEK) + 1):
        first_day = (week - 1) * DAYS_PER_WEEK + 1
        last_day = min(week * DAYS_PER_WEEK, total_days)
        window = [task for task in tasks if first_day <= task.day_number <= last_day]
        done = len([task for task in window if task.day_number in completed])
        weeks.append(WeeklyProgress(week=week, completed=done, total=len(window), points=done * points_per_task))
    return weeks


def challenge_stats(
    enrollment: ChallengeEnrollment,
    tasks: Sequence[Task],
    reward_points: int,
    today: date,
    points_per_task: Optional[int] = None,
    grace_days: Optional[int] = None,
) -> ChallengeStats:
    points_per_task = settings.points_per_task if points_per_task is None else points_per_task
    completed_count = len(enrollment.completed_days)
    total_tasks = len(tasks)
    completion_rate = (completed_count * 200 + total_tasks) // (2 * total_tasks) if total_tasks else 0

    is_completed = enrollment.status == EnrollmentStatus.COMPLETED
    points_earned = completed_count * points_per_task
    if is_completed:
        points_earned += reward_points

    if is_completed and enrollment.completed_at is not None:
        estimated_end = enrollment.completed_at.date()
    else:
        estimated_end = enrollment.end_date
    days_remaining = 0 if is_completed else max(0, (estimated_end - today).days)

    return ChallengeStats(
        total_tasks=total_tasks,
        completed_tasks=completed_count,
        completion_rate=completion_rate,
        longest_streak=compute_streak(enrollment.completed_days),
        current_streak=active_streak(enrollment, today, grace_days),
        points_earned=points_earned,
        days_remaining=days_remaining,
        start_date=enrollment.start_date,
        estimated_end_date=estimated_end,
    )


def best_streak(enrollments: Iterable[ChallengeEnrollment]) -> int:
    """Longest streak across all of a user's enrollments; 0 when there are none."""
    return max((compute_streak(e.completed_days) for e in enrollments), default=0)
