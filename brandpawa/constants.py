# brandpawa/constants.py
from enum import Enum


class EntityType(str, Enum):
    """Record kinds held in the persistence port, with their natural key layout."""
    DIAGNOSTIC_PROGRESS = "diagnostic_progress"  # (user_id, diagnostic_id)
    DIAGNOSTIC_RESULT = "diagnostic_result"      # (user_id, diagnostic_id)
    SCORE_HISTORY = "score_history"              # (user_id, diagnostic_id, entry_id)
    CHALLENGE_ENROLLMENT = "challenge_enrollment"  # (user_id, challenge_id, enrollment_id)
    TASK_SUBMISSION = "task_submission"          # (enrollment_id, day_number)


class ActivityType(str, Enum):
    TEST_COMPLETED = "test_completed"
    TEST_RETAKEN = "test_retaken"
    CHALLENGE_STARTED = "challenge_started"
    CHALLENGE_TASK_COMPLETED = "challenge_task_completed"
    CHALLENGE_COMPLETED = "challenge_completed"
    CHALLENGE_PAUSED = "challenge_paused"
    CHALLENGE_RESUMED = "challenge_resumed"
    CHALLENGE_FAILED = "challenge_failed"


# Plans that unlock Pro-gated challenges
PRO_PLANS = frozenset({"pro", "enterprise"})

DAYS_PER_WEEK = 7
