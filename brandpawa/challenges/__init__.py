# Challenge Enrollment Manager
from .catalog import ChallengeCatalog, build_default_catalog, load_challenge_data
from .entitlements import EntitlementChecker, PlanEntitlements
from .manager import ChallengeEnrollmentManager
from .models import (
    BrandType, CompletionType, EnrollmentStatus, Task, ChallengeDuration, ChallengeDefinition,
    ChallengeEnrollment, TaskSubmission, WeeklyProgress, ChallengeStats
)
from .progress import compute_streak, active_streak, weekly_breakdown, challenge_stats, best_streak
