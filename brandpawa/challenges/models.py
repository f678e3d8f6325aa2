from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BrandType(str, Enum):
    PERSONAL = "personal"
    BUSINESS = "business"


class CompletionType(str, Enum):
    TEXT_INPUT = "text_input"    # a written response is required
    ACKNOWLEDGE = "acknowledge"  # marking the day done is enough


class EnrollmentStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"


LIVE_STATUSES = frozenset({EnrollmentStatus.ACTIVE, EnrollmentStatus.PAUSED})


# --- Definitions ---

class Task(BaseModel):
    model_config = ConfigDict(frozen=True)

    day_number: int = Field(ge=1)
    title: str
    focus: str = ""
    why_it_matters: str = ""
    description: str = ""
    personal_variant: str = ""
    business_variant: str = ""
    completion_type: CompletionType = CompletionType.TEXT_INPUT
    optional: bool = False

    @property
    def requires_text(self) -> bool:
        return self.completion_type == CompletionType.TEXT_INPUT

    def content_for(self, brand_type: BrandType) -> str:
        """Brand-specific task text, falling back to the generic description."""
        variant = self.personal_variant if brand_type == BrandType.PERSONAL else self.business_variant
        return variant or self.description


class ChallengeDuration(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    duration_days: int = Field(ge=1)
    name: str
    description: str = ""
    tasks: List[Task] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_task_days(self) -> "ChallengeDuration":
        seen = set()
        for task in self.tasks:
            if task.day_number > self.duration_days:
                raise ValueError(
                    f"Task day {task.day_number} is outside the {self.duration_days}-day duration '{self.id}'"
                )
            if task.day_number in seen:
                raise ValueError(f"Duplicate task day {task.day_number} in duration '{self.id}'")
            seen.add(task.day_number)
        return self

    def task(self, day_number: int) -> Optional[Task]:
        for task in self.tasks:
            if task.day_number == day_number:
                return task
        return None

    @property
    def ordered_tasks(self) -> List[Task]:
        return sorted(self.tasks, key=lambda task: task.day_number)


class ChallengeDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    category: str = ""
    difficulty: str = ""
    daily_minutes: int = 0
    is_pro: bool = False
    # None falls back to the configured default reward
    reward_points: Optional[int] = None
    durations: List[ChallengeDuration] = Field(default_factory=list)

    def duration(self, duration_id: str) -> Optional[ChallengeDuration]:
        for duration in self.durations:
            if duration.id == duration_id:
                return duration
        return None


# --- Per-user records ---

class ChallengeEnrollment(BaseModel):
    enrollment_id: str
    user_id: str
    challenge_id: str
    duration_id: str
    duration_days: int
    brand_type: BrandType = BrandType.PERSONAL
    start_date: date
    end_date: date
    current_day: int = 1
    completed_days: List[int] = Field(default_factory=list)
    streak: int = 0
    status: EnrollmentStatus = EnrollmentStatus.ACTIVE
    last_activity_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @property
    def is_live(self) -> bool:
        return self.status in LIVE_STATUSES


class TaskSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    enrollment_id: str
    user_id: str
    day_number: int
    task_title: str
    response: Optional[str] = None
    points: int
    submitted_at: datetime


class WeeklyProgress(BaseModel):
    week: int
    completed: int
    total: int
    points: int


class ChallengeStats(BaseModel):
    total_tasks: int
    completed_tasks: int
    completion_rate: int
    longest_streak: int
    current_streak: int
    points_earned: int
    days_remaining: int
    start_date: date
    estimated_end_date: date
