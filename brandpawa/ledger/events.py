# brandpawa/ledger/events.py
# Ledger event kinds. Each kind carries a fixed field set checked on construction.

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def points_awarded(self) -> int:
        return 0


# --- Diagnostic events ---

class TestCompleted(_Event):
    event_type: Literal["test_completed"] = "test_completed"
    diagnostic_id: str
    diagnostic: str
    score: int
    stage: str


class TestRetaken(_Event):
    event_type: Literal["test_retaken"] = "test_retaken"
    diagnostic_id: str
    diagnostic: str


# --- Challenge events ---

class ChallengeStarted(_Event):
    event_type: Literal["challenge_started"] = "challenge_started"
    enrollment_id: str
    challenge_id: str
    challenge: str
    duration: int
    duration_name: str


class ChallengeTaskCompleted(_Event):
    event_type: Literal["challenge_task_completed"] = "challenge_task_completed"
    enrollment_id: str
    challenge: str
    day: int = Field(ge=1)
    task_title: str
    points: int = Field(ge=0)

    @property
    def points_awarded(self) -> int:
        return self.points


class ChallengeCompleted(_Event):
    event_type: Literal["challenge_completed"] = "challenge_completed"
    enrollment_id: str
    challenge: str
    duration: int
    streak: int
    task_points: int = Field(ge=0)   # final day's task points
    bonus_points: int = Field(ge=0)  # flat completion reward

    @property
    def points_awarded(self) -> int:
        return self.task_points + self.bonus_points


class ChallengePaused(_Event):
    event_type: Literal["challenge_paused"] = "challenge_paused"
    enrollment_id: str
    challenge: str


class ChallengeResumed(_Event):
    event_type: Literal["challenge_resumed"] = "challenge_resumed"
    enrollment_id: str
    challenge: str


class ChallengeFailed(_Event):
    event_type: Literal["challenge_failed"] = "challenge_failed"
    enrollment_id: str
    challenge: str


LedgerEvent = Annotated[
    Union[
        TestCompleted,
        TestRetaken,
        ChallengeStarted,
        ChallengeTaskCompleted,
        ChallengeCompleted,
        ChallengePaused,
        ChallengeResumed,
        ChallengeFailed,
    ],
    Field(discriminator="event_type"),
]

_event_adapter = TypeAdapter(LedgerEvent)


def parse_event(data: dict) -> LedgerEvent:
    """Rebuilds the typed event from its stored dict form."""
    return _event_adapter.validate_python(data)
