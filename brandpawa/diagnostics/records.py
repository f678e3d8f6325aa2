from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..scoring.models import CategoryProfile, PillarScore, StageLabel


def percent_complete(answered: int, total: int) -> int:
    """answered / total as a whole percentage, halves rounded up."""
    if total <= 0:
        return 0
    return (answered * 200 + total) // (2 * total)


class DiagnosticProgress(BaseModel):
    """Autosaved partial attempt. Keyed by question id, one entry per question."""
    user_id: str
    diagnostic_id: str
    answers: Dict[str, int] = Field(default_factory=dict)
    # Chosen category per question, category diagnostics only
    selections: Dict[str, str] = Field(default_factory=dict)
    percent_complete: int = 0
    current_question_index: int = 0
    updated_at: datetime


class DiagnosticResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    diagnostic_id: str
    diagnostic_name: str
    total_score: int
    pillars: List[PillarScore] = Field(default_factory=list)
    stage: StageLabel
    category_profile: Optional[CategoryProfile] = None
    answers: Dict[str, int]
    selections: Dict[str, str] = Field(default_factory=dict)
    completed_at: datetime


class ScoreHistoryEntry(BaseModel):
    """Snapshot written on every finalize. Never removed by retake."""
    model_config = ConfigDict(frozen=True)

    entry_id: str
    user_id: str
    diagnostic_id: str
    total_score: int
    stage: str
    pillars: Dict[str, int] = Field(default_factory=dict)
    primary_category: Optional[str] = None
    recorded_at: datetime
