from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AnswerOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str
    points: int
    category: Optional[str] = None  # Set only on category-tallied diagnostics


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    options: List[AnswerOption]

    def option(self, value: str) -> Optional[AnswerOption]:
        for option in self.options:
            if option.value == value:
                return option
        return None

    def accepts_points(self, points: int) -> bool:
        return any(option.points == points for option in self.options)


class PillarDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    question_ids: List[str]
    max_score: int
    description: str = ""
    action_steps: List[str] = Field(default_factory=list)


class StageThreshold(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_score: int
    name: str
    display_name: str = ""
    tagline: str = ""
    diagnosis: str = ""
    next_step: str = ""


class StageLabel(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str = ""
    tagline: str = ""
    diagnosis: str = ""
    next_step: str = ""


class CategoryDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    full_name: str = ""
    hex: str = ""
    description: str = ""
    action_steps: List[str] = Field(default_factory=list)


class DiagnosticDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    questions: List[Question]
    pillars: List[PillarDefinition] = Field(default_factory=list)
    # None means the standard Dominant/Active/Emerging/Weak bands
    stages: Optional[List[StageThreshold]] = None
    categories: List[CategoryDefinition] = Field(default_factory=list)
    # "primary_secondary" category pair -> positioning label
    positioning: Dict[str, str] = Field(default_factory=dict)

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def question_ids(self) -> List[str]:
        return [q.id for q in self.questions]

    @property
    def is_category_based(self) -> bool:
        return bool(self.categories)

    def question(self, question_id: str) -> Optional[Question]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None


# --- Scoring output ---

class PillarScore(BaseModel):
    name: str
    score: int
    max_score: int
    description: str = ""
    action_steps: List[str] = Field(default_factory=list)


class CategoryProfile(BaseModel):
    scores: Dict[str, int]
    primary: str
    secondary: Optional[str] = None
    positioning: str = ""


class ScoreCard(BaseModel):
    total_score: int
    pillars: List[PillarScore] = Field(default_factory=list)
    stage: StageLabel
    category_profile: Optional[CategoryProfile] = None
