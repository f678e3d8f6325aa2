# Scoring engine: definitions, pure scoring functions and YAML loading
from .models import (
    AnswerOption, Question, PillarDefinition, StageThreshold, StageLabel,
    CategoryDefinition, DiagnosticDefinition, PillarScore, CategoryProfile, ScoreCard
)
from .scorer import (
    compute_total_score, compute_pillar_scores, classify_stage,
    compute_category_scores, compute_category_profile, score_diagnostic
)
from .loader import (
    load_diagnostic_data, load_diagnostics_from_file, load_default_diagnostics
)
