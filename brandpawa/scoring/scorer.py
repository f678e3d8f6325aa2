# brandpawa/scoring/scorer.py
# Pure scoring functions for completed diagnostic answer sets.

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from .definitions import STAGE_THRESHOLDS
from .models import (
    CategoryDefinition,
    CategoryProfile,
    DiagnosticDefinition,
    PillarDefinition,
    PillarScore,
    ScoreCard,
    StageLabel,
    StageThreshold,
)

logger = logging.getLogger(__name__)


# --- Scoring Functions ---

def compute_total_score(answers: Mapping[str, int]) -> int:
    """Sums every recorded point value. An empty answer map scores 0."""
    return sum(answers.values())


def compute_pillar_scores(
    answers: Mapping[str, int],
    pillar_definitions: Sequence[PillarDefinition],
) -> List[PillarScore]:
    """
    Scores each pillar from the questions it lists.

    Questions outside every pillar are ignored. A question listed by several
    pillars counts towards each of them.
    """
    pillars = []
    for pillar in pillar_definitions:
        score = sum(answers.get(question_id, 0) for question_id in pillar.question_ids)
        pillars.append(PillarScore(
            name=pillar.name,
            score=score,
            max_score=pillar.max_score,
            description=pillar.description,
            action_steps=list(pillar.action_steps),
        ))
    return pillars


def classify_stage(
    total_score: int,
    thresholds: Optional[Sequence[StageThreshold]] = None,
) -> StageLabel:
    """Returns the first band, highest threshold first, whose minimum the score meets."""
    bands = sorted(thresholds or STAGE_THRESHOLDS, key=lambda band: band.min_score, reverse=True)
    chosen = bands[-1]  # Scores below every minimum fall into the lowest band
    for band in bands:
        if total_score >= band.min_score:
            chosen = band
            break
    return StageLabel(
        name=chosen.name,
        display_name=chosen.display_name or chosen.name,
        tagline=chosen.tagline,
        diagnosis=chosen.diagnosis,
        next_step=chosen.next_step,
    )


def compute_category_scores(
    answers: Mapping[str, int],
    selections: Mapping[str, str],
    categories: Sequence[CategoryDefinition],
) -> Dict[str, int]:
    """Adds each answer's points to the category its option belongs to."""
    scores = {category.id: 0 for category in categories}
    for question_id, category_id in selections.items():
        if category_id not in scores:
            logger.warning(f"Selection for question '{question_id}' names unknown category '{category_id}'; ignoring.")
            continue
        scores[category_id] += answers.get(question_id, 0)
    return scores


def compute_category_profile(
    answers: Mapping[str, int],
    selections: Mapping[str, str],
    categories: Sequence[CategoryDefinition],
    positioning: Optional[Mapping[str, str]] = None,
) -> CategoryProfile:
    """
    Ranks categories by score and derives the positioning label.

    Ties keep the declaration order of `categories`. The label comes from the
    "primary_secondary" pair when mapped, otherwise it is built from the two
    categories' full names.
    """
    scores = compute_category_scores(answers, selections, categories)
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    by_id = {category.id: category for category in categories}

    primary = ranked[0][0]
    secondary = ranked[1][0] if len(ranked) > 1 else None

    label = ""
    if secondary is not None:
        label = (positioning or {}).get(f"{primary}_{secondary}", "")
        if not label:
            primary_name = by_id[primary].full_name or by_id[primary].name
            secondary_name = by_id[secondary].full_name or by_id[secondary].name
            label = f"{primary_name} with {secondary_name}"

    return CategoryProfile(scores=scores, primary=primary, secondary=secondary, positioning=label)


def score_diagnostic(
    definition: DiagnosticDefinition,
    answers: Mapping[str, int],
    selections: Optional[Mapping[str, str]] = None,
) -> ScoreCard:
    """Runs every scoring step a diagnostic defines and bundles the outcome."""
    total = compute_total_score(answers)
    pillars = compute_pillar_scores(answers, definition.pillars)
    stage = classify_stage(total, definition.stages)

    category_profile = None
    if definition.is_category_based:
        category_profile = compute_category_profile(
            answers, selections or {}, definition.categories, definition.positioning
        )

    logger.debug(f"Scored diagnostic '{definition.id}': total={total}, stage={stage.name}")
    return ScoreCard(total_score=total, pillars=pillars, stage=stage, category_profile=category_profile)
