# brandpawa/challenges/catalog.py
# Built-in challenge definitions and the lookup used by the enrollment manager.

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from ..errors import DefinitionError, NotFound
from .models import ChallengeDefinition, ChallengeDuration, Task

logger = logging.getLogger(__name__)


class ChallengeCatalog:
    """Read-only index of challenge definitions by id."""

    def __init__(self, definitions: Iterable[ChallengeDefinition]):
        self._challenges: Dict[str, ChallengeDefinition] = {}
        for definition in definitions:
            if definition.id in self._challenges:
                raise DefinitionError(f"Duplicate challenge ID found: {definition.id}")
            duration_ids = [duration.id for duration in definition.durations]
            if len(set(duration_ids)) != len(duration_ids):
                raise DefinitionError(f"Duplicate duration ID in challenge '{definition.id}'")
            self._challenges[definition.id] = definition

    def get(self, challenge_id: str) -> ChallengeDefinition:
        challenge = self._challenges.get(challenge_id)
        if challenge is None:
            raise NotFound(f"Challenge '{challenge_id}' not found")
        return challenge

    def duration(self, challenge_id: str, duration_id: str) -> ChallengeDuration:
        duration = self.get(challenge_id).duration(duration_id)
        if duration is None:
            raise NotFound(f"Duration '{duration_id}' not found for challenge '{challenge_id}'")
        return duration

    def all(self) -> List[ChallengeDefinition]:
        return list(self._challenges.values())

    def __contains__(self, challenge_id: str) -> bool:
        return challenge_id in self._challenges


def load_challenge_data(data: Dict[str, Any]) -> ChallengeDefinition:
    try:
        return ChallengeDefinition.model_validate(data)
    except ValidationError as e:
        raise DefinitionError(f"Invalid challenge definition '{data.get('id', '?')}': {e}") from e


# --- Visibility challenge ---

VISIBILITY_OPENING_WEEK = [
    {
        "day_number": 1,
        "title": "Visibility Reset",
        "focus": "Awareness",
        "why_it_matters": "Clear intention drives consistent action",
        "description": 'Write a one-paragraph answer to: "What do I want to be known for?" and update bio/headline',
        "personal_variant": 'Write a one-paragraph answer to: "What do I want to be known for as a personal brand?" Update your bio/headline slightly to reflect it.',
        "business_variant": 'Write a one-paragraph answer to: "What do we want to be known for as a business?" Update your company bio/headline slightly to reflect it.',
    },
    {
        "day_number": 2,
        "title": "Clarity Before Noise",
        "focus": "Message clarity",
        "why_it_matters": "Clear messages get remembered",
        "description": "Write 3 content ideas around: What you know, What people ask you, What problem you solve",
        "personal_variant": "Write 3 content ideas around: What you know well, What people often ask you about, What specific problem you help solve",
        "business_variant": "Write 3 content ideas around: Your core expertise, Common customer questions, Key problems you solve for clients",
    },
    {
        "day_number": 3,
        "title": "First Signal",
        "focus": "Showing up",
        "why_it_matters": "Action beats perfection every time",
        "description": "Publish ONE post (text, image, or video) without overthinking",
        "personal_variant": "Publish ONE personal post sharing your expertise or story. No perfection editing!",
        "business_variant": "Publish ONE business post sharing value or insight. No perfection editing!",
    },
    {
        "day_number": 4,
        "title": "Consistency Test",
        "focus": "Repetition",
        "why_it_matters": "Consistency builds recognition",
        "description": "Publish a second post and engage with 5 accounts in your niche",
        "personal_variant": "Publish a second personal post and engage with 5 creators in your space",
        "business_variant": "Publish a second business post and engage with 5 relevant businesses or clients",
    },
    {
        "day_number": 5,
        "title": "Human Presence",
        "focus": "Connection",
        "why_it_matters": "People connect with people, not brands",
        "description": "Share something human: story, lesson, or behind-the-scenes",
        "personal_variant": "Share a personal story, lesson learned, or behind-the-scenes moment",
        "business_variant": "Share a company story, customer lesson, or behind-the-scenes look",
    },
    {
        "day_number": 6,
        "title": "Signal Strength",
        "focus": "Positioning",
        "why_it_matters": "Strong positions attract right attention",
        "description": "Share an opinion or insight (avoid motivational fluff)",
        "personal_variant": "Share a strong personal opinion or unique insight in your field",
        "business_variant": "Share a strong business opinion or industry insight",
    },
    {
        "day_number": 7,
        "title": "Reflection & Lock-In",
        "focus": "Awareness",
        "why_it_matters": "Reflection turns experience into learning",
        "description": "Answer: What felt hard? What worked? What surprised you?",
        "personal_variant": "Reflect on: What felt hard about showing up? What content worked best? What surprised you about audience response?",
        "business_variant": "Reflect on: What was challenging for the team? What messaging worked? What surprised you about market response?",
    },
]

# (week, theme, first day, last day, what the theme builds)
VISIBILITY_WEEKLY_THEMES = [
    (2, "Consistency", 15, 21, "habit"),
    (3, "Confidence", 22, 28, "confidence"),
    (4, "Presence", 29, 30, "presence"),
]


def _visibility_tasks(days: int) -> List[Dict[str, Any]]:
    tasks = [dict(task) for task in VISIBILITY_OPENING_WEEK if task["day_number"] <= days]

    for day in range(8, min(days, 14) + 1):
        tasks.append({
            "day_number": day,
            "title": f"Visibility Day {day}",
            "focus": "Consistency" if day <= 10 else "Reinforcement",
            "why_it_matters": "Daily practice builds lasting habits",
            "description": "Create and share valuable content + engage with your audience",
            "personal_variant": "Create content around your expertise and engage with 3-5 people in your niche",
            "business_variant": "Create value-driven content and engage with potential clients or partners",
            "optional": day > 10,
        })

    for week, theme, first_day, last_day, builds in VISIBILITY_WEEKLY_THEMES:
        for day in range(first_day, min(days, last_day) + 1):
            tasks.append({
                "day_number": day,
                "title": f"Week {week}: {theme} - Day {day}",
                "focus": theme,
                "why_it_matters": f"{theme} builds {builds}",
                "description": f"Daily visibility action focusing on {theme.lower()}",
                "personal_variant": f"Take one visibility action today that builds your {theme.lower()} as a personal brand",
                "business_variant": f"Take one visibility action today that builds your {theme.lower()} as a business",
            })
    return tasks


# --- Authority challenge ---

AUTHORITY_OPENING_DAYS = [
    {
        "day_number": 1,
        "title": "Authority Identity",
        "focus": "Clarity",
        "why_it_matters": "Know what you want to be trusted for",
        "description": 'Answer: "People should trust me for ______ because ______."',
        "personal_variant": 'Complete: "People should trust me for ______ because ______." (Personal expertise)',
        "business_variant": 'Complete: "Clients should trust us for ______ because ______." (Business value)',
    },
    {
        "day_number": 2,
        "title": "Niche Compression",
        "focus": "Specificity",
        "why_it_matters": "Stop sounding generic",
        "description": "Narrow expertise to ONE primary problem. Kill vague positioning.",
        "personal_variant": "Define your ONE primary problem you solve. Be specific.",
        "business_variant": "Define your ONE primary client problem. Be specific.",
    },
    {
        "day_number": 3,
        "title": "Authority Statement",
        "focus": "Positioning",
        "why_it_matters": "Clear positioning attracts right clients",
        "description": "Write a 1-2 sentence authority positioning statement",
        "personal_variant": "Write your personal authority statement",
        "business_variant": "Write your business authority statement",
    },
]

# day -> (title, focus, why it matters)
AUTHORITY_KEY_DAYS = {
    6: ("Authority Content Pillars", "Content Strategy", "Stop posting randomly"),
    7: ("Weekly Lock-in", "Execution", "Signal authority to the market"),
    14: ("Weekly Authority Post", "Teaching", "Teach, don't just sell"),
    21: ("Weekly Reflection", "Assessment", "Measure progress and adjust"),
}

AUTHORITY_FINAL_DAY = ("Authority Certification", "Completion", "Measure transformation")

# The closing stretch of every authority duration is flexible
AUTHORITY_FLEXIBLE_DAYS = 5


def _authority_tasks(days: int) -> List[Dict[str, Any]]:
    tasks = [dict(task) for task in AUTHORITY_OPENING_DAYS if task["day_number"] <= days]
    for day in range(len(AUTHORITY_OPENING_DAYS) + 1, days + 1):
        title, focus, why = AUTHORITY_KEY_DAYS.get(
            day, (f"Authority Day {day}", "Development", "Building authority takes consistent action")
        )
        if day == days:
            title, focus, why = AUTHORITY_FINAL_DAY
        tasks.append({
            "day_number": day,
            "title": title,
            "focus": focus,
            "why_it_matters": why,
            "description": "Complete today's authority-building task",
            "personal_variant": "Take action to build your personal authority today",
            "business_variant": "Take action to build your business authority today",
            "optional": day > days - AUTHORITY_FLEXIBLE_DAYS,
        })
    return tasks


VISIBILITY_CHALLENGE = {
    "id": "visibility",
    "name": "Visibility Challenge",
    "description": "Build consistent brand presence and reduce fear of showing up",
    "category": "entry",
    "difficulty": "beginner",
    "daily_minutes": 15,
    "is_pro": False,
    "reward_points": 100,
    "durations": [
        {"id": "visibility-7", "duration_days": 7, "name": "7-Day Activation Sprint",
         "description": "Quick start to visibility", "tasks": _visibility_tasks(7)},
        {"id": "visibility-14", "duration_days": 14, "name": "14-Day Consistency Builder",
         "description": "Build lasting habits", "tasks": _visibility_tasks(14)},
        {"id": "visibility-30", "duration_days": 30, "name": "30-Day Habit Formation",
         "description": "Complete visibility foundation", "tasks": _visibility_tasks(30)},
    ],
}

AUTHORITY_CHALLENGE = {
    "id": "authority",
    "name": "Authority Challenge",
    "description": "Transform visibility into credible, trusted authority",
    "category": "pro",
    "difficulty": "intermediate",
    "daily_minutes": 25,
    "is_pro": True,
    "reward_points": 250,
    "durations": [
        {"id": "authority-30", "duration_days": 30, "name": "30-Day Authority Foundation",
         "description": "Build authority from scratch", "tasks": _authority_tasks(30)},
        {"id": "authority-40", "duration_days": 40, "name": "40-Day Authority Expansion",
         "description": "Deepen and expand authority", "tasks": _authority_tasks(40)},
        {"id": "authority-60", "duration_days": 60, "name": "60-Day Market Authority System",
         "description": "Complete authority ecosystem", "tasks": _authority_tasks(60)},
    ],
}

BUILT_IN_CHALLENGES = [VISIBILITY_CHALLENGE, AUTHORITY_CHALLENGE]


def build_default_catalog(extra: Optional[Iterable[Dict[str, Any]]] = None) -> ChallengeCatalog:
    """Catalog of the built-in challenges plus any extra raw definitions."""
    items = list(BUILT_IN_CHALLENGES) + list(extra or [])
    catalog = ChallengeCatalog(load_challenge_data(item) for item in items)
    logger.debug(f"Challenge catalog built with {len(items)} challenge(s)")
    return catalog
