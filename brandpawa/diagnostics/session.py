# brandpawa/diagnostics/session.py
# Lifecycle of one user's attempt at one diagnostic: autosave, resume, finalize, retake.

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional

from ..constants import EntityType
from ..core.clock import Clock, utc_now
from ..core.config import settings
from ..errors import AlreadyCompleted, InvalidResponse, NotFound, PersistenceFailure
from ..ledger import Ledger, TestCompleted, TestRetaken
from ..scoring.loader import load_default_diagnostics
from ..scoring.models import DiagnosticDefinition
from ..scoring.scorer import score_diagnostic
from ..store.base import RecordStore
from .records import DiagnosticProgress, DiagnosticResult, ScoreHistoryEntry, percent_complete

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class DiagnosticSession:
    """Snapshot of a (user, diagnostic) pair, rebuilt from storage on every call."""
    user_id: str
    diagnostic_id: str
    state: SessionState
    total_questions: int
    current_question_index: int = 0
    progress: Optional[DiagnosticProgress] = None
    result: Optional[DiagnosticResult] = None

    @property
    def answers(self) -> Dict[str, int]:
        if self.result is not None:
            return dict(self.result.answers)
        if self.progress is not None:
            return dict(self.progress.answers)
        return {}

    @property
    def percent_complete(self) -> int:
        if self.state == SessionState.COMPLETED:
            return 100
        return self.progress.percent_complete if self.progress is not None else 0


class DiagnosticSessionManager:
    """
    Drives diagnostic attempts against the record store and ledger.

    Nothing is cached between calls. Each operation loads the records it needs,
    mutates them and writes them back, so a result and a progress record for the
    same pair never outlive a completed finalize together.
    """

    def __init__(
        self,
        store: RecordStore,
        ledger: Ledger,
        definitions: Optional[Mapping[str, DiagnosticDefinition]] = None,
        clock: Optional[Clock] = None,
    ):
        self._store = store
        self._ledger = ledger
        self._definitions = dict(definitions) if definitions is not None else load_default_diagnostics(settings.diagnostics_path)
        self._clock = clock or utc_now

    # --- Lookups ---

    def definition(self, diagnostic_id: str) -> DiagnosticDefinition:
        definition = self._definitions.get(diagnostic_id)
        if definition is None:
            raise NotFound(f"Diagnostic '{diagnostic_id}' not found")
        return definition

    def get_result(self, user_id: str, diagnostic_id: str) -> Optional[DiagnosticResult]:
        record = self._store.get(EntityType.DIAGNOSTIC_RESULT, (user_id, diagnostic_id))
        return DiagnosticResult.model_validate(record) if record is not None else None

    def get_progress(self, user_id: str, diagnostic_id: str) -> Optional[DiagnosticProgress]:
        record = self._store.get(EntityType.DIAGNOSTIC_PROGRESS, (user_id, diagnostic_id))
        return DiagnosticProgress.model_validate(record) if record is not None else None

    # --- Operations ---

    def resume(self, user_id: str, diagnostic_id: str) -> DiagnosticSession:
        """
        Rebuilds the session from storage.

        A stored result is returned as is. Saved progress positions the caller
        at the first unanswered question. Progress that already covers every
        question without a result is finalized here.
        """
        definition = self.definition(diagnostic_id)

        result = self.get_result(user_id, diagnostic_id)
        if result is not None:
            self._discard_progress(user_id, diagnostic_id)
            return self._completed_session(definition, result)

        progress = self.get_progress(user_id, diagnostic_id)
        if progress is None:
            return DiagnosticSession(
                user_id=user_id,
                diagnostic_id=diagnostic_id,
                state=SessionState.NOT_STARTED,
                total_questions=definition.total_questions,
            )

        if self._unanswered(definition, progress.answers):
            return DiagnosticSession(
                user_id=user_id,
                diagnostic_id=diagnostic_id,
                state=SessionState.IN_PROGRESS,
                total_questions=definition.total_questions,
                current_question_index=self._next_index(definition, progress.answers),
                progress=progress,
            )

        logger.warning(
            f"Progress for user '{user_id}' on '{diagnostic_id}' covers every question but has no result; finalizing."
        )
        return self.finalize(user_id, diagnostic_id)

    def record_answer(
        self,
        user_id: str,
        diagnostic_id: str,
        question_id: str,
        points: int,
        category: Optional[str] = None,
    ) -> DiagnosticSession:
        """
        Saves one answer, overwriting any earlier answer to the same question.

        Finalizes the diagnostic once every question has an answer. A store
        failure propagates before anything is finalized, so the same answer can
        simply be sent again.
        """
        definition = self.definition(diagnostic_id)
        self._validate_answer(definition, question_id, points, category)

        if self.get_result(user_id, diagnostic_id) is not None:
            raise AlreadyCompleted(
                f"Diagnostic '{diagnostic_id}' is already completed for user '{user_id}'; retake it to answer again"
            )

        stored = self.get_progress(user_id, diagnostic_id)
        answers = dict(stored.answers) if stored else {}
        answers[question_id] = points
        selections = dict(stored.selections) if stored else {}
        if definition.is_category_based:
            selections[question_id] = category

        if stored is not None and stored.answers == answers and stored.selections == selections:
            # same answer again, nothing to write
            progress = stored
        else:
            answered = len([qid for qid in definition.question_ids if qid in answers])
            progress = DiagnosticProgress(
                user_id=user_id,
                diagnostic_id=diagnostic_id,
                answers=answers,
                selections=selections,
                percent_complete=percent_complete(answered, definition.total_questions),
                current_question_index=self._next_index(definition, answers),
                updated_at=self._clock(),
            )
            self._store.upsert(
                EntityType.DIAGNOSTIC_PROGRESS, (user_id, diagnostic_id), progress.model_dump(mode="json")
            )
            logger.debug(
                f"Recorded answer {question_id}={points} for user '{user_id}' on '{diagnostic_id}' "
                f"({progress.percent_complete}% complete)"
            )

        if not self._unanswered(definition, answers):
            return self.finalize(user_id, diagnostic_id)

        return DiagnosticSession(
            user_id=user_id,
            diagnostic_id=diagnostic_id,
            state=SessionState.IN_PROGRESS,
            total_questions=definition.total_questions,
            current_question_index=progress.current_question_index,
            progress=progress,
        )

    def select_option(self, user_id: str, diagnostic_id: str, question_id: str, option_value: str) -> DiagnosticSession:
        """Records the points (and category) of the option the user picked."""
        definition = self.definition(diagnostic_id)
        question = definition.question(question_id)
        if question is None:
            raise InvalidResponse(f"Unknown question '{question_id}' for diagnostic '{diagnostic_id}'")
        option = question.option(option_value)
        if option is None:
            raise InvalidResponse(f"Question '{question_id}' has no option '{option_value}'")
        return self.record_answer(user_id, diagnostic_id, question_id, option.points, option.category)

    def finalize(self, user_id: str, diagnostic_id: str) -> DiagnosticSession:
        """
        Scores the saved answers and converts progress into a result.

        Order: write result, delete progress, append history, append ledger
        entry. Once the result is written, a failed progress delete is left
        for the cleanup pass and a failed history write is only logged.
        """
        definition = self.definition(diagnostic_id)
        progress = self.get_progress(user_id, diagnostic_id)
        if progress is None:
            raise NotFound(f"No saved progress for user '{user_id}' on diagnostic '{diagnostic_id}'")

        missing = self._unanswered(definition, progress.answers)
        if missing:
            raise InvalidResponse(f"Cannot finalize '{diagnostic_id}': unanswered questions {missing}")

        answers = {qid: progress.answers[qid] for qid in definition.question_ids}
        selections = {qid: cat for qid, cat in progress.selections.items() if qid in answers}
        card = score_diagnostic(definition, answers, selections)

        completed_at = self._clock()
        result = DiagnosticResult(
            user_id=user_id,
            diagnostic_id=diagnostic_id,
            diagnostic_name=definition.name,
            total_score=card.total_score,
            pillars=card.pillars,
            stage=card.stage,
            category_profile=card.category_profile,
            answers=answers,
            selections=selections,
            completed_at=completed_at,
        )
        self._store.upsert(EntityType.DIAGNOSTIC_RESULT, (user_id, diagnostic_id), result.model_dump(mode="json"))
        self._discard_progress(user_id, diagnostic_id)

        history = ScoreHistoryEntry(
            entry_id=uuid.uuid4().hex,
            user_id=user_id,
            diagnostic_id=diagnostic_id,
            total_score=card.total_score,
            stage=card.stage.name,
            pillars={pillar.name: pillar.score for pillar in card.pillars},
            primary_category=card.category_profile.primary if card.category_profile else None,
            recorded_at=completed_at,
        )
        try:
            self._store.upsert(
                EntityType.SCORE_HISTORY, (user_id, diagnostic_id, history.entry_id), history.model_dump(mode="json")
            )
        except PersistenceFailure:
            logger.error(
                f"Result for '{diagnostic_id}' saved but score history write failed for user '{user_id}'",
                exc_info=True,
            )

        stage_label = card.category_profile.positioning if card.category_profile else card.stage.name
        try:
            self._ledger.append(user_id, TestCompleted(
                diagnostic_id=diagnostic_id,
                diagnostic=definition.name,
                score=card.total_score,
                stage=stage_label,
            ))
        except PersistenceFailure:
            logger.error(f"Result for '{diagnostic_id}' saved but ledger append failed for user '{user_id}'", exc_info=True)
            raise

        logger.info(
            f"User '{user_id}' completed '{diagnostic_id}' with score {card.total_score} ({card.stage.name})"
        )
        return self._completed_session(definition, result)

    def retake(self, user_id: str, diagnostic_id: str) -> DiagnosticSession:
        """Clears progress and result so the diagnostic starts over. History is kept."""
        definition = self.definition(diagnostic_id)
        self._store.delete(EntityType.DIAGNOSTIC_PROGRESS, (user_id, diagnostic_id))
        self._store.delete(EntityType.DIAGNOSTIC_RESULT, (user_id, diagnostic_id))
        self._ledger.append(user_id, TestRetaken(diagnostic_id=diagnostic_id, diagnostic=definition.name))
        logger.info(f"User '{user_id}' is retaking '{diagnostic_id}'")
        return DiagnosticSession(
            user_id=user_id,
            diagnostic_id=diagnostic_id,
            state=SessionState.NOT_STARTED,
            total_questions=definition.total_questions,
        )

    def cleanup_orphaned_progress(self, user_id: str) -> int:
        """Deletes progress records left behind next to an existing result. Returns how many."""
        removed = 0
        for record in self._store.list_by_key(EntityType.DIAGNOSTIC_PROGRESS, (user_id,)):
            diagnostic_id = record["diagnostic_id"]
            if self._store.get(EntityType.DIAGNOSTIC_RESULT, (user_id, diagnostic_id)) is None:
                continue
            if self._store.delete(EntityType.DIAGNOSTIC_PROGRESS, (user_id, diagnostic_id)):
                removed += 1
        if removed:
            logger.info(f"Removed {removed} orphaned progress record(s) for user '{user_id}'")
        return removed

    def score_history(self, user_id: str, diagnostic_id: Optional[str] = None) -> List[ScoreHistoryEntry]:
        """Oldest first."""
        partial_key = (user_id, diagnostic_id) if diagnostic_id else (user_id,)
        records = self._store.list_by_key(EntityType.SCORE_HISTORY, partial_key, order_by="recorded_at")
        return [ScoreHistoryEntry.model_validate(record) for record in records]

    # --- Helpers ---

    @staticmethod
    def _validate_answer(
        definition: DiagnosticDefinition, question_id: str, points: int, category: Optional[str]
    ) -> None:
        question = definition.question(question_id)
        if question is None:
            raise InvalidResponse(f"Unknown question '{question_id}' for diagnostic '{definition.id}'")
        if definition.is_category_based:
            if not any(o.points == points and o.category == category for o in question.options):
                raise InvalidResponse(
                    f"Question '{question_id}' has no option worth {points} points in category '{category}'"
                )
        elif not question.accepts_points(points):
            raise InvalidResponse(f"Question '{question_id}' has no option worth {points} points")

    @staticmethod
    def _unanswered(definition: DiagnosticDefinition, answers: Mapping[str, int]) -> List[str]:
        return [qid for qid in definition.question_ids if qid not in answers]

    @staticmethod
    def _next_index(definition: DiagnosticDefinition, answers: Mapping[str, int]) -> int:
        answered = len([qid for qid in definition.question_ids if qid in answers])
        return min(answered, definition.total_questions - 1)

    def _discard_progress(self, user_id: str, diagnostic_id: str) -> None:
        try:
            self._store.delete(EntityType.DIAGNOSTIC_PROGRESS, (user_id, diagnostic_id))
        except PersistenceFailure:
            logger.warning(
                f"Could not delete progress for user '{user_id}' on '{diagnostic_id}'; "
                "cleanup_orphaned_progress will remove it",
                exc_info=True,
            )

    @staticmethod
    def _completed_session(definition: DiagnosticDefinition, result: DiagnosticResult) -> DiagnosticSession:
        return DiagnosticSession(
            user_id=result.user_id,
            diagnostic_id=result.diagnostic_id,
            state=SessionState.COMPLETED,
            total_questions=definition.total_questions,
            current_question_index=definition.total_questions - 1,
            result=result,
        )
