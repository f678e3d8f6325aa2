"""Error taxonomy shared by the diagnostic and challenge managers.

Every failure surfaces as one of these classes so callers can branch on the
type. Nothing here is retried internally.
"""
from typing import Optional


class ProgressEngineError(Exception):
    """Base exception for the progress and scoring engine."""
    pass


class AlreadyEnrolled(ProgressEngineError):
    """A live enrollment already exists for this (user, challenge) pair."""

    def __init__(self, user_id: str, challenge_id: str, enrollment_id: Optional[str] = None):
        super().__init__(f"User '{user_id}' is already enrolled in challenge '{challenge_id}'")
        self.user_id = user_id
        self.challenge_id = challenge_id
        self.enrollment_id = enrollment_id


class AlreadyCompleted(ProgressEngineError):
    """Write-once item (challenge day, finished diagnostic) was submitted again."""
    pass


class InvalidResponse(ProgressEngineError):
    """The submitted answer or task response is not acceptable."""
    pass


class NotEntitled(ProgressEngineError):
    """The user's plan does not unlock a Pro-gated challenge."""

    def __init__(self, user_id: str, challenge_id: str):
        super().__init__(f"User '{user_id}' is not entitled to challenge '{challenge_id}'")
        self.user_id = user_id
        self.challenge_id = challenge_id


class NotFound(ProgressEngineError):
    """Diagnostic, challenge, duration, task or enrollment absent."""
    pass


class InvalidTransition(ProgressEngineError):
    """Operation not allowed from the enrollment's current status."""
    pass


class DefinitionError(ValueError):
    """A diagnostic or challenge definition failed validation."""
    pass


class PersistenceFailure(ProgressEngineError):
    """Opaque passthrough of a storage backend failure."""

    def __init__(self, message="Persistence operation failed.", original_exception=None):
        super().__init__(message)
        self.original_exception = original_exception
