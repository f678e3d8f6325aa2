# Diagnostic Session Manager
from .records import DiagnosticProgress, DiagnosticResult, ScoreHistoryEntry, percent_complete
from .session import DiagnosticSession, DiagnosticSessionManager, SessionState
