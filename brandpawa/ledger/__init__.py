# Activity / point ledger port
from .events import (
    ChallengeCompleted,
    ChallengeFailed,
    ChallengePaused,
    ChallengeResumed,
    ChallengeStarted,
    ChallengeTaskCompleted,
    LedgerEvent,
    TestCompleted,
    TestRetaken,
    parse_event,
)
from .ledger import InMemoryLedger, Ledger, LedgerEntry, SqlLedger
