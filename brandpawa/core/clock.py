from datetime import datetime, timezone
from typing import Callable

# Injected wherever "now" is read so tests can pin time
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
