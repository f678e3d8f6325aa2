import abc
import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..core.clock import Clock, utc_now
from ..db.models import LedgerEntryRow
from ..errors import PersistenceFailure
from .events import LedgerEvent, parse_event

logger = logging.getLogger(__name__)


class LedgerEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    event: LedgerEvent
    points: int
    created_at: datetime

    @property
    def event_type(self) -> str:
        return self.event.event_type


class Ledger(abc.ABC):
    """Append-only activity log with a running point total per user."""

    @abc.abstractmethod
    def append(self, user_id: str, event: LedgerEvent) -> LedgerEntry:
        """Records one event. Points come from the event itself."""

    @abc.abstractmethod
    def entries(self, user_id: str, limit: Optional[int] = None) -> List[LedgerEntry]:
        """Newest first."""

    @abc.abstractmethod
    def point_total(self, user_id: str) -> int:
        pass


class InMemoryLedger(Ledger):

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or utc_now
        self._entries: Dict[str, List[LedgerEntry]] = {}

    def append(self, user_id: str, event: LedgerEvent) -> LedgerEntry:
        entry = LedgerEntry(
            id=str(uuid.uuid4()),
            user_id=user_id,
            event=event,
            points=event.points_awarded,
            created_at=self._clock(),
        )
        self._entries.setdefault(user_id, []).append(entry)
        logger.info(f"Ledger: {event.event_type} for user '{user_id}' (+{entry.points} points)")
        return entry

    def entries(self, user_id: str, limit: Optional[int] = None) -> List[LedgerEntry]:
        newest_first = list(reversed(self._entries.get(user_id, [])))
        return newest_first[:limit] if limit is not None else newest_first

    def point_total(self, user_id: str) -> int:
        return sum(entry.points for entry in self._entries.get(user_id, []))


class SqlLedger(Ledger):
    """Ledger stored in the `ledger_entries` table."""

    def __init__(self, session_factory: sessionmaker, clock: Optional[Clock] = None):
        self._session_factory = session_factory
        self._clock = clock or utc_now

    def append(self, user_id: str, event: LedgerEvent) -> LedgerEntry:
        row = LedgerEntryRow(
            user_id=user_id,
            event_type=event.event_type,
            payload=event.model_dump(mode="json"),
            points=event.points_awarded,
            created_at=self._clock(),
        )
        with self._session_factory() as session:
            try:
                session.add(row)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Failed to append {event.event_type} for user '{user_id}': {e}", exc_info=True)
                raise PersistenceFailure(f"Ledger append failed: {e}", original_exception=e) from e
            entry = self._to_entry(row)
        logger.info(f"Ledger: {event.event_type} for user '{user_id}' (+{entry.points} points)")
        return entry

    def entries(self, user_id: str, limit: Optional[int] = None) -> List[LedgerEntry]:
        stmt = (
            select(LedgerEntryRow)
            .where(LedgerEntryRow.user_id == user_id)
            .order_by(LedgerEntryRow.created_at.desc(), LedgerEntryRow.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._session_factory() as session:
            try:
                rows = session.execute(stmt).scalars().all()
            except SQLAlchemyError as e:
                logger.error(f"Failed to read ledger for user '{user_id}': {e}", exc_info=True)
                raise PersistenceFailure(f"Ledger read failed: {e}", original_exception=e) from e
            return [self._to_entry(row) for row in rows]

    def point_total(self, user_id: str) -> int:
        stmt = select(func.coalesce(func.sum(LedgerEntryRow.points), 0)).where(LedgerEntryRow.user_id == user_id)
        with self._session_factory() as session:
            try:
                return int(session.execute(stmt).scalar_one())
            except SQLAlchemyError as e:
                logger.error(f"Failed to total points for user '{user_id}': {e}", exc_info=True)
                raise PersistenceFailure(f"Ledger read failed: {e}", original_exception=e) from e

    @staticmethod
    def _to_entry(row: LedgerEntryRow) -> LedgerEntry:
        return LedgerEntry(
            id=str(row.id),
            user_id=row.user_id,
            event=parse_event(row.payload),
            points=row.points,
            created_at=row.created_at,
        )
