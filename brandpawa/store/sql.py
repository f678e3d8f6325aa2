import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional, Sequence, Union

from sqlalchemy import delete, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..constants import EntityType
from ..db.models import StoredRecord
from ..errors import PersistenceFailure
from .base import KEY_SEPARATOR, Record, RecordStore, encode_key, entity_name, sort_records

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SqlRecordStore(RecordStore):
    """
    Record store backed by the `records` table.

    Each call runs in its own transaction. Upserts use INSERT .. ON CONFLICT
    where the dialect supports it so a retried write converges on one row.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def _session_scope(self, operation: str, entity: str, key: str) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error during {operation} of {entity} '{key}': {e}", exc_info=True)
            raise PersistenceFailure(f"{operation} failed for {entity} '{key}': {e}", original_exception=e) from e
        finally:
            session.close()

    def get(self, entity_type: Union[EntityType, str], key: Sequence[str]) -> Optional[Record]:
        name, natural_key = entity_name(entity_type), encode_key(key)
        with self._session_scope("get", name, natural_key) as session:
            row = session.execute(
                select(StoredRecord.payload).where(
                    StoredRecord.entity_type == name,
                    StoredRecord.natural_key == natural_key,
                )
            ).scalar_one_or_none()
        return dict(row) if row is not None else None

    def upsert(self, entity_type: Union[EntityType, str], key: Sequence[str], record: Record) -> None:
        name, natural_key = entity_name(entity_type), encode_key(key)
        now = datetime.now(timezone.utc)
        with self._session_scope("upsert", name, natural_key) as session:
            insert = _UPSERT_DIALECTS.get(session.get_bind().dialect.name)
            if insert is not None:
                stmt = insert(StoredRecord).values(
                    entity_type=name,
                    natural_key=natural_key,
                    payload=record,
                    created_at=now,
                    updated_at=now,
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=[StoredRecord.entity_type, StoredRecord.natural_key],
                    set_={"payload": stmt.excluded.payload, "updated_at": stmt.excluded.updated_at},
                )
                session.execute(stmt)
                return

            existing = session.execute(
                select(StoredRecord).where(
                    StoredRecord.entity_type == name,
                    StoredRecord.natural_key == natural_key,
                )
            ).scalar_one_or_none()
            if existing is None:
                session.add(StoredRecord(entity_type=name, natural_key=natural_key, payload=record))
            else:
                existing.payload = record
                existing.updated_at = now

    def delete(self, entity_type: Union[EntityType, str], key: Sequence[str]) -> bool:
        name, natural_key = entity_name(entity_type), encode_key(key)
        with self._session_scope("delete", name, natural_key) as session:
            result = session.execute(
                delete(StoredRecord).where(
                    StoredRecord.entity_type == name,
                    StoredRecord.natural_key == natural_key,
                )
            )
        return result.rowcount > 0

    def list_by_key(
        self,
        entity_type: Union[EntityType, str],
        partial_key: Sequence[str],
        order_by: Optional[str] = None,
    ) -> List[Record]:
        name = entity_name(entity_type)
        prefix = encode_key(partial_key) if partial_key else ""
        with self._session_scope("list", name, prefix) as session:
            stmt = select(StoredRecord.payload).where(StoredRecord.entity_type == name)
            if prefix:
                stmt = stmt.where(or_(
                    StoredRecord.natural_key == prefix,
                    StoredRecord.natural_key.startswith(prefix + KEY_SEPARATOR, autoescape=True),
                ))
            rows = session.execute(stmt.order_by(StoredRecord.id)).scalars().all()
        return sort_records([dict(row) for row in rows], order_by)
