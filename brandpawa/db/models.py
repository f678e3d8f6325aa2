from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    BigInteger,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

# Define naming conventions for constraints and indexes
# https://alembic.sqlalchemy.org/en/latest/naming.html
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)

# SQLite only autoincrements INTEGER primary keys
PrimaryKeyType = BigInteger().with_variant(Integer, "sqlite")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredRecord(Base):
    """One row per (entity type, natural key); the payload is the record itself."""
    __tablename__ = "records"

    id = Column(PrimaryKeyType, primary_key=True, autoincrement=True)
    entity_type = Column(String(64), nullable=False)
    natural_key = Column(String(512), nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        UniqueConstraint("entity_type", "natural_key", name="uq_records_entity_type_natural_key"),
        Index("ix_records_entity_type_natural_key", "entity_type", "natural_key"),
    )


class LedgerEntryRow(Base):
    """Append-only activity ledger."""
    __tablename__ = "ledger_entries"

    id = Column(PrimaryKeyType, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False)
    event_type = Column(String(64), nullable=False)
    payload = Column(JSON, nullable=False)
    points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_ledger_entries_user_id_created_at", "user_id", "created_at"),
    )
