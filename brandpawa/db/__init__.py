# SQLAlchemy schema and engine helpers
from .models import Base, LedgerEntryRow, StoredRecord
from .session import get_engine, get_session_factory, init_db
