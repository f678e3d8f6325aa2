import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import settings
from .models import Base

logger = logging.getLogger(__name__)


def get_engine(db_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Creates a synchronous SQLAlchemy engine instance.

    In-memory SQLite URLs share one connection so every session sees the same
    database.
    """
    db_url = db_url or settings.database_url
    echo = settings.database_echo if echo is None else echo
    if db_url.startswith("sqlite") and ":memory:" in db_url:
        return create_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if db_url.startswith("sqlite"):
        return create_engine(db_url, echo=echo)
    return create_engine(
        db_url,
        echo=echo,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=1800,  # 30 minutes
    )


def get_session_factory(engine: Engine) -> sessionmaker:
    """Creates a session factory bound to the engine."""
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Creates the tables directly. Deployed databases are migrated with Alembic."""
    Base.metadata.create_all(engine)
    logger.info(f"Database schema ensured on {engine.url.render_as_string(hide_password=True)}")
