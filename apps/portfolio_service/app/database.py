from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
import logging
from .config import get_settings

logger = logging.getLogger(__name__)

Base = declarative_base()

# Process-wide handles, created on first use
_engine = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)

def get_engine() -> Engine:
    global _engine
    if _engine is None:
        settings = get_settings()
        connect_args = {}
        if settings.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO, connect_args=connect_args)
        configure_engine(_engine)
        SessionLocal.configure(bind=_engine)
        logger.info("Database engine created")
    return _engine

def configure_engine(engine: Engine) -> None:
    """Enable foreign key enforcement on SQLite so ON DELETE CASCADE applies."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

def create_tables(engine: Engine = None) -> None:
    # models must be imported so their tables are registered on Base.metadata
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine or get_engine())

# Dependency for FastAPI
def get_db():
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
