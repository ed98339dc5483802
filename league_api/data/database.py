import sqlite3
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from league_api.core.config import settings
from league_api.core.errors import StorageError
from league_api.core.logging import logger
from league_api.data.models import Base

TABLES = ["teams", "players", "matches", "goals", "admins"]


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE rules unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, **kwargs) -> Engine:
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        _, _, db_path = url.partition(":///")
        if db_path and db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, **kwargs)


# Engine and session factory
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(bind: Engine = None):
    bind = bind or engine
    try:
        Base.metadata.create_all(bind=bind)
        logger.info("Database tables created")
    except SQLAlchemyError as e:
        logger.error(f"Creating database tables failed: {str(e)}")
        raise


def check_tables_exist(bind: Engine = None):
    inspector = inspect(bind or engine)
    missing_tables = [table for table in TABLES if not inspector.has_table(table)]
    return len(missing_tables) == 0


def init_db(bind: Engine = None):
    """Create any missing tables."""
    if not check_tables_exist(bind):
        create_tables(bind)
    else:
        logger.info("Database tables already exist")
    logger.info("Database initialised")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_engine():
    return engine


@contextmanager
def transaction(db: Session):
    """
    Scope a unit of work: commit when the block exits normally, roll back on
    any exception.

    IntegrityError is re-raised untouched so callers can map constraint
    violations to a domain error; every other SQLAlchemy failure surfaces as
    StorageError.
    """
    try:
        yield db
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back: {str(e)}")
        raise StorageError("storage failure") from e
    except Exception:
        db.rollback()
        raise
