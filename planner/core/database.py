import logging
import sqlite3

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base

from planner.core.config import settings
from planner.core.errors import StorageUnavailable

logger = logging.getLogger(__name__)

DATABASE_URL = settings.DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=settings.SQL_ECHO, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # Sans ce pragma SQLite ignore les ON DELETE CASCADE
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    """Dépendance sessionDB"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit(db) -> None:
    """Commit de la session; en cas d'échec rollback, et une base injoignable devient StorageUnavailable."""
    try:
        db.commit()
    except OperationalError as exc:
        db.rollback()
        raise StorageUnavailable(f"Storage unavailable: {exc.orig}") from exc
    except SQLAlchemyError:
        db.rollback()
        raise


def init_db() -> None:
    """Crée les tables et la liste Inbox si besoin."""
    # Les modèles doivent être importés pour être enregistrés dans Base.metadata
    from planner.models import activity_log, attachment, label, reminder, task, task_list  # noqa: F401
    from planner.services.list_service import ensure_inbox

    try:
        Base.metadata.create_all(bind=engine)
    except OperationalError as exc:
        raise StorageUnavailable(f"Cannot open database {engine.url!r}: {exc}") from exc

    db = SessionLocal()
    try:
        ensure_inbox(db)
    finally:
        db.close()
    logger.info("Database ready url=%s", engine.url)


def reset_database() -> None:
    """Vide complètement la base (tests) puis la ré-initialise."""
    from planner.models import activity_log, attachment, label, reminder, task, task_list  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    init_db()


def shutdown_db() -> None:
    engine.dispose()
    logger.info("Database connections closed")
