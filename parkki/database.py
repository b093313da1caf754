# parkki/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy (SQLite by default, any transactional SQL backend works).
All models are auto-imported in create_tables() so one call creates every table.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from parkki.config import settings

Base = declarative_base()

# Connection execution option asking the SQLite begin hook for the write lock
WRITE_LOCK_OPTION = "parkki_write_lock"


def build_engine(url: str) -> Engine:
    """
    Create an engine for `url`.

    SQLite connections get foreign keys switched on (events cascade with
    their camera). Transactions open with a plain deferred BEGIN, so reads
    never wait on each other; a session that asked for the write lock via
    begin_write() opens with BEGIN IMMEDIATE instead, so two concurrent
    batches serialize on the lock rather than failing half-way through
    with "database is locked".
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, pool_size=10, max_overflow=20)

    engine = create_engine(url, connect_args={"check_same_thread": False, "timeout": 30})

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # pysqlite's own BEGIN handling is disabled; _on_begin issues it.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(WRITE_LOCK_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")

    return engine


def begin_write(db: Session) -> None:
    """
    Start `db`'s transaction holding the write lock (SQLite) up front.
    Must be called before the session runs its first statement.
    """
    db.connection(execution_options={WRITE_LOCK_OPTION: True})


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = build_session_factory(engine)


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind: Engine = None):
    """
    Creates all DB tables on startup. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from parkki.models.camera import Camera   # noqa
    from parkki.models.event import Event     # noqa

    Base.metadata.create_all(bind=bind or engine)
