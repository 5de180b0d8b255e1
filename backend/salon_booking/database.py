from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings


def build_engine(database_url: str, lock_timeout: float | None = None) -> Engine:
    """
    Create an engine for database_url.

    For SQLite the pysqlite driver is told to stay out of transaction
    handling so that SQLAlchemy emits BEGIN itself. A session can then ask
    for BEGIN IMMEDIATE (see write_transaction) and hold the database write
    lock from the very first statement of the transaction.

    The database runs in WAL mode: readers never hold up a writer's commit,
    and writers still serialize on the single write lock.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    timeout = lock_timeout if lock_timeout is not None else settings.booking_lock_timeout_seconds

    # check_same_thread=False is required for FastAPI's thread pool
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False, "timeout": timeout},
    )

    @event.listens_for(engine, "connect")
    def on_sqlite_connect(dbapi_connection, _):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def on_sqlite_begin(conn):
        mode = conn.get_execution_options().get("sqlite_begin")
        conn.exec_driver_sql(f"BEGIN {mode}" if mode else "BEGIN")

    return engine


engine = build_engine(settings.resolved_database_url)

# SessionLocal is the main way to talk to the database
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def write_transaction(db: Session):
    """
    Run the block as a single write transaction and commit it.

    A read-only transaction already open on the session is closed first so
    the new one starts with the write lock (BEGIN IMMEDIATE on SQLite) and
    sees the latest committed state. Every write path goes through here:
    a deferred transaction that reads first and upgrades later can fail
    with "database is locked" when another writer commits in between.
    Any exception rolls everything back and propagates.
    """
    if db.in_transaction():
        if db.new or db.dirty or db.deleted:
            raise RuntimeError("write_transaction() requires a session without pending changes")
        db.rollback()

    db.connection(execution_options={"sqlite_begin": "IMMEDIATE"})
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
