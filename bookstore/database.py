# bookstore/database.py

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from bookstore.core.config import Settings, get_settings

Base = declarative_base()

# Execution option asking for a transaction that holds the write lock from its first statement
WRITE_LOCK_OPTION = "bookstore_write_lock"


def _normalise_url(database_url: str) -> str:
    # Convert postgresql:// to postgresql+asyncpg:// for async support
    if database_url.startswith('postgresql://'):
        return database_url.replace('postgresql://', 'postgresql+asyncpg://', 1)
    if database_url.startswith('sqlite://'):
        return database_url.replace('sqlite://', 'sqlite+aiosqlite://', 1)
    return database_url


def _configure_sqlite(engine: AsyncEngine) -> None:
    """
    Take over SQLite transaction begins from pysqlite.

    Connections opened with ``WRITE_LOCK_OPTION`` start with BEGIN IMMEDIATE so
    two order transactions cannot both read stock and then fail on lock
    upgrade; the busy timeout makes the second one wait instead. Everything
    else gets a plain deferred BEGIN and reads without queueing behind writers.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(WRITE_LOCK_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str = None, settings: Settings = None) -> AsyncEngine:
    settings = settings or get_settings()
    database_url = _normalise_url(database_url or settings.DATABASE_URL)
    if not database_url:
        raise ValueError("DATABASE_URL is not set in environment variables")

    if make_url(database_url).get_backend_name() == "sqlite":
        engine = create_async_engine(
            database_url,
            echo=False,
            poolclass=NullPool,
            connect_args={"timeout": settings.SQLITE_BUSY_TIMEOUT},
        )
        _configure_sqlite(engine)
        return engine

    return create_async_engine(
        database_url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


engine = build_engine()
async_session = build_sessionmaker(engine)

