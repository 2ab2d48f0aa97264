import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine, Session

from .config import settings

logger = logging.getLogger(__name__)


def build_engine(db_url: str, timeout: float = 5.0, echo: bool = False, **engine_kwargs) -> Engine:
    """Create an engine for ``db_url``.

    SQLite transactions start with BEGIN IMMEDIATE so that the write lock is
    taken up front and two replace-the-code transactions for the same phone
    never interleave.
    """
    if db_url.startswith("sqlite"):
        connect_args = engine_kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", timeout)
        engine = create_engine(db_url, echo=echo, connect_args=connect_args, **engine_kwargs)

        @event.listens_for(engine, "connect")
        def _disable_pysqlite_transactions(dbapi_connection, connection_record):
            # let SQLAlchemy emit BEGIN itself
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    # Better resiliency for managed Postgres
    engine_kwargs.setdefault("pool_pre_ping", True)
    engine_kwargs.setdefault("pool_recycle", 300)
    engine_kwargs.setdefault("pool_timeout", timeout)
    engine_kwargs.setdefault("connect_args", {"connect_timeout": int(timeout)})
    return create_engine(db_url, echo=echo, **engine_kwargs)


engine = build_engine(settings.DATABASE_URL, timeout=settings.DB_TIMEOUT_SECONDS, echo=settings.DEBUG)


def create_db_and_tables(bind: Engine = None):
    # register the table classes on SQLModel.metadata
    from .db import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables ensured")


def get_session():
    with Session(engine) as session:
        yield session
