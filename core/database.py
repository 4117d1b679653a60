"""
core/database.py -- SQLAlchemy engine construction shared by every store.

Uses SQLAlchemy Core (not ORM) so the domain dataclasses in auth/models.py and
catalog/models.py remain the authoritative domain representation. Swapping
SQLite for PostgreSQL is a connection string change, not a rewrite.

SQLite specifics:
  check_same_thread=False -- FastAPI runs sync handlers in a thread pool, so a
      pooled connection may be used from a different thread than created it.
  WAL journal mode -- readers proceed without blocking during writes.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def make_engine(db_url: str, **engine_kwargs) -> Engine:
    """Create an Engine configured for threaded use by FastAPI's worker pool.

    Extra keyword arguments go straight to create_engine(), e.g. an explicit
    poolclass for shared-memory SQLite URIs.
    """
    connect_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(db_url, connect_args=connect_args, **engine_kwargs)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine
