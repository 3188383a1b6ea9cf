"""
Module: currency_kernel.db.engine
Responsibility: The engine and session factory behind SQL seed sources, plus
    the transactional scope used to write seed rows.
Architecture position: Kernel > DB.  May import from db/base.py and models/.
    MUST NOT import from domain/ or outer layers.

Invariants enforced:
    - At most one engine and session factory at a time; initializing again
      disposes the previous engine.
    - In-memory SQLite URLs share one connection (StaticPool), so every
      session sees the same seed table.

Failure modes:
    - RuntimeError from get_session_factory / session_scope / create_tables
      before init_engine_from_url().
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from currency_kernel.logging_config import get_logger

logger = get_logger("db.engine")

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None


def init_engine_from_url(database_url: str, echo: bool = False) -> Engine:
    """
    Open the database holding ``currency_definitions`` rows.

    ``sqlite://`` gives a private in-memory database shared by every session
    of this process; any other URL uses SQLAlchemy's default pooling.
    """
    global _engine, _SessionFactory

    reset_engine()

    url = make_url(database_url)
    in_memory = url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")
    if in_memory:
        _engine = create_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        _engine = create_engine(url, echo=echo, pool_pre_ping=True)

    _SessionFactory = sessionmaker(bind=_engine, expire_on_commit=False)
    logger.info(
        "seed_database_opened",
        extra={"dialect": url.get_backend_name(), "in_memory": in_memory},
    )
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Factory handed to ``SqlSeedSource``."""
    if _SessionFactory is None:
        raise RuntimeError("Seed database not opened. Call init_engine_from_url() first.")
    return _SessionFactory


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Commit on normal exit, roll back and re-raise on error."""
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("seed_write_rolled_back", exc_info=True)
        raise
    finally:
        session.close()


def create_tables() -> None:
    """Create the ``currency_definitions`` table if it does not exist."""
    from currency_kernel.db.base import Base
    import currency_kernel.models  # noqa: F401

    if _engine is None:
        raise RuntimeError("Seed database not opened. Call init_engine_from_url() first.")
    Base.metadata.create_all(_engine)


def reset_engine() -> None:
    """Dispose the engine and forget the session factory."""
    global _engine, _SessionFactory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionFactory = None
