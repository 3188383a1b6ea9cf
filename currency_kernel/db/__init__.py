"""Database layer - engine and base class."""

from currency_kernel.db.base import Base
from currency_kernel.db.engine import (
    create_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)

__all__ = [
    "Base",
    "init_engine_from_url",
    "get_session_factory",
    "session_scope",
    "create_tables",
    "reset_engine",
]
