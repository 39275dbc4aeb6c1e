"""Database layer: declarative base and engine/session helpers."""

from ifrs_kernel.db.base import Base
from ifrs_kernel.db.engine import (
    create_reporting_engine,
    create_tables,
    drop_tables,
    make_session_factory,
    session_scope,
)

__all__ = [
    "Base",
    "create_reporting_engine",
    "create_tables",
    "drop_tables",
    "make_session_factory",
    "session_scope",
]
