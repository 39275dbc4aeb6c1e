"""
Engine and session helpers for the SQL-backed collaborators.

Every helper takes the engine or session factory explicitly; there is no
process-wide engine.  An unparseable URL raises sqlalchemy's ArgumentError;
an unreachable database surfaces as OperationalError on the first query,
which the reporting service wraps in a StructuralError.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from ifrs_kernel.logging_config import get_logger

logger = get_logger("db.engine")


def _engine_options(url: URL, pool_size: int, max_overflow: int) -> dict[str, Any]:
    if url.get_backend_name() == "sqlite":
        # Collaborator queries run in asyncio.to_thread workers.
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_size": pool_size, "max_overflow": max_overflow, "pool_pre_ping": True}


def create_reporting_engine(
    database_url: str | URL,
    echo: bool = False,
    pool_size: int = 10,
    max_overflow: int = 5,
) -> Engine:
    url = make_url(database_url)
    engine = create_engine(url, echo=echo, **_engine_options(url, pool_size, max_overflow))
    logger.info(
        "engine_created",
        extra={"dialect": url.get_backend_name(), "database": url.database},
    )
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Iterator[Session]:
    """
    One session in one transaction: committed when the block exits cleanly,
    rolled back when it raises.  The session is closed either way.
    """
    with factory() as session:
        try:
            with session.begin():
                yield session
        except Exception:
            logger.warning("transaction_rolled_back", exc_info=True)
            raise


def _metadata() -> MetaData:
    from ifrs_kernel.db.base import Base
    import ifrs_kernel.models  # noqa: F401  registers the mappers

    return Base.metadata


def create_tables(engine: Engine) -> None:
    metadata = _metadata()
    metadata.create_all(engine)
    logger.info("tables_created", extra={"tables": sorted(metadata.tables)})


def drop_tables(engine: Engine) -> None:
    _metadata().drop_all(engine)
    logger.info("tables_dropped")
