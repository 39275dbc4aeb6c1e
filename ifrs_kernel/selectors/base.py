"""
Read-only selectors over the ledger tables.

A selector runs SELECTs against a session it was handed and returns domain
value objects built by each model's ``to_domain``; ORM rows never leave the
selector.  Selectors never add, flush or commit.
"""

from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from ifrs_kernel.db.base import Base
from ifrs_kernel.logging_config import get_logger

ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger("selectors")


class BaseSelector(Generic[ModelType]):
    model: ClassVar[type[Base]]

    def __init__(self, session: Session):
        self.session = session

    def query(self) -> Select:
        return select(self.model)

    def fetch(self, stmt: Select, event: str, **fields: Any) -> tuple[Any, ...]:
        """Run ``stmt`` and convert every row; logs ``event`` with the row count."""
        rows = self.session.scalars(stmt).all()
        logger.debug(event, extra={"row_count": len(rows), **fields})
        return tuple(row.to_domain() for row in rows)
