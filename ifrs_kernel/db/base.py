"""
Declarative base for the ledger read models.

The reporting side only queries these tables.  Column types come from the
annotation map: money is fixed-point Numeric, never Float, and identifiers
use SQLAlchemy's ``Uuid`` type so SQLite and PostgreSQL both hand back
``uuid.UUID`` values.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import Date, DateTime, MetaData, Numeric, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

MONEY = Numeric(38, 9)

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map: ClassVar[dict] = {
        Decimal: MONEY,
        date: Date(),
        datetime: DateTime(timezone=True),
        UUID: Uuid(as_uuid=True),
    }

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
