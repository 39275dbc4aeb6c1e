"""
Module: ifrs_kernel.models.fixed_asset
Responsibility: ORM persistence for the fixed asset register read by
    SqlFixedAssetRegister.
Architecture position: Kernel > Models.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from ifrs_kernel.db.base import Base
from ifrs_kernel.domain.ledger import FixedAsset, FixedAssetStatus


class FixedAssetModel(Base):
    __tablename__ = "fixed_assets"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    acquisition_date: Mapped[date] = mapped_column(nullable=False)

    cost: Mapped[Decimal] = mapped_column(nullable=False)

    residual_value: Mapped[Decimal] = mapped_column(default=Decimal("0"), nullable=False)

    useful_life_years: Mapped[int] = mapped_column(Integer, nullable=False)

    accumulated_depreciation: Mapped[Decimal] = mapped_column(
        default=Decimal("0"),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        default=FixedAssetStatus.ACTIVE.value,
        nullable=False,
    )

    disposal_date: Mapped[date | None] = mapped_column(nullable=True)

    disposal_price: Mapped[Decimal | None] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"<FixedAssetModel {self.name} ({self.status})>"

    def to_domain(self) -> FixedAsset:
        return FixedAsset(
            asset_id=self.id,
            name=self.name,
            acquisition_date=self.acquisition_date,
            cost=Decimal(self.cost),
            residual_value=Decimal(self.residual_value),
            useful_life_years=self.useful_life_years,
            accumulated_depreciation=Decimal(self.accumulated_depreciation),
            status=FixedAssetStatus(self.status),
            disposal_date=self.disposal_date,
            disposal_price=(
                Decimal(self.disposal_price)
                if self.disposal_price is not None
                else None
            ),
        )
