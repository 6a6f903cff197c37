from sqlalchemy import Date, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from datetime import date
from investflow.database.base import Base


class Portfolio(Base):
    """
    SQLAlchemy model for a Portfolio.

    A recurring investment plan: a fixed amount contributed every month for a
    number of months. `id`, `created_at` and `updated_at` are assigned on
    insert and are never supplied by callers.
    """
    __tablename__ = "portfolios"

    # Primary key assigned by the store (autoincrement integer)
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    # Display name, unique across all portfolios.
    # The UNIQUE constraint backs up the service-level pre-check so two
    # concurrent creators cannot both insert the same name.
    name: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False
    )

    # Contribution per month
    monthly_amount: Mapped[float] = mapped_column(
        Float,
        nullable=False
    )

    duration_months: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )

    # Set once on insert
    created_at: Mapped[date] = mapped_column(
        Date,
        default=date.today,
        nullable=False
    )

    # Set on insert, refreshed on every UPDATE
    updated_at: Mapped[date] = mapped_column(
        Date,
        default=date.today,
        onupdate=date.today,
        nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<Portfolio(id={self.id!r}, name={self.name!r}, "
            f"monthly_amount={self.monthly_amount!r}, duration_months={self.duration_months!r})>"
        )
