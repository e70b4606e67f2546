"""Reservation model: a tenant's claim on a property for a date range."""

import enum
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from staybook.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ReservationStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


class PricingType(str, enum.Enum):
    NORMAL = "NORMAL"
    DISCOUNT = "DISCOUNT"
    FREE = "FREE"


# Statuses that occupy calendar space.
ACTIVE_STATUSES = (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)


class Reservation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A booking of one property by one tenant.

    ``start_date`` and ``end_date`` are calendar dates; ``nights`` is their
    difference in days. ``total_price`` is always ``unit_price_applied * nights``.
    """

    __tablename__ = "reservations"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus, native_enum=False, length=16),
        nullable=False,
        default=ReservationStatus.PENDING,
    )

    # Pricing snapshot
    unit_price_applied: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    pricing_type: Mapped[PricingType] = mapped_column(
        Enum(PricingType, native_enum=False, length=16),
        nullable=False,
        default=PricingType.NORMAL,
    )
    pricing_reason: Mapped[str | None] = mapped_column(String(255), default=None)
    priced_by: Mapped[str | None] = mapped_column(String(64), default=None)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_reservations_date_order"),
        Index(
            "ix_reservations_property_status_dates",
            "property_id",
            "status",
            "start_date",
            "end_date",
        ),
    )

    @property
    def nights(self) -> int:
        return (self.end_date - self.start_date).days

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, property_id={self.property_id}, "
            f"tenant_id={self.tenant_id!r}, status={self.status.value})>"
        )
