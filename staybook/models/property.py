"""Property model: bookable inventory owned by a principal."""

import enum
from decimal import Decimal

from sqlalchemy import CheckConstraint, Enum, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from staybook.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PropertyStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A bookable unit. Reservations and access codes point at it by id."""

    __tablename__ = "properties"

    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, default=None)
    city: Mapped[str | None] = mapped_column(String(120), default=None, index=True)
    price_per_night: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[PropertyStatus] = mapped_column(
        Enum(PropertyStatus, native_enum=False, length=16),
        nullable=False,
        default=PropertyStatus.ACTIVE,
        index=True,
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (CheckConstraint("price_per_night > 0", name="ck_properties_price_positive"),)

    @property
    def is_bookable(self) -> bool:
        return self.status == PropertyStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title!r}, status={self.status.value})>"
