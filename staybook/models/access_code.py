"""PropertyAccessCode model: single-use invitations to a property.

Only derived hashes are stored: ``code_lookup`` (SHA-256 hex, unique, used as
the index for redemption) and ``code_hash`` (bcrypt, the actual secret check).
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from staybook.clock import as_utc, utc_now
from staybook.database import Base, UUIDPrimaryKeyMixin


class CodeDisposition(str, enum.Enum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    REDEEMED = "REDEEMED"
    REVOKED = "REVOKED"


class PropertyAccessCode(UUIDPrimaryKeyMixin, Base):
    """An invitation code issued by a property owner to one e-mail address."""

    __tablename__ = "property_access_codes"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    issued_to_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    code_lookup: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    code_hash: Mapped[str] = mapped_column(String(100), nullable=False)
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, server_default=func.now()
    )
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    redeemed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    redeemed_by: Mapped[str | None] = mapped_column(String(64), default=None)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    revoked_by: Mapped[str | None] = mapped_column(String(64), default=None)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    @property
    def is_redeemed(self) -> bool:
        return self.redeemed_at is not None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return as_utc(self.expires_at) <= (now or utc_now())

    def is_active(self, now: datetime | None = None) -> bool:
        return not self.is_revoked and not self.is_redeemed and not self.is_expired(now)

    def disposition(self, now: datetime | None = None) -> CodeDisposition:
        """Current disposition; revoked wins over redeemed, redeemed over expired."""
        if self.is_revoked:
            return CodeDisposition.REVOKED
        if self.is_redeemed:
            return CodeDisposition.REDEEMED
        if self.is_expired(now):
            return CodeDisposition.EXPIRED
        return CodeDisposition.ACTIVE

    def is_issued_to(self, email: str | None) -> bool:
        return email is not None and self.issued_to_email == email.strip().lower()

    def __repr__(self) -> str:
        return f"<PropertyAccessCode(id={self.id}, property_id={self.property_id})>"
