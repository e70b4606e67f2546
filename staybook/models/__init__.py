"""SQLAlchemy models for Staybook.

All models are imported here so that Alembic and ``Base.metadata.create_all``
can discover them. If you add a new model, import it in this file.
"""

from staybook.models.access_code import CodeDisposition, PropertyAccessCode
from staybook.models.property import Property, PropertyStatus
from staybook.models.reservation import (
    ACTIVE_STATUSES,
    PricingType,
    Reservation,
    ReservationStatus,
)

__all__ = [
    "ACTIVE_STATUSES",
    "CodeDisposition",
    "PricingType",
    "Property",
    "PropertyAccessCode",
    "PropertyStatus",
    "Reservation",
    "ReservationStatus",
]
