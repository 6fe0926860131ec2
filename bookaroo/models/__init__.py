"""SQLAlchemy models for Bookaroo.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from bookaroo.models.booking import Booking, BookingStatus
from bookaroo.models.property import Property, PropertyImage
from bookaroo.models.user import User, UserRole

__all__ = [
    "Booking",
    "BookingStatus",
    "Property",
    "PropertyImage",
    "User",
    "UserRole",
]
