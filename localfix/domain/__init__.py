"""Domain records and value objects shared by every storage backend."""

from .entities import (
    Booking,
    BookingStatus,
    NewBooking,
    NewProvider,
    NewProviderCategory,
    NewReview,
    NewServiceCategory,
    NewUser,
    Provider,
    ProviderCategory,
    ProviderWithUser,
    Review,
    ServiceCategory,
    User,
    UserRole,
    UserSummary,
    merge,
)
from .values import DecimalString

__all__ = [
    "Booking",
    "BookingStatus",
    "DecimalString",
    "NewBooking",
    "NewProvider",
    "NewProviderCategory",
    "NewReview",
    "NewServiceCategory",
    "NewUser",
    "Provider",
    "ProviderCategory",
    "ProviderWithUser",
    "Review",
    "ServiceCategory",
    "User",
    "UserRole",
    "UserSummary",
    "merge",
]
