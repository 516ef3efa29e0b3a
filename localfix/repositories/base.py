"""Storage contract shared by the in-memory and SQL backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Mapping, Optional
import uuid

from localfix.domain import (
    Booking,
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
)

Updates = Mapping[str, Any]


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Storage(ABC):
    """Asynchronous persistence port for the marketplace records.

    Lookups of unknown ids return ``None``; updates of unknown ids return
    ``None`` without creating anything; ``delete_review`` reports whether a
    row was removed. List operations return every matching record. Keyword
    filters that are ``None`` are ignored, the rest combine with AND.
    """

    name: str = "storage"

    async def initialize(self) -> None:
        """Prepare the backend (schema, seed data) before first use."""

    async def close(self) -> None:
        """Release backend resources."""

    # -------------------------- users --------------------------
    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]:
        """Return the user with ``user_id``."""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Return the first user registered with ``email``."""

    @abstractmethod
    async def list_users(self) -> list[User]:
        """Return all users."""

    @abstractmethod
    async def create_user(self, data: NewUser) -> User:
        """Persist a new user; ``role`` defaults to ``customer``."""

    @abstractmethod
    async def update_user(self, user_id: str, updates: Updates) -> Optional[User]:
        """Merge ``updates`` into the stored user."""

    # -------------------------- service categories --------------------------
    @abstractmethod
    async def get_service_category(self, category_id: str) -> Optional[ServiceCategory]:
        """Return a category by id."""

    @abstractmethod
    async def list_service_categories(self) -> list[ServiceCategory]:
        """Return all service categories."""

    @abstractmethod
    async def create_service_category(self, data: NewServiceCategory) -> ServiceCategory:
        """Persist a new service category."""

    # -------------------------- providers --------------------------
    @abstractmethod
    async def get_provider(self, provider_id: str) -> Optional[Provider]:
        """Return a provider by id."""

    @abstractmethod
    async def get_provider_by_user_id(self, user_id: str) -> Optional[Provider]:
        """Return the provider profile owned by ``user_id``."""

    @abstractmethod
    async def list_providers(
        self,
        *,
        category_id: Optional[str] = None,
        location: Optional[str] = None,
        is_approved: Optional[bool] = None,
    ) -> list[ProviderWithUser]:
        """List providers with their owner's summary attached.

        ``is_approved`` matches exactly, ``location`` is a case-insensitive
        substring and ``category_id`` must be among the provider's categories.
        """

    @abstractmethod
    async def create_provider(self, data: NewProvider) -> Provider:
        """Persist a new provider with rating ``"0"`` and no reviews."""

    @abstractmethod
    async def update_provider(self, provider_id: str, updates: Updates) -> Optional[Provider]:
        """Merge ``updates`` into the stored provider."""

    # -------------------------- provider categories --------------------------
    @abstractmethod
    async def list_provider_categories(self, provider_id: str) -> list[ProviderCategory]:
        """Return the category links of a provider."""

    @abstractmethod
    async def create_provider_category(self, data: NewProviderCategory) -> ProviderCategory:
        """Link a provider to a category."""

    # -------------------------- bookings --------------------------
    @abstractmethod
    async def get_booking(self, booking_id: str) -> Optional[Booking]:
        """Return a booking by id."""

    @abstractmethod
    async def list_bookings(
        self,
        *,
        customer_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Booking]:
        """List bookings matching every given filter exactly."""

    @abstractmethod
    async def create_booking(self, data: NewBooking) -> Booking:
        """Persist a new booking; ``status`` defaults to ``pending``."""

    @abstractmethod
    async def update_booking(self, booking_id: str, updates: Updates) -> Optional[Booking]:
        """Merge ``updates`` into the stored booking."""

    # -------------------------- reviews --------------------------
    @abstractmethod
    async def get_review(self, review_id: str) -> Optional[Review]:
        """Return a review by id, visible or not."""

    @abstractmethod
    async def list_reviews(self, provider_id: str) -> list[Review]:
        """Return the visible reviews of a provider."""

    @abstractmethod
    async def create_review(self, data: NewReview) -> Review:
        """Persist a new review, visible unless stated otherwise."""

    @abstractmethod
    async def update_review(self, review_id: str, updates: Updates) -> Optional[Review]:
        """Merge ``updates`` into the stored review."""

    @abstractmethod
    async def delete_review(self, review_id: str) -> bool:
        """Delete a review; ``False`` when it did not exist."""
